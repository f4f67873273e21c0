"""Pydantic schemas for sitewind data models."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from sitewind.postcode import format_postcode

WindSource = Literal["dataset", "fallback"]
TerrainCategoryId = Literal["0", "I", "II", "III", "IV"]
DurationCategory = Literal[
    "UNDER_3_DAYS",
    "UNDER_1_MONTH",
    "UNDER_2_MONTHS",
    "UNDER_4_MONTHS",
    "UNDER_A_YEAR",
    "OVER_A_YEAR",
]
LookupStatus = Literal["idle", "ready", "unavailable"]


class WindResult(BaseModel):
    """Map wind for a postcode, from the dataset or the fallback estimate."""

    model_config = ConfigDict(frozen=True)

    speed_ms: float = Field(..., description="Wind speed in m/s")
    pressure_kpa: float = Field(..., description="Wind pressure in kPa")
    vb_map: Optional[float] = Field(None, description="Mapped basic wind speed vb,map in m/s")
    source: WindSource
    match: str = Field(..., description="Dataset text (or key) that matched")
    match_key: str = Field(..., description="Normalised key that matched")


class WindFactors(BaseModel):
    """UK National Annex factors and the resulting basic wind."""

    model_config = ConfigDict(frozen=True)

    return_period_years: int
    c_prob: float
    c_season: float
    c_alt: float
    c_dir: float
    vb_ms: Optional[float] = Field(None, description="Basic wind speed vb in m/s")
    qb_kpa: Optional[float] = Field(None, description="Basic wind pressure qb in kPa")


class BaseWind(BaseModel):
    """Map wind before any site factors are applied."""

    model_config = ConfigDict(frozen=True)

    speed_ms: float
    pressure_kpa: float = Field(..., description="0.613 * vb,map^2 / 1000")
    vb_map_ms: float


class DatasetSources(BaseModel):
    """What each dataset matched for the queried postcode."""

    altitude: Optional[str] = None
    wind: Optional[str] = None


class SiteInput(BaseModel):
    """Project metadata as supplied by the site form."""

    postcode: str = Field(..., description="UK postcode, any formatting")
    distance_to_sea_km: Optional[float] = Field(None, ge=0, description="Distance to the sea in km")
    altitude_override_m: Optional[float] = Field(
        None, description="Manual altitude in m AOD; replaces the dataset value"
    )
    fence_height_m: float = Field(default=2.0, gt=0, description="Fence height in metres")
    terrain_category: TerrainCategoryId = Field(default="III", description="EN 1991-1-4 terrain category")
    terrain_roughness_z0_m: Optional[float] = Field(
        None, gt=0, description="Roughness length z0; defaults from the terrain category"
    )
    installation_month: Optional[int] = Field(None, ge=1, le=12, description="Month installed (1-12)")
    duration_category: Optional[DurationCategory] = Field(None, description="Expected duration on site")

    @computed_field
    @property
    def formatted_postcode(self) -> str:
        return format_postcode(self.postcode)


class SiteAssessment(BaseModel):
    """Lookup and wind derivation result for one site."""

    postcode: str = Field(..., description="Formatted postcode")
    status: LookupStatus
    wind: Optional[WindResult] = None
    altitude: Optional[float] = Field(None, description="Altitude used, m AOD")
    altitude_source: Optional[Literal["dataset", "override"]] = None
    sources: DatasetSources = Field(default_factory=DatasetSources)
    terrain_category: TerrainCategoryId = "III"
    terrain_roughness_z0_m: Optional[float] = None
    base_wind: Optional[BaseWind] = None
    factors: Optional[WindFactors] = None
    applicable_options: list[str] = Field(
        default_factory=list, description="Keys of fence options that resist qb at the fence height"
    )
    warnings: list[str] = Field(default_factory=list)


__all__ = [
    "BaseWind",
    "DatasetSources",
    "DurationCategory",
    "LookupStatus",
    "SiteAssessment",
    "SiteInput",
    "WindFactors",
    "WindResult",
    "WindSource",
]
