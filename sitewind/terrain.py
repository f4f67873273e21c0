"""EN 1991-1-4 terrain categories and roughness lengths."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TerrainCategory:
    """A terrain category with its roughness length z0."""

    key: str
    title: str
    description: str
    z0_m: float


TERRAIN_CATEGORIES: dict[str, TerrainCategory] = {
    "0": TerrainCategory(
        key="0",
        title="Category 0 - Sea/coastal (open sea)",
        description="Sea or coastal area exposed to open sea.",
        z0_m=0.003,
    ),
    "I": TerrainCategory(
        key="I",
        title="Category I - Water/open flat",
        description="Lakes or areas with negligible vegetation and without obstacles.",
        z0_m=0.01,
    ),
    "II": TerrainCategory(
        key="II",
        title="Category II - Low vegetation",
        description="Areas with low vegetation and isolated obstacles (trees, buildings).",
        z0_m=0.05,
    ),
    "III": TerrainCategory(
        key="III",
        title="Category III - Regular cover",
        description="Areas with a regular cover of vegetation or buildings.",
        z0_m=0.3,
    ),
    "IV": TerrainCategory(
        key="IV",
        title="Category IV - Dense urban/high rise",
        description="At least 15% of surface covered by buildings with average height > 15 m.",
        z0_m=1.0,
    ),
}

DEFAULT_TERRAIN_CATEGORY = "III"


def get_terrain_category(key: Optional[str]) -> Optional[TerrainCategory]:
    if key is None:
        return None
    return TERRAIN_CATEGORIES.get(key)


def roughness_for(key: Optional[str]) -> float:
    """z0 for a category, falling back to the default category."""
    category = get_terrain_category(key) or TERRAIN_CATEGORIES[DEFAULT_TERRAIN_CATEGORY]
    return category.z0_m


__all__ = [
    "DEFAULT_TERRAIN_CATEGORY",
    "TERRAIN_CATEGORIES",
    "TerrainCategory",
    "get_terrain_category",
    "roughness_for",
]
