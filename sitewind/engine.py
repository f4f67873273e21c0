"""Site assessment: postcode lookup merged with the wind factor derivation."""

from __future__ import annotations

import logging
from typing import Optional

from sitewind.cache import DatasetCache, DatasetLoadError
from sitewind.datasets import DatasetPair, compute_fallback_wind, lookup_datasets
from sitewind.options import applicable_options
from sitewind.postcode import format_postcode, normalise_postcode
from sitewind.schemas import (
    BaseWind,
    DatasetSources,
    LookupStatus,
    SiteAssessment,
    SiteInput,
)
from sitewind.terrain import roughness_for
from sitewind.wind import basic_wind_pressure, compute_wind_factors

logger = logging.getLogger(__name__)


def assess_site(
    inp: SiteInput,
    datasets: Optional[DatasetPair],
    *,
    status: Optional[LookupStatus] = None,
) -> SiteAssessment:
    """Resolve wind and altitude for a site and derive its wind factors.

    Dataset wind wins over the fallback estimate. A manual altitude
    overrides the dataset altitude. Factors are only derived when both
    installation month and duration are known.

    Args:
        inp: Site form values
        datasets: Built indices, or ``None`` when they are unavailable
        status: Overrides the computed lookup status

    Returns:
        SiteAssessment for the site
    """
    key = normalise_postcode(inp.postcode)
    z0 = inp.terrain_roughness_z0_m or roughness_for(inp.terrain_category)
    if not key:
        return SiteAssessment(
            postcode="",
            status="idle",
            terrain_category=inp.terrain_category,
            terrain_roughness_z0_m=z0,
        )

    if datasets is not None:
        lookup = lookup_datasets(datasets, key)
        dataset_wind, dataset_altitude, altitude_match = lookup.wind, lookup.altitude, lookup.altitude_match
        status = status or "ready"
    else:
        dataset_wind, dataset_altitude, altitude_match = None, None, None
        status = status or "unavailable"

    wind = dataset_wind or compute_fallback_wind(key)
    warnings: list[str] = []
    if dataset_wind is None:
        warnings.append("Using deterministic fallback wind estimate (dataset match not found).")

    if inp.altitude_override_m is not None:
        altitude, altitude_source = inp.altitude_override_m, "override"
    elif dataset_altitude is not None:
        altitude, altitude_source = dataset_altitude, "dataset"
    else:
        altitude, altitude_source = None, None
        warnings.append("No altitude found for this postcode; enter it manually.")

    factors = None
    base_wind = None
    option_keys: list[str] = []
    if inp.installation_month and inp.duration_category:
        vb_map = wind.vb_map if wind.vb_map is not None else wind.speed_ms
        base_wind = BaseWind(
            speed_ms=wind.speed_ms,
            pressure_kpa=basic_wind_pressure(vb_map),
            vb_map_ms=vb_map,
        )
        factors = compute_wind_factors(
            installation_month=inp.installation_month,
            duration_category=inp.duration_category,
            altitude_m=altitude,
            reference_height_m=inp.fence_height_m,
            vb_map_ms=vb_map,
        )
        if factors.qb_kpa is not None:
            options = applicable_options(factors.qb_kpa, inp.fence_height_m)
            option_keys = [option.key for option in options]
    elif inp.duration_category:
        warnings.append("Select installation month.")
    elif inp.installation_month:
        warnings.append("Select expected duration.")

    return SiteAssessment(
        postcode=format_postcode(key),
        status=status,
        wind=wind,
        altitude=altitude,
        altitude_source=altitude_source,
        sources=DatasetSources(
            altitude=altitude_match,
            wind=dataset_wind.match if dataset_wind else None,
        ),
        terrain_category=inp.terrain_category,
        terrain_roughness_z0_m=z0,
        base_wind=base_wind,
        factors=factors,
        applicable_options=option_keys,
        warnings=warnings,
    )


async def assess_site_with_cache(inp: SiteInput, cache: DatasetCache) -> SiteAssessment:
    """Like :func:`assess_site`, loading the datasets through *cache*.

    A failed dataset build degrades to the fallback estimate with status
    ``unavailable``; the next call retries the build.
    """
    if not normalise_postcode(inp.postcode):
        return assess_site(inp, cache.get_sync())
    try:
        datasets = await cache.ensure()
    except DatasetLoadError as exc:
        logger.warning("Datasets unavailable, using fallback wind: %s", exc)
        return assess_site(inp, None, status="unavailable")
    return assess_site(inp, datasets)


__all__ = ["assess_site", "assess_site_with_cache"]
