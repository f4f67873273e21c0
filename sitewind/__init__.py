"""Sitewind - UK postcode wind and altitude lookup for temporary fencing."""

from sitewind.cache import DatasetCache, DatasetLoadError
from sitewind.datasets import (
    build_altitude_index,
    build_dataset_cache,
    build_wind_index,
    compute_fallback_wind,
    find_best_record,
    lookup_datasets,
)
from sitewind.engine import assess_site, assess_site_with_cache
from sitewind.schemas import SiteAssessment, SiteInput, WindFactors, WindResult
from sitewind.wind import ConfigurationError, compute_wind_factors, derive_wind_factors

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "assess_site",
    "assess_site_with_cache",
    "build_altitude_index",
    "build_dataset_cache",
    "build_wind_index",
    "compute_fallback_wind",
    "compute_wind_factors",
    "ConfigurationError",
    "DatasetCache",
    "DatasetLoadError",
    "derive_wind_factors",
    "find_best_record",
    "lookup_datasets",
    "SiteAssessment",
    "SiteInput",
    "WindFactors",
    "WindResult",
]
