"""FastAPI router for sitewind."""

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query

from sitewind import __version__
from sitewind.cache import DatasetCache, get_dataset_cache
from sitewind.engine import assess_site_with_cache
from sitewind.options import FENCE_OPTIONS
from sitewind.schemas import SiteAssessment, SiteInput
from sitewind.terrain import DEFAULT_TERRAIN_CATEGORY, TERRAIN_CATEGORIES
from sitewind.wind import DURATION_LABELS, MONTH_LABELS, ConfigurationError

router = APIRouter(prefix="/api")


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@router.get("/datasets/status")
async def datasets_status(cache: DatasetCache = Depends(get_dataset_cache)):
    """Report the dataset cache state without triggering a build."""
    data = cache.get_sync()
    return {
        "state": cache.state.value,
        "altitude_keys": len(data.altitude_index) if data else None,
        "wind_sectors": len(data.wind_index) if data else None,
        "last_error": str(cache.last_error) if cache.last_error else None,
    }


@router.get("/lookup", response_model=SiteAssessment)
async def lookup(
    postcode: str = Query(..., description="UK postcode"),
    cache: DatasetCache = Depends(get_dataset_cache),
):
    """Wind and altitude for a postcode, without project factors."""
    return await assess_site_with_cache(SiteInput(postcode=postcode), cache)


@router.post("/assess", response_model=SiteAssessment)
async def assess(request: SiteInput, cache: DatasetCache = Depends(get_dataset_cache)):
    """
    Assess a site from the form values.

    Args:
        request: SiteInput with postcode and project metadata

    Returns:
        SiteAssessment with wind, altitude and (when month and duration
        are given) the derived wind factors

    Raises:
        HTTPException: 400 for unsupported project metadata
    """
    try:
        return await assess_site_with_cache(request, cache)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=f"Configuration error: {str(e)}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/terrain")
async def terrain_categories():
    """Terrain categories with their roughness lengths."""
    return {
        "default": DEFAULT_TERRAIN_CATEGORY,
        "categories": [
            {"id": c.key, "title": c.title, "description": c.description, "z0_m": c.z0_m}
            for c in TERRAIN_CATEGORIES.values()
        ],
    }


@router.get("/durations")
async def durations():
    """Supported exposure durations."""
    return {"durations": [{"value": key, "label": label} for key, label in DURATION_LABELS.items()]}


@router.get("/months")
async def months():
    """Installation months for the seasonal factor."""
    return {"months": [{"value": number, "label": label} for number, label in enumerate(MONTH_LABELS, start=1)]}


@router.get("/options")
async def fence_options():
    """Fence and hoarding systems with their capacities."""
    return {
        "options": [
            {
                "id": o.key,
                "name": o.name,
                "capacity_kpa": o.capacity_kpa,
                "max_height_m": o.max_height_m,
            }
            for o in FENCE_OPTIONS.values()
        ]
    }


def create_app() -> FastAPI:
    """Standalone API application (no CORS, used by tests and embedding)."""
    app = FastAPI(
        title="Sitewind API",
        description="UK site wind data for temporary fencing",
        version=__version__,
    )
    app.include_router(router)
    return app
