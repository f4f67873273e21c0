"""CLI interface for sitewind."""

import asyncio
import json
import logging

import click
from pydantic import ValidationError

from sitewind import __version__
from sitewind.cache import DatasetCache, DatasetLoadError, get_dataset_cache
from sitewind.datasets import compute_fallback_wind, lookup_datasets
from sitewind.engine import assess_site_with_cache
from sitewind.formatters import (
    format_altitude,
    format_factor,
    format_pressure,
    format_roughness,
    format_wind_speed,
)
from sitewind.postcode import format_postcode, normalise_postcode
from sitewind.schemas import SiteInput
from sitewind.settings import get_settings
from sitewind.sources import file_loader
from sitewind.tables import create_summary_table, export_to_csv, lookup_rows_to_dataframe
from sitewind.terrain import DEFAULT_TERRAIN_CATEGORY, TERRAIN_CATEGORIES
from sitewind.wind import DURATION_LABELS, MONTH_LABELS, ConfigurationError, compute_wind_factors

FALLBACK_NOTE = "Using deterministic fallback wind estimate (dataset match not found)."


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _dataset_cache(altitude_file: str | None, wind_file: str | None) -> DatasetCache:
    if altitude_file and wind_file:
        return DatasetCache(loader=file_loader(altitude_file, wind_file))
    if altitude_file or wind_file:
        raise click.UsageError("Pass both --altitude-file and --wind-file, or neither.")
    return get_dataset_cache()


def _wind_line(speed_ms: float, pressure_kpa: float, source: str) -> str:
    return f"  Wind: {format_wind_speed(speed_ms)}, {format_pressure(pressure_kpa)} [{source}]"


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log dataset loading and column resolution")
def main(verbose: bool):
    """Sitewind - UK site wind data for temporary fencing."""
    _configure_logging(verbose)


@main.command()
@click.argument("postcodes", nargs=-1, required=True)
@click.option("--altitude-file", type=click.Path(exists=True, dir_okay=False), help="Altitude dataset CSV")
@click.option("--wind-file", type=click.Path(exists=True, dir_okay=False), help="Wind dataset CSV")
@click.option("--output", type=click.Path(), help="Write the results to a CSV file")
@click.option("--summary", is_flag=True, help="Print how many postcodes matched the datasets")
def check(
    postcodes: tuple[str, ...],
    altitude_file: str | None,
    wind_file: str | None,
    output: str | None,
    summary: bool,
):
    """Check dataset matches for one or more postcodes.

    Example: sitewind check "DA11 9AU" SW1A1AA
    """
    cache = _dataset_cache(altitude_file, wind_file)
    try:
        datasets = asyncio.run(cache.ensure())
    except DatasetLoadError as exc:
        raise click.ClickException(str(exc)) from exc

    rows = []
    for raw in postcodes:
        key = normalise_postcode(raw)
        if not key:
            click.echo(f"✖ {raw} → invalid postcode")
            continue

        lookup = lookup_datasets(datasets, key)
        wind = lookup.wind or compute_fallback_wind(key)
        altitude_source = f"dataset ({lookup.altitude_match})" if lookup.altitude_match else "fallback"
        wind_source = f"dataset ({wind.match})" if wind.source == "dataset" else "fallback"

        click.echo(f"\nPostcode: {format_postcode(key)}")
        click.echo(f"  Altitude: {format_altitude(lookup.altitude) or 'n/a'} [{altitude_source}]")
        click.echo(_wind_line(wind.speed_ms, wind.pressure_kpa, wind_source))
        if lookup.wind is None:
            click.echo(f"    ↳ {FALLBACK_NOTE}")

        rows.append(
            {
                "postcode": format_postcode(key),
                "altitude_m": lookup.altitude,
                "altitude_source": "dataset" if lookup.altitude_match else "fallback",
                "speed_ms": wind.speed_ms,
                "pressure_kpa": wind.pressure_kpa,
                "wind_source": wind.source,
                "wind_match": wind.match,
            }
        )

    df = lookup_rows_to_dataframe(rows)
    if summary and not df.empty:
        click.echo("\nSummary:")
        click.echo(create_summary_table(df).to_string(index=False))
    if output:
        export_to_csv(df, output)
        click.echo(f"\nResults saved to {output}")


@main.command()
@click.argument("postcode")
@click.option("--altitude-file", type=click.Path(exists=True, dir_okay=False), help="Altitude dataset CSV")
@click.option("--wind-file", type=click.Path(exists=True, dir_okay=False), help="Wind dataset CSV")
@click.option("--month", type=click.IntRange(1, 12), default=None, help="Installation month (1-12)")
@click.option("--duration", type=click.Choice(list(DURATION_LABELS)), default=None, help="Expected duration")
@click.option("--height", type=float, default=2.0, show_default=True, help="Fence height in metres")
@click.option(
    "--terrain",
    type=click.Choice(list(TERRAIN_CATEGORIES)),
    default=DEFAULT_TERRAIN_CATEGORY,
    show_default=True,
    help="Terrain category",
)
@click.option("--altitude", type=float, default=None, help="Manual altitude in m AOD")
def assess(
    postcode: str,
    altitude_file: str | None,
    wind_file: str | None,
    month: int | None,
    duration: str | None,
    height: float,
    terrain: str,
    altitude: float | None,
):
    """Full site assessment: wind, altitude, factors and fence options.

    Example: sitewind assess "SW1A 1AA" --month 5 --duration UNDER_4_MONTHS
    """
    if not normalise_postcode(postcode):
        raise click.BadParameter("invalid postcode", param_hint="POSTCODE")

    try:
        inp = SiteInput(
            postcode=postcode,
            altitude_override_m=altitude,
            fence_height_m=height,
            terrain_category=terrain,
            installation_month=month,
            duration_category=duration,
        )
    except ValidationError as exc:
        raise click.BadParameter(str(exc)) from exc
    cache = _dataset_cache(altitude_file, wind_file)
    try:
        result = asyncio.run(assess_site_with_cache(inp, cache))
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc

    wind = result.wind
    click.echo(f"Postcode: {result.postcode} [{result.status}]")
    click.echo(f"  Altitude: {format_altitude(result.altitude) or 'n/a'} [{result.altitude_source or 'none'}]")
    click.echo(_wind_line(wind.speed_ms, wind.pressure_kpa, f"{wind.source} ({wind.match})"))
    click.echo(
        f"  Terrain: {TERRAIN_CATEGORIES[result.terrain_category].title}, "
        f"z0 {format_roughness(result.terrain_roughness_z0_m)}"
    )

    factors = result.factors
    if factors is not None:
        click.echo(f"  Installed: {MONTH_LABELS[month - 1]}, {DURATION_LABELS[duration]}")
        click.echo(
            f"  Factors: c_prob {format_factor(factors.c_prob)}, "
            f"c_season {format_factor(factors.c_season)}, "
            f"c_alt {format_factor(factors.c_alt)}, "
            f"c_dir {format_factor(factors.c_dir)} "
            f"({factors.return_period_years}-year return period)"
        )
        click.echo(f"  Basic wind: vb {format_wind_speed(factors.vb_ms)}, qb {format_pressure(factors.qb_kpa)}")
        click.echo(f"  Fence options: {', '.join(result.applicable_options) or 'none'}")

    for warning in result.warnings:
        click.echo(f"    ↳ {warning}")


@main.command()
@click.option("--month", type=click.IntRange(1, 12), required=True, help="Installation month (1-12)")
@click.option("--duration", type=click.Choice(list(DURATION_LABELS)), required=True, help="Expected duration")
@click.option("--altitude", type=float, default=None, help="Site altitude in m AOD")
@click.option("--height", type=float, default=None, help="Reference height in m (default 10)")
@click.option("--vb-map", type=float, default=None, help="Map basic wind speed in m/s")
def factors(
    month: int,
    duration: str,
    altitude: float | None,
    height: float | None,
    vb_map: float | None,
):
    """Print the UK NA wind factors for a month and duration."""
    try:
        result = compute_wind_factors(
            installation_month=month,
            duration_category=duration,
            altitude_m=altitude,
            reference_height_m=height,
            vb_map_ms=vb_map,
        )
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(json.dumps(result.model_dump(), indent=2))


@main.command()
def serve():
    """Start the FastAPI server (JSON API)."""
    import uvicorn

    settings = get_settings()
    click.echo(f"Starting Sitewind server on http://localhost:{settings.port}")
    click.echo(f"  JSON API:   http://localhost:{settings.port}/api/")
    uvicorn.run("app.application:app", host=settings.host, port=settings.port, reload=True)


if __name__ == "__main__":
    main()
