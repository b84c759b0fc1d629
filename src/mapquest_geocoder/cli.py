"""
MapQuest Geocoder — CLI Entry Point
====================================
Installed as the ``geo-mapquest`` command via ``pyproject.toml``.

Usage:
    geo-mapquest geocode "Hollywood and Highland, Los Angeles, CA" --all
    geo-mapquest batch --input data/stores.csv --output output/stores.geojson \\
                       --address-col address --extra-cols name,city

The API key is read from ``--api-key`` or the ``MAPQUEST_API_KEY``
environment variable.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from mapquest_geocoder.client import MapquestGeocoder
from mapquest_geocoder.exceptions import GeocoderError
from mapquest_geocoder.log import configure_logging
from mapquest_geocoder.tool import BatchGeocodeTool


@click.group(
    name="geo-mapquest",
    help="Geocode addresses with the MapQuest Geocoding Web Service.",
)
@click.option(
    "--api-key",
    envvar="MAPQUEST_API_KEY",
    default=None,
    help="MapQuest API key, exactly as issued. "
         "Can also be set via the MAPQUEST_API_KEY environment variable.",
)
@click.option("--https", is_flag=True, default=False, help="Send requests over HTTPS.")
@click.option("--debug", is_flag=True, default=False, help="Dump every HTTP request and response.")
@click.option("--timeout", type=float, default=None, help="Request timeout in seconds.")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def main(
    ctx: click.Context,
    api_key: str | None,
    https: bool,
    debug: bool,
    timeout: float | None,
    verbose: bool,
) -> None:
    """Store the shared options for the subcommands."""
    configure_logging(verbose)
    ctx.obj = {
        "api_key": api_key,
        "https": https,
        "debug": debug,
        "timeout": timeout,
        "verbose": verbose,
    }


def _build_geocoder(ctx: click.Context) -> MapquestGeocoder:
    """Create the client from the group options, exiting on bad config."""
    options = ctx.obj
    try:
        geocoder = MapquestGeocoder.from_config(options)
    except GeocoderError as exc:
        click.echo(f"Error: {exc.message}", err=True)
        sys.exit(1)
    ctx.call_on_close(geocoder.close)
    return geocoder


@main.command(help="Geocode a single address and print the match as JSON.")
@click.argument("address")
@click.option("--country", default=None, help="Country code to restrict the search to (adminArea1).")
@click.option("--all", "all_results", is_flag=True, default=False, help="Print every candidate match.")
@click.pass_context
def geocode(ctx: click.Context, address: str, country: str | None, all_results: bool) -> None:
    geocoder = _build_geocoder(ctx)
    if all_results:
        found: object = geocoder.geocode_all(address, country=country)
    else:
        found = geocoder.geocode(address, country=country)

    if not found:
        click.echo(f"No match for: {address}", err=True)
        sys.exit(1)
    click.echo(json.dumps(found, indent=2, ensure_ascii=False))


@main.command(help="Convert a CSV of up to 100 addresses to a GeoJSON FeatureCollection.")
@click.option(
    "--input", "-i", "input_path",
    required=True,
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
    help="Path to the input CSV file.",
)
@click.option(
    "--output", "-o", "output_path",
    required=True,
    type=click.Path(file_okay=True, dir_okay=False, path_type=Path),
    help="Path for the output GeoJSON file.",
)
@click.option(
    "--address-col",
    default="address",
    show_default=True,
    help="CSV column containing address strings.",
)
@click.option(
    "--extra-cols",
    default="",
    help="Comma-separated list of extra CSV columns to include in GeoJSON properties.",
)
@click.pass_context
def batch(
    ctx: click.Context,
    input_path: Path,
    output_path: Path,
    address_col: str,
    extra_cols: str,
) -> None:
    extra = [c.strip() for c in extra_cols.split(",") if c.strip()]

    tool = BatchGeocodeTool(
        input_path=input_path,
        output_path=output_path,
        geocoder=_build_geocoder(ctx),
        address_col=address_col,
        extra_cols=extra,
        verbose=ctx.obj["verbose"],
    )

    try:
        tool.run()
    except GeocoderError as exc:
        click.echo(f"Error: {exc.message}", err=True)
        sys.exit(1)

    matched = sum(1 for group in tool.results if group)
    click.echo(f"\nGeoJSON written to: {output_path}")
    click.echo(f"Geocoded: {matched}/{len(tool.results)} addresses successfully.")


if __name__ == "__main__":
    main()
