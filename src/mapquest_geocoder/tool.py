"""
MapQuest Geocoder — CSV Batch Tool
===================================
Geocodes the address column of a CSV file with a single batch request and
writes the best match for every row as a GeoJSON FeatureCollection.

Rows the service could not match are still written, with ``null``
geometry and ``geocode_success: false``, so the output always has one
feature per input row.

Usage::

    from pathlib import Path
    from mapquest_geocoder import BatchGeocodeTool, MapquestGeocoder

    BatchGeocodeTool(
        input_path=Path("data/stores.csv"),
        output_path=Path("output/stores.geojson"),
        geocoder=MapquestGeocoder("Your API key"),
        address_col="address",
        extra_cols=["name"],
    ).run()
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pandas as pd

from mapquest_geocoder.base_tool import GeoTool
from mapquest_geocoder.client import MAX_BATCH_LOCATIONS, LocationResult, MapquestGeocoder
from mapquest_geocoder.exceptions import OutputWriteError
from mapquest_geocoder.validators import Validators

logger = logging.getLogger("mapquest_geocoder.tool")


def location_to_feature(
    address: str,
    location: LocationResult | None,
    extra_props: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Convert one location dict to a GeoJSON Feature.

    Args:
        address: The address string from the input row.
        location: Best match for *address*, or ``None`` if unmatched.
        extra_props: Additional properties (e.g. other CSV columns).

    Returns:
        A GeoJSON Feature dict.  Geometry is ``None`` when there is no
        match or the match has no ``latLng``.
    """
    props: dict[str, Any] = {"address": address}
    geometry = None
    if location:
        lat_lng = location.get("latLng") or {}
        props.update(
            {key: value for key, value in location.items() if key not in ("latLng", "displayLatLng")}
        )
        if lat_lng.get("lat") is not None and lat_lng.get("lng") is not None:
            geometry = {
                "type": "Point",
                "coordinates": [float(lat_lng["lng"]), float(lat_lng["lat"])],
            }
    props["geocode_success"] = geometry is not None
    if extra_props:
        props.update(extra_props)

    return {"type": "Feature", "geometry": geometry, "properties": props}


class BatchGeocodeTool(GeoTool):
    """Geocode every address in a CSV file and write a GeoJSON output.

    Args:
        input_path: Path to the input CSV file.
        output_path: Path for the output GeoJSON file.
        geocoder: A configured :class:`MapquestGeocoder`.
        address_col: Name of the CSV column holding address strings.
        extra_cols: Additional CSV columns carried through as feature
                    properties.
        verbose: Enable DEBUG-level logging.
    """

    def __init__(
        self,
        input_path: Path,
        output_path: Path,
        geocoder: MapquestGeocoder,
        address_col: str = "address",
        extra_cols: list[str] | None = None,
        *,
        verbose: bool = False,
    ) -> None:
        super().__init__(input_path, output_path, verbose=verbose)
        self.geocoder = geocoder
        self.address_col = address_col
        self.extra_cols: list[str] = extra_cols or []

        self._results: list[list[LocationResult]] = []

    def validate_inputs(self) -> None:
        """Validate the CSV before the batch request is sent.

        Raises:
            ValidationError: If the file is missing or not a CSV.
            ColumnNotFoundError: If a required column is absent.
            TooManyLocationsError: If the CSV has more than 100 rows.
            OutputWriteError: If the output directory cannot be created.
        """
        Validators.assert_file_exists(self.input_path)
        Validators.assert_supported_extension(self.input_path, [".csv"])
        Validators.assert_output_dir_writable(self.output_path)

        df = pd.read_csv(self.input_path)
        Validators.assert_columns_exist(df, [self.address_col] + self.extra_cols)
        Validators.assert_batch_size(len(df), MAX_BATCH_LOCATIONS)
        logger.debug("Inputs validated successfully.")

    def process(self) -> None:
        """Send one batch request and write the GeoJSON output.

        Raises:
            OutputWriteError: If writing the output file fails.
        """
        df = pd.read_csv(self.input_path, dtype={self.address_col: str})
        addresses = df[self.address_col].fillna("").astype(str).tolist()
        logger.info("Geocoding %d addresses in one batch request...", len(addresses))

        self._results = self.geocoder.batch_geocode(addresses)
        if len(self._results) != len(addresses):
            logger.warning(
                "Service returned %d result groups for %d addresses.",
                len(self._results), len(addresses),
            )

        features = []
        for i, (_, row) in enumerate(df.iterrows()):
            group = self._results[i] if i < len(self._results) else []
            best = group[0] if group else None
            extra = {col: row[col] for col in self.extra_cols if col in row.index}
            feature = location_to_feature(addresses[i], best, extra_props=extra)
            if not feature["properties"]["geocode_success"]:
                logger.warning("  ✗ No match: %s", addresses[i])
            features.append(feature)

        self._write_geojson(features)

        success_count = sum(1 for f in features if f["properties"]["geocode_success"])
        logger.info(
            "Geocoding complete: %d/%d matched, %d unmatched.",
            success_count, len(features), len(features) - success_count,
        )

    def _write_geojson(self, features: list[dict[str, Any]]) -> None:
        geojson: dict[str, Any] = {
            "type": "FeatureCollection",
            "features": features,
        }

        try:
            with open(self.output_path, "w", encoding="utf-8") as fh:
                json.dump(geojson, fh, indent=2, ensure_ascii=False, default=str)
        except OSError as exc:
            raise OutputWriteError(str(self.output_path), str(exc)) from exc

    @property
    def results(self) -> list[list[LocationResult]]:
        """Result groups from the last run, or ``[]``."""
        return self._results
