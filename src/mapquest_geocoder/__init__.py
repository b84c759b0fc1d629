"""
MapQuest Geocoder
==================
Client for the MapQuest Geocoding Web Service, plus a CSV→GeoJSON batch
tool and the ``geo-mapquest`` command.

Public API::

    from mapquest_geocoder import MapquestGeocoder, LocationQuery, BatchGeocodeTool
"""

__version__ = "0.4.0"

from mapquest_geocoder.client import (  # noqa: E402
    MAX_BATCH_LOCATIONS,
    GeocoderConfig,
    LocationQuery,
    MapquestGeocoder,
)
from mapquest_geocoder.exceptions import (  # noqa: E402
    ColumnNotFoundError,
    ConfigError,
    GeocoderError,
    GeocodingError,
    OutputWriteError,
    ResponseParseError,
    ServiceError,
    TooManyLocationsError,
    ValidationError,
)
from mapquest_geocoder.tool import BatchGeocodeTool  # noqa: E402

__all__ = [
    "MapquestGeocoder",
    "GeocoderConfig",
    "LocationQuery",
    "MAX_BATCH_LOCATIONS",
    "BatchGeocodeTool",
    "GeocoderError",
    "ConfigError",
    "ValidationError",
    "TooManyLocationsError",
    "ColumnNotFoundError",
    "GeocodingError",
    "ServiceError",
    "ResponseParseError",
    "OutputWriteError",
]
