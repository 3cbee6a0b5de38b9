"""Core modules for gpxtag."""

from .config import Config
from .exceptions import GpxTagError, NoTrackDataError
from .timestamps import parse_timestamp
from .track_series import GeoSample, RawPoint, TrackSeries, build_track_series

__all__ = [
    "Config",
    "GpxTagError",
    "NoTrackDataError",
    "parse_timestamp",
    "GeoSample",
    "RawPoint",
    "TrackSeries",
    "build_track_series",
]
