"""
gpxtag - GPX track matching and photo geotagging
Matches capture times against GPS tracks and writes positions into EXIF.
"""

__version__ = "1.0.0"

from .core.config import Config
from .core.track_series import GeoSample, TrackSeries, build_track_series, locate
from .core.timestamps import parse_timestamp

__all__ = [
    "Config",
    "GeoSample",
    "TrackSeries",
    "build_track_series",
    "locate",
    "parse_timestamp",
    "__version__",
]
