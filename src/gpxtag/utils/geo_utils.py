"""
Geographic helper functions.
Linear interpolation primitives, great-circle distance for track statistics,
and degree/minute/second conversion for EXIF GPS tags.
"""

import numpy as np
from typing import Optional, Tuple


# Earth radius in meters
EARTH_RADIUS_M = 6371000.0


def path_length(latitudes, longitudes) -> float:
    """
    Total haversine length of a polyline, vectorized over all segments.

    Args:
        latitudes: Sequence of latitudes (degrees)
        longitudes: Sequence of longitudes (degrees)

    Returns:
        Length in meters (0.0 for fewer than two points)
    """
    lat = np.radians(np.asarray(latitudes, dtype=float))
    lon = np.radians(np.asarray(longitudes, dtype=float))
    if lat.size < 2:
        return 0.0

    dphi = np.diff(lat)
    dlambda = np.diff(lon)
    a = np.sin(dphi / 2) ** 2 + np.cos(lat[:-1]) * np.cos(lat[1:]) * np.sin(dlambda / 2) ** 2
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    return float(EARTH_RADIUS_M * c.sum())


def lerp(start: float, end: float, ratio: float) -> float:
    """Linear interpolation, no clamping."""
    return start + ratio * (end - start)


def interpolate_optional(
    start: Optional[float],
    end: Optional[float],
    ratio: float
) -> Optional[float]:
    """
    Interpolate a value that either endpoint may lack.

    Both present: linear interpolation. One present: that value unchanged.
    Neither: None.
    """
    if start is not None and end is not None:
        return lerp(start, end, ratio)
    if start is not None:
        return start
    return end


def decimal_to_dms(value: float) -> Tuple[int, int, float]:
    """
    Convert decimal degrees to unsigned (degrees, minutes, seconds).

    The sign is dropped; EXIF carries it in the N/S/E/W reference tags.
    """
    absolute = abs(value)
    degrees = int(np.floor(absolute))
    minutes_float = (absolute - degrees) * 60.0
    minutes = int(np.floor(minutes_float))
    seconds = (minutes_float - minutes) * 60.0
    return degrees, minutes, seconds
