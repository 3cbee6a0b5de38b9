"""
Track series: merged, time-ordered GPS samples with point location.
Samples are parsed once at ingestion; lookups use binary search and never
mutate the series, so one series can serve many threads.
"""

import bisect
import math
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .exceptions import NoTrackDataError
from .timestamps import parse_timestamp
from ..utils.geo_utils import interpolate_optional, lerp, path_length
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Bracketing samples closer than this (seconds) are treated as coincident
INTERPOLATION_EPSILON_S = 1e-6

_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

RawValue = Union[str, float, int, None]


@dataclass(frozen=True)
class GeoSample:
    """Single track observation."""
    timestamp: datetime  # UTC, timezone-aware
    latitude: float
    longitude: float
    elevation: Optional[float] = None


@dataclass(frozen=True)
class RawPoint:
    """
    Track point as handed over by a track source, before validation.

    Fields are whatever the source found (text or numbers) or None when
    the source had nothing for them.
    """
    latitude: RawValue = None
    longitude: RawValue = None
    timestamp: Optional[str] = None
    elevation: RawValue = None


def parse_decimal(value: RawValue) -> Optional[float]:
    """
    Parse a finite decimal number.

    Accepts ints, floats and decimal text with optional sign and exponent.
    Returns None for anything else, including NaN and infinities.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not _DECIMAL_RE.match(text):
            return None
        result = float(text)
    else:
        return None
    return result if math.isfinite(result) else None


def parse_raw_point(raw: RawPoint) -> Optional[GeoSample]:
    """
    Resolve a raw point into a sample.

    Returns:
        GeoSample, or None if latitude, longitude or timestamp is missing
        or unparseable. An unparseable elevation becomes None.
    """
    lat = parse_decimal(raw.latitude)
    lon = parse_decimal(raw.longitude)
    if lat is None or lon is None:
        return None

    timestamp = parse_timestamp(raw.timestamp)
    if timestamp is None:
        if raw.timestamp is not None:
            logger.debug(f"Could not parse track point time '{raw.timestamp}'")
        return None

    return GeoSample(timestamp, lat, lon, parse_decimal(raw.elevation))


def _by_time(sample: GeoSample) -> datetime:
    return sample.timestamp


def parse_source(records: Iterable[RawPoint]) -> List[GeoSample]:
    """
    Parse every record of one source, dropping unusable ones.

    Returns:
        Surviving samples sorted by timestamp (stable)
    """
    samples = []
    dropped = 0
    for raw in records:
        sample = parse_raw_point(raw)
        if sample is None:
            dropped += 1
        else:
            samples.append(sample)

    if dropped:
        logger.debug(f"Dropped {dropped} unusable track points")

    samples.sort(key=_by_time)
    return samples


def select_best_candidate(candidates: Iterable[Iterable[RawPoint]]) -> List[GeoSample]:
    """
    Pick the extraction candidate with the most usable samples.

    A source may be read several ways (e.g. under different XML
    namespaces); each way yields a candidate record list. Ties go to the
    earliest candidate.

    Returns:
        Parsed, sorted samples of the winning candidate (empty if none)
    """
    best: List[GeoSample] = []
    for records in candidates:
        samples = parse_source(records)
        if len(samples) > len(best):
            best = samples
    return best


class TrackSeries:
    """
    Immutable, time-ordered sequence of GeoSample.

    Features:
    - Stable merge of any number of per-source sample lists
    - O(log n) point location with linear interpolation
    - No extrapolation outside the recorded time span
    """

    def __init__(self, samples: Iterable[GeoSample] = ()):
        """
        Build a series from samples in any order.

        Args:
            samples: Track samples; sorted stably by timestamp here
        """
        self._samples: Tuple[GeoSample, ...] = tuple(sorted(samples, key=_by_time))
        self._timestamps: Tuple[datetime, ...] = tuple(s.timestamp for s in self._samples)

    @classmethod
    def merge(cls, sample_lists: Iterable[Sequence[GeoSample]]) -> 'TrackSeries':
        """Concatenate per-source sample lists and re-sort them globally."""
        merged: List[GeoSample] = []
        for samples in sample_lists:
            merged.extend(samples)
        return cls(merged)

    @property
    def samples(self) -> Tuple[GeoSample, ...]:
        return self._samples

    @property
    def is_empty(self) -> bool:
        return not self._samples

    @property
    def start_time(self) -> Optional[datetime]:
        return self._timestamps[0] if self._timestamps else None

    @property
    def end_time(self) -> Optional[datetime]:
        return self._timestamps[-1] if self._timestamps else None

    def locate(self, timestamp: datetime) -> Optional[GeoSample]:
        """
        Position at a given instant.

        Complexity: O(log n) using binary search

        Args:
            timestamp: Query time, timezone-aware (compared as is)

        Returns:
            The first sample recorded exactly at ``timestamp``; otherwise a
            sample interpolated between its neighbours; None if the series
            is empty or ``timestamp`` lies outside the recorded span.
        """
        if not self._samples:
            return None

        if timestamp < self._timestamps[0] or timestamp > self._timestamps[-1]:
            return None

        idx = bisect.bisect_left(self._timestamps, timestamp)

        # Exact match (leftmost among duplicates)
        if self._timestamps[idx] == timestamp:
            return self._samples[idx]

        return _interpolate(self._samples[idx - 1], self._samples[idx], timestamp)

    def get_statistics(self) -> dict:
        """
        Get track statistics.

        Returns:
            Dictionary with point count, time span and path length
            (empty for an empty series)
        """
        if not self._samples:
            return {}

        duration_s = (self._timestamps[-1] - self._timestamps[0]).total_seconds()
        elevations = [s.elevation for s in self._samples if s.elevation is not None]

        return {
            'num_points': len(self._samples),
            'start_time': self._timestamps[0],
            'end_time': self._timestamps[-1],
            'duration_s': duration_s,
            'total_distance_m': path_length(
                [s.latitude for s in self._samples],
                [s.longitude for s in self._samples]
            ),
            'min_elevation_m': min(elevations) if elevations else None,
            'max_elevation_m': max(elevations) if elevations else None,
        }

    def __len__(self) -> int:
        return len(self._samples)

    def __getitem__(self, idx: int) -> GeoSample:
        return self._samples[idx]

    def __iter__(self) -> Iterator[GeoSample]:
        return iter(self._samples)

    def __repr__(self) -> str:
        return f"TrackSeries({len(self)} samples, {self.start_time} .. {self.end_time})"


def _interpolate(before: GeoSample, after: GeoSample, timestamp: datetime) -> GeoSample:
    total_s = (after.timestamp - before.timestamp).total_seconds()
    if abs(total_s) < INTERPOLATION_EPSILON_S:
        return before

    ratio = (timestamp - before.timestamp).total_seconds() / total_s

    return GeoSample(
        timestamp=timestamp,
        latitude=lerp(before.latitude, after.latitude, ratio),
        longitude=lerp(before.longitude, after.longitude, ratio),
        elevation=interpolate_optional(before.elevation, after.elevation, ratio),
    )


def locate(series: TrackSeries, timestamp: datetime) -> Optional[GeoSample]:
    """Functional form of ``TrackSeries.locate``."""
    return series.locate(timestamp)


def build_track_series(sources: Iterable[Iterable[RawPoint]]) -> TrackSeries:
    """
    Assemble a track series from raw point lists, one list per source.

    Each source is parsed and sorted on its own, then all sources are
    merged into one globally sorted series.

    Raises:
        NoTrackDataError: If no source contributes a usable sample
    """
    series = TrackSeries.merge(parse_source(records) for records in sources)
    if series.is_empty:
        raise NoTrackDataError("No usable track data")
    return series
