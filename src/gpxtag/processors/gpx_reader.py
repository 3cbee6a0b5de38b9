"""
GPX track reader.
Turns GPX documents into raw track points and merged track series.
"""

import xml.etree.ElementTree as ET
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..core.exceptions import NoTrackDataError
from ..core.track_series import (
    GeoSample,
    RawPoint,
    TrackSeries,
    select_best_candidate,
)
from ..utils.logger import get_logger

logger = get_logger(__name__)


class GpxNamespace(Enum):
    """Where a producer may have put its track points."""
    GPX_1_1 = "http://www.topografix.com/GPX/1/1"
    GPX_1_0 = "http://www.topografix.com/GPX/1/0"
    NONE = ""

    def tag(self, name: str) -> str:
        """Qualified ElementTree tag for a GPX element name."""
        return f"{{{self.value}}}{name}" if self.value else name


def _child_text(element: ET.Element, tag: str) -> Optional[str]:
    child = element.find(tag)
    if child is None:
        return None
    return child.text or ""


class GpxReader:
    """
    Reader for a single GPX file.

    Track points are collected once per namespace strategy; the strategy
    yielding the most usable samples wins, which copes with producers that
    use GPX 1.0, GPX 1.1 or no namespace at all.
    """

    def __init__(self, gpx_path: str):
        """
        Initialize GPX reader.

        Args:
            gpx_path: Path to the GPX file
        """
        self.gpx_path = Path(gpx_path)

    def read_candidates(self) -> Dict[GpxNamespace, List[RawPoint]]:
        """
        Collect raw track points under every namespace strategy.

        Returns:
            Candidate point lists keyed by strategy, in strategy order

        Raises:
            OSError: If the file cannot be read
            ET.ParseError: If the file is not well-formed XML
        """
        root = ET.parse(self.gpx_path).getroot()

        candidates = {}
        for namespace in GpxNamespace:
            candidates[namespace] = [
                RawPoint(
                    latitude=trkpt.get("lat"),
                    longitude=trkpt.get("lon"),
                    timestamp=_child_text(trkpt, namespace.tag("time")),
                    elevation=_child_text(trkpt, namespace.tag("ele")),
                )
                for trkpt in root.iter(namespace.tag("trkpt"))
            ]
        return candidates

    def load_samples(self) -> List[GeoSample]:
        """
        Load the usable samples of this file, sorted by time.

        Returns:
            Samples of the best namespace strategy; empty if the file
            cannot be read or holds no usable points
        """
        try:
            candidates = self.read_candidates()
        except (OSError, ET.ParseError) as e:
            logger.error(f"Failed to read GPX file {self.gpx_path}: {e}")
            return []

        samples = select_best_candidate(candidates.values())
        if not samples:
            logger.warning(f"No track points found in GPX file {self.gpx_path}")
        else:
            logger.debug(f"Read {len(samples)} track points from {self.gpx_path}")
        return samples


def load_tracks(gpx_paths: Iterable[str], max_workers: int = 1) -> TrackSeries:
    """
    Load and merge several GPX files into one track series.

    Files are parsed independently (in a thread pool when
    ``max_workers > 1``); the merge itself is single-threaded.

    Args:
        gpx_paths: GPX file paths
        max_workers: Number of files parsed concurrently

    Returns:
        Merged track series

    Raises:
        NoTrackDataError: If no file yields a usable track point
    """
    readers = [GpxReader(path) for path in gpx_paths]

    if max_workers > 1 and len(readers) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            per_file = list(pool.map(GpxReader.load_samples, readers))
    else:
        per_file = [reader.load_samples() for reader in readers]

    series = TrackSeries.merge(per_file)
    if series.is_empty:
        raise NoTrackDataError("No track points found across provided GPX files")
    return series
