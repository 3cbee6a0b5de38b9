"""
Geotagging workflow.
Loads GPX tracks, matches every photo of a folder against them and writes
the matched position into the photo's EXIF data.
"""

import glob
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from tqdm import tqdm

from ..core.config import Config
from ..core.exceptions import NoTrackDataError
from ..core.track_series import TrackSeries
from ..utils.logger import get_logger
from .exif_tagger import ExifTagger
from .gpx_reader import load_tracks

logger = get_logger(__name__)


@dataclass(frozen=True)
class GeotagSummary:
    """Outcome counts of one geotagging run."""
    success: int
    skipped: int

    @property
    def total(self) -> int:
        return self.success + self.skipped


def expand_geo_paths(patterns: Iterable[str]) -> List[Path]:
    """
    Expand GPX path arguments.

    Patterns containing ``*`` or ``?`` are globbed; everything else is
    resolved to an absolute path. Duplicates are dropped, order is kept.
    """
    paths: List[Path] = []
    for pattern in patterns:
        if any(ch in pattern for ch in "*?"):
            matches = sorted(glob.glob(pattern))
            if not matches:
                logger.warning(f"GPX pattern '{pattern}' matched no files")
            paths.extend(Path(m).resolve() for m in matches)
        else:
            paths.append(Path(pattern).resolve())

    return list(dict.fromkeys(paths))


class Geotagger:
    """
    Batch geotagger.

    Pipeline:
    1. Validate and load GPX files into one track series
    2. Collect supported photos of the media folder
    3. Match each photo's capture time against the track
    4. Write matched positions to EXIF
    """

    def __init__(self, config: Config):
        """
        Initialize geotagger.

        Args:
            config: Configuration object
        """
        config.validate()
        self.config = config
        self.tagger = ExifTagger(
            extensions=config.media.extensions,
            fallback_to_mtime=config.media.fallback_to_mtime
        )
        self.track: Optional[TrackSeries] = None

    def load_track(self, geo_paths: List[Path]) -> Optional[TrackSeries]:
        """
        Load all GPX files into a track series.

        Returns:
            Track series, or None if a file is missing or no usable
            track point was found
        """
        if not geo_paths:
            logger.error("At least one GPX file must be provided")
            return None

        missing = [path for path in geo_paths if not Path(path).is_file()]
        if missing:
            for path in missing:
                logger.error(f"GPX file not found: {path}")
            return None

        try:
            track = load_tracks([str(p) for p in geo_paths], self.config.track.max_workers)
        except NoTrackDataError as e:
            logger.error(str(e))
            return None

        logger.info(
            f"Loaded {len(track)} track points from {len(geo_paths)} GPX files "
            f"(from {track.start_time} to {track.end_time})"
        )
        return track

    def collect_media(self, media_folder: str) -> List[Path]:
        """
        Supported photos directly inside the media folder, sorted by name.
        """
        if not str(media_folder).strip():
            logger.error("A media folder path must be provided")
            return []

        folder = Path(media_folder)
        if not folder.is_dir():
            logger.error(f"Media folder not found: {folder}")
            return []

        supported = []
        for path in sorted(p for p in folder.iterdir() if p.is_file()):
            if self.tagger.is_supported(path):
                supported.append(path)
            else:
                logger.debug(f"Ignoring unsupported media type: {path}")

        if not supported:
            logger.warning(f"No supported media files found in {folder}")
        return supported

    def geotag_file(self, path: Path) -> bool:
        """
        Geotag a single photo.

        Returns:
            True if the photo was matched (and written unless dry run)
        """
        if not path.is_file():
            logger.warning(f"Media file not found: {path}")
            return False

        timestamp = self.tagger.read_capture_time(path)
        if timestamp is None:
            logger.warning(f"No capture timestamp available for {path}. Skipping.")
            return False

        sample = self.track.locate(timestamp)
        if sample is None:
            logger.warning(
                f"No matching geo data found for {path} at {timestamp}. Skipping."
            )
            return False

        if self.config.media.dry_run:
            logger.info(
                f"[DRY RUN] Would geotag {path} @ ({sample.latitude:.6f}, {sample.longitude:.6f})"
            )
            return True

        return self.tagger.write_geotag(path, sample)

    def run(self, geo_paths: List[Path], media_folder: str) -> int:
        """
        Run the complete workflow.

        Returns:
            Process exit code: 0 if at least one photo was geotagged
        """
        self.track = self.load_track(geo_paths)
        if self.track is None:
            return 1

        media_files = self.collect_media(media_folder)
        if not media_files:
            return 1

        success = 0
        skipped = 0
        for path in tqdm(
            media_files,
            desc="Geotagging",
            unit="file",
            disable=not self.config.media.show_progress
        ):
            if self.geotag_file(path):
                success += 1
            else:
                skipped += 1

        summary = GeotagSummary(success, skipped)
        logger.info(
            f"Completed geotagging. Success: {summary.success}, "
            f"Skipped: {summary.skipped}, Total: {summary.total}"
        )
        return 0 if summary.success > 0 else 1
