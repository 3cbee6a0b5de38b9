"""
EXIF access for photos: capture time in, GPS position out.
Backed by piexif, so only JPEG files are handled.
"""

import struct
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

import piexif

from ..core.timestamps import parse_timestamp
from ..core.track_series import GeoSample
from ..utils.geo_utils import decimal_to_dms
from ..utils.logger import get_logger

logger = get_logger(__name__)

Rational = Tuple[int, int]

# Most specific first
CAPTURE_TIME_TAGS = (
    ("Exif", piexif.ExifIFD.DateTimeOriginal),
    ("Exif", piexif.ExifIFD.DateTimeDigitized),
    ("0th", piexif.ImageIFD.DateTime),
)


def _rational(value: float, denominator: int) -> Rational:
    return int(round(value * denominator)), denominator


def _dms_rationals(value: float) -> Tuple[Rational, Rational, Rational]:
    degrees, minutes, seconds = decimal_to_dms(value)
    return (degrees, 1), (minutes, 1), _rational(seconds, 1000)


def capture_time_from_exif(exif_dict: Dict) -> Optional[datetime]:
    """
    Capture time recorded in an EXIF dictionary.

    Tries DateTimeOriginal, DateTimeDigitized, then DateTime.

    Args:
        exif_dict: Dictionary as returned by ``piexif.load``

    Returns:
        UTC datetime, or None if no tag holds a parseable time
    """
    for ifd, tag in CAPTURE_TIME_TAGS:
        raw = exif_dict.get(ifd, {}).get(tag)
        if not raw:
            continue
        if isinstance(raw, bytes):
            raw = raw.decode('ascii', errors='ignore')
        timestamp = parse_timestamp(raw.strip('\x00 '))
        if timestamp is not None:
            return timestamp
    return None


def build_gps_ifd(sample: GeoSample) -> Dict[int, object]:
    """
    EXIF GPS IFD describing a track sample.

    Args:
        sample: Position to record

    Returns:
        Dictionary of ``piexif.GPSIFD`` tags
    """
    utc_time = sample.timestamp.astimezone(timezone.utc)
    seconds = utc_time.second + utc_time.microsecond / 1e6

    gps_ifd = {
        piexif.GPSIFD.GPSVersionID: (2, 3, 0, 0),
        piexif.GPSIFD.GPSLatitudeRef: 'N' if sample.latitude >= 0 else 'S',
        piexif.GPSIFD.GPSLatitude: _dms_rationals(sample.latitude),
        piexif.GPSIFD.GPSLongitudeRef: 'E' if sample.longitude >= 0 else 'W',
        piexif.GPSIFD.GPSLongitude: _dms_rationals(sample.longitude),
        piexif.GPSIFD.GPSMapDatum: 'WGS-84',
        piexif.GPSIFD.GPSDateStamp: utc_time.strftime('%Y:%m:%d'),
        piexif.GPSIFD.GPSTimeStamp: (
            (utc_time.hour, 1),
            (utc_time.minute, 1),
            _rational(seconds, 1000),
        ),
    }

    if sample.elevation is not None:
        gps_ifd[piexif.GPSIFD.GPSAltitudeRef] = 0 if sample.elevation >= 0 else 1
        gps_ifd[piexif.GPSIFD.GPSAltitude] = _rational(abs(sample.elevation), 100)

    return gps_ifd


class ExifTagger:
    """
    Reads capture times from and writes GPS tags to photo files.
    """

    def __init__(
        self,
        extensions: Iterable[str] = (".jpg", ".jpeg"),
        fallback_to_mtime: bool = True
    ):
        """
        Initialize EXIF tagger.

        Args:
            extensions: Supported file extensions (with leading dot)
            fallback_to_mtime: Use the file modification time when the
                EXIF data carries no capture time
        """
        self.extensions = frozenset(ext.lower() for ext in extensions)
        self.fallback_to_mtime = fallback_to_mtime

    def is_supported(self, path: Path) -> bool:
        """Check the file extension against the supported set."""
        return Path(path).suffix.lower() in self.extensions

    def read_capture_time(self, path: Path) -> Optional[datetime]:
        """
        Capture time of a photo.

        Returns:
            UTC datetime from EXIF, else the modification time (if enabled);
            None if the image cannot be read
        """
        path = Path(path)
        try:
            exif_dict = piexif.load(str(path))
        except (OSError, ValueError, struct.error) as e:
            logger.warning(f"Error reading image {path}: {e}")
            return None

        timestamp = capture_time_from_exif(exif_dict)
        if timestamp is None and self.fallback_to_mtime:
            timestamp = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
            logger.debug(f"No EXIF capture time in {path}, using modification time {timestamp}")
        return timestamp

    def write_geotag(self, path: Path, sample: GeoSample) -> bool:
        """
        Replace the GPS tags of a photo in place.

        Returns:
            True if the file was updated
        """
        path = Path(path)
        try:
            exif_dict = piexif.load(str(path))
            exif_dict['GPS'] = build_gps_ifd(sample)
            piexif.insert(piexif.dump(exif_dict), str(path))
        except (OSError, ValueError, struct.error) as e:
            logger.error(f"Failed to update metadata for {path}: {e}")
            return False

        logger.info(f"Geotagged {path} @ ({sample.latitude:.6f}, {sample.longitude:.6f})")
        return True
