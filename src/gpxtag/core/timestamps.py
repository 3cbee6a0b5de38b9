"""
Timestamp normalization.

Track producers and camera firmware disagree on how instants are written.
``parse_timestamp`` tries a fixed, ordered cascade of grammars and returns
the first successful interpretation as a timezone-aware UTC ``datetime``.
"""

from datetime import datetime, timezone
from typing import Callable, Optional, Tuple

from dateutil import parser as date_parser

# Two defaults that share no date field: any field dateutil had to borrow
# from the default shows up as a difference between the two parses.
_PROBE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))

EXIF_FORMAT = "%Y:%m:%d %H:%M:%S"
EXIF_FORMAT_NO_SECONDS = "%Y:%m:%d %H:%M"


def to_utc(value: datetime) -> datetime:
    """Anchor a naive datetime to UTC, or convert an aware one to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_iso(text: str) -> Optional[datetime]:
    try:
        return to_utc(date_parser.isoparse(text))
    except (ValueError, OverflowError):
        return None


def _parse_general(text: str) -> Optional[datetime]:
    try:
        first, second = (
            date_parser.parse(text, default=default) for default in _PROBE_DEFAULTS
        )
        if first != second:
            # Year, month or day missing from the text
            return None
        return to_utc(first)
    except (ValueError, OverflowError):
        return None


def _exact(fmt: str) -> Callable[[str], Optional[datetime]]:
    def parse(text: str) -> Optional[datetime]:
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            return None

    return parse


# Order matters: first success wins.
TIMESTAMP_PARSERS: Tuple[Callable[[str], Optional[datetime]], ...] = (
    _parse_iso,
    _parse_general,
    _exact(EXIF_FORMAT),
    _exact(EXIF_FORMAT_NO_SECONDS),
)


def parse_timestamp(text) -> Optional[datetime]:
    """
    Parse a textual timestamp into a UTC-aware datetime.

    Accepted encodings, tried in order:
        1. ISO 8601; zone-less values are taken as UTC, zoned ones converted.
        2. General date/time text (e.g. ``Mon, 06 May 2024 12:30:45 GMT``)
           that spells out year, month and day; zone-less values taken as UTC.
        3. ``YYYY:MM:DD HH:MM:SS`` (EXIF style), UTC.
        4. ``YYYY:MM:DD HH:MM``, UTC.

    Args:
        text: Candidate timestamp text

    Returns:
        UTC datetime, or None if no grammar accepts the text
    """
    if not isinstance(text, str):
        return None
    text = text.strip()
    if not text:
        return None

    for parse in TIMESTAMP_PARSERS:
        result = parse(text)
        if result is not None:
            return result
    return None
