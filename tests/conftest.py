from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import piexif
import pytest

from gpxtag.core.track_series import GeoSample, TrackSeries

T0 = datetime(2024, 5, 6, 12, 0, 0, tzinfo=timezone.utc)

# Smallest byte sequence piexif accepts as a JPEG: SOI, empty SOS, EOI
MINIMAL_JPEG = b"\xff\xd8\xff\xda\x00\x02\xff\xd9"


def at(seconds: float) -> datetime:
    """UTC instant ``seconds`` after T0."""
    return T0 + timedelta(seconds=seconds)


def gpx_document(points, version: str = "1.1") -> str:
    """
    Render a GPX document.

    ``points`` holds (lat, lon, time, ele) tuples; ``None`` leaves the
    attribute or element out. ``version`` is "1.1", "1.0" or "" (no namespace).
    """
    xmlns = f' xmlns="http://www.topografix.com/GPX/{version.replace(".", "/")}"' if version else ""
    rows = []
    for lat, lon, time, ele in points:
        attrs = ""
        if lat is not None:
            attrs += f' lat="{lat}"'
        if lon is not None:
            attrs += f' lon="{lon}"'
        children = ""
        if ele is not None:
            children += f"<ele>{ele}</ele>"
        if time is not None:
            children += f"<time>{time}</time>"
        rows.append(f"      <trkpt{attrs}>{children}</trkpt>")
    body = "\n".join(rows)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<gpx version="{version or "1.1"}" creator="tests"{xmlns}>\n'
        "  <trk>\n    <trkseg>\n"
        f"{body}\n"
        "    </trkseg>\n  </trk>\n</gpx>\n"
    )


@pytest.fixture
def write_gpx(tmp_path: Path):
    """Write a GPX file into tmp_path and return its path."""

    def _write(name: str, points, version: str = "1.1") -> Path:
        path = tmp_path / name
        path.write_text(gpx_document(points, version), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_jpeg(tmp_path: Path):
    """Write a minimal JPEG, optionally with an EXIF DateTimeOriginal."""

    def _write(name: str, capture_time: str | None = None, folder: Path | None = None) -> Path:
        path = (folder or tmp_path) / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(MINIMAL_JPEG)
        if capture_time is not None:
            exif = {"Exif": {piexif.ExifIFD.DateTimeOriginal: capture_time.encode("ascii")}}
            piexif.insert(piexif.dump(exif), str(path))
        return path

    return _write


@pytest.fixture
def two_point_series() -> TrackSeries:
    """0 s at (0, 0, 0 m) and 10 s at (10, 20, 100 m)."""
    return TrackSeries([
        GeoSample(at(0), 0.0, 0.0, 0.0),
        GeoSample(at(10), 10.0, 20.0, 100.0),
    ])


@pytest.fixture
def sample_track_points():
    """Two GPX points ten minutes apart, as (lat, lon, time, ele) tuples."""
    return [
        (47.0, 8.0, "2024-05-06T12:00:00Z", 400),
        (47.1, 8.1, "2024-05-06T12:10:00Z", 500),
    ]
