"""Processing modules for gpxtag."""

from .gpx_reader import GpxReader, load_tracks
from .exif_tagger import ExifTagger
from .geotagger import Geotagger

__all__ = ["GpxReader", "load_tracks", "ExifTagger", "Geotagger"]
