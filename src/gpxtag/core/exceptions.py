"""Exception types raised by gpxtag."""


class GpxTagError(Exception):
    """Base class for gpxtag errors."""


class NoTrackDataError(GpxTagError):
    """Raised when track sources yield no usable samples."""
