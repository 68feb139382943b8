"""
Exception taxonomy for the advisory service.

Only ``InvalidCoordinate``, ``UnknownHealthCode`` and ``NoDataAvailable`` ever
reach a caller. ``SourceUnavailable`` and ``InsightUnavailable`` are raised and
caught inside the service layer; ``RegionWarning`` is attached to results,
never raised.
"""


class AdvisoryError(Exception):
    """Base class for all advisory service errors."""


class InvalidCoordinate(AdvisoryError, ValueError):
    """Latitude/longitude missing, malformed or out of range."""


class UnknownHealthCode(AdvisoryError, ValueError):
    """A condition, symptom or activity code outside the recognised set."""

    def __init__(self, field, codes):
        self.field = field
        self.codes = sorted(codes)
        super().__init__(f"Unrecognised {field}: {', '.join(self.codes)}")


class SourceUnavailable(AdvisoryError):
    """A single data source failed (network, parse error or empty result)."""

    def __init__(self, source, message=''):
        self.source = source
        super().__init__(f"{source}: {message}" if message else source)


class NoDataAvailable(AdvisoryError):
    """Every data source was exhausted without a usable reading."""

    default_message = 'No valid air quality data found. Please try again later.'

    def __init__(self, message=None, sources_tried=None):
        self.sources_tried = list(sources_tried or [])
        super().__init__(message or self.default_message)


class InsightUnavailable(AdvisoryError):
    """Narrative insight generation failed."""


class RegionWarning(UserWarning):
    """Coordinate is valid but outside the declared service region."""
