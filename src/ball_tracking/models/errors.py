"""
Exceptions shared across the tracking pipeline.
"""


class ConfigValidationError(Exception):
    """Raised when config validation fails."""


class MalformedDetectionError(ValueError):
    """Raised when a raw detection is missing fields or has an invalid bbox."""
