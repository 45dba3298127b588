from __future__ import annotations


class SparkiconError(RuntimeError):
    """Base class for sparkicon failures."""


class EncodingError(SparkiconError):
    """Raised when the pixel grid cannot be serialized into an image."""


class ConfigError(SparkiconError, ValueError):
    """Raised when a graph configuration is malformed."""
