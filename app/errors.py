class PlantDocError(Exception):
    """Base class for pipeline failures surfaced to callers."""


class DecodeError(PlantDocError):
    """Image bytes could not be decoded."""


class ModelLoadError(PlantDocError):
    """Model asset is missing or malformed."""


class InferenceError(PlantDocError):
    """Forward pass failed: released handle, bad input shape or runtime error."""


class LabelLoadError(PlantDocError):
    """Label file unreadable. Recovered internally with the default labels."""
