"""Exception hierarchy for ClearView AI."""


class ClearViewError(Exception):
    """Base class for all application errors."""


class ConfigurationError(ClearViewError):
    """Required settings are missing or malformed."""


class ImageDecodeError(ClearViewError):
    """An upload or payload could not be decoded as an image."""


class EditFailedError(ClearViewError):
    """The edit request completed but produced no usable result."""


class NoImageReturnedError(EditFailedError):
    """The model response carried no inline image part."""
