"""
Exceptions for the diff engine.
"""


class DiffEngineError(Exception):
    """
    Base class for errors raised by the diff engine.

    Attributes:
        message -- explanation of the error
        details -- additional details about the error
    """

    def __init__(self, message, details=None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class BackendError(DiffEngineError):
    """Exception raised when the version-control backend reports a failure."""


class PatchApplicationError(BackendError):
    """
    Exception raised when the backend refuses to apply a patch.

    The message is the backend's own error output, passed through unchanged.
    """


class StaleSelectionError(DiffEngineError):
    """
    Exception raised when selected lines do not belong to the diff they are
    applied to, usually because the diff was reloaded after the selection
    was made.
    """


class ConflictResolutionError(DiffEngineError):
    """Exception raised when a conflict resolution targets a missing region."""


class ImageDiffError(DiffEngineError):
    """Exception raised when pixel buffers do not match the declared canvas."""
