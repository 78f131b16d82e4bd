"""Exception and warning types for the Tomato compiler."""


class TomatoError(Exception):
    """Base exception for Tomato errors."""

    pass


class SourceReadError(TomatoError):
    """Raised when the root source file cannot be read."""

    def __init__(self, path, reason: str):
        super().__init__(f"cannot read {path}: {reason}")
        self.path = path
        self.reason = reason


class TokenFileError(TomatoError):
    """Raised when a token override file has the wrong shape."""

    pass


class TomatoWarning(UserWarning):
    """Base class for non-fatal problems surfaced while compiling."""


class CircularImportWarning(TomatoWarning):
    """An @import refers to a file already on the current import path."""


class ImportFailedWarning(TomatoWarning):
    """An imported file could not be read and was replaced by a marker."""
