from pathlib import Path
from typing import Optional


class TempResourceError(OSError):
    """
    The common base of the errors raised by this package.

    Parameters
    ----------
    message
        The human readable description of the error.
    path
        The path to which the error belongs, if any.
    """

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


class DirectoryUnavailable(TempResourceError):
    """
    The parent directory of a temporary file or directory does not exist, is not a directory or is not writable.
    """


class NameCollisionExhausted(TempResourceError):
    """
    All generated candidate paths already existed.
    """


class CreationFailed(TempResourceError):
    """
    The temporary file or directory could not be created for a reason other than a name collision.
    """


class CleanupFailed(TempResourceError):
    """
    The temporary file or directory could not be removed.
    """
