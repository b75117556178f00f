"""
This package manages temporary files and directories that are automatically (recursively) removed when their owning handle goes out of scope.
"""

from ._errors import (
    CleanupFailed,
    CreationFailed,
    DirectoryUnavailable,
    NameCollisionExhausted,
    TempResourceError,
)
from ._fs_ops import FilesystemOps, OsFilesystem
from ._names import NameGenerator, random_name
from ._settings import DEFAULT_SETTINGS, TempSettings, get_settings_errors
from ._kinds import TempKind
from ._temp import Temp, temp_dir, temp_file

__all__ = [
    "Temp",
    "TempKind",
    "temp_file",
    "temp_dir",
    "TempSettings",
    "DEFAULT_SETTINGS",
    "get_settings_errors",
    "TempResourceError",
    "DirectoryUnavailable",
    "NameCollisionExhausted",
    "CreationFailed",
    "CleanupFailed",
    "FilesystemOps",
    "OsFilesystem",
    "NameGenerator",
    "random_name",
]
