import os
import shutil
import stat
import tempfile
from pathlib import Path
from typing import Optional, Protocol

from ._kinds import TempKind


class FilesystemOps(Protocol):
    """
    The filesystem primitives used by the temporary resource handles.

    The implementations should raise the matching `OSError` subclasses (`FileExistsError`, `FileNotFoundError`, `PermissionError`, ...) on failure.
    """

    def system_temp_dir(self) -> Path:
        """
        Get the default directory of the temporary files of the platform.
        """
        ...

    def is_writable_dir(self, path: Path) -> bool:
        ...

    def create_file_exclusive(self, path: Path, mode: int) -> None:
        """
        Create an empty file. Fail with `FileExistsError` if anything exists at the path.
        """
        ...

    def create_dir(self, path: Path, mode: int) -> None:
        """
        Create a single directory. The parent directory should already exist. Fail with `FileExistsError` if anything exists at the path.
        """
        ...

    def remove_file(self, path: Path) -> None:
        ...

    def remove_tree(self, path: Path) -> None:
        """
        Remove a directory and all of its contents.
        """
        ...

    def kind_of(self, path: Path) -> Optional[TempKind]:
        """
        Get what exists at the path without following symbolic links.

        Returns
        -------
        v
            `TempKind.DIR`, `TempKind.FILE` (anything that is not a directory, including symbolic links) or None if nothing exists at the path.
        """
        ...


class OsFilesystem:
    """
    The implementation of the filesystem primitives on top of the `os`, `shutil` and `tempfile` modules.
    """

    def system_temp_dir(self) -> Path:
        return Path(tempfile.gettempdir())

    def is_writable_dir(self, path: Path) -> bool:
        return path.is_dir() and os.access(path, os.W_OK | os.X_OK)

    def create_file_exclusive(self, path: Path, mode: int) -> None:
        flags = os.O_WRONLY | os.O_CREAT | os.O_EXCL
        # not present on every platform
        flags |= getattr(os, "O_NOFOLLOW", 0)
        flags |= getattr(os, "O_BINARY", 0)

        fd = os.open(path, flags, mode)
        os.close(fd)

    def create_dir(self, path: Path, mode: int) -> None:
        os.mkdir(path, mode)

    def remove_file(self, path: Path) -> None:
        os.unlink(path)

    def remove_tree(self, path: Path) -> None:
        shutil.rmtree(path)

    def kind_of(self, path: Path) -> Optional[TempKind]:
        try:
            st = os.lstat(path)
        except FileNotFoundError:
            return None

        if stat.S_ISDIR(st.st_mode):
            return TempKind.DIR
        else:
            return TempKind.FILE
