import logging
import os
import weakref
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from ._errors import (
    CleanupFailed,
    CreationFailed,
    DirectoryUnavailable,
    NameCollisionExhausted,
)
from ._fs_ops import FilesystemOps, OsFilesystem
from ._kinds import TempKind
from ._names import NameGenerator, random_name
from ._settings import TempSettings, resolve_settings

logger = logging.getLogger(__name__)

StrPath = Union[str, "os.PathLike[str]"]


class Temp:
    """
    A temporary file or directory that is removed when the handle goes out of scope.

    The removal happens exactly once, at the first of the following events: the end of a ``with`` block using the handle, the garbage collection of the handle, the exit of the interpreter. A handle on which `Temp.release` was called never removes anything.

    The automatic removal never raises. Its failures are logged as warnings instead. Use `Temp.cleanup` to remove the path with error reporting.

    The handles cannot be copied or pickled. Use `Temp.take` to move the ownership to a new handle.

    Prefer the ``new_*`` constructors to create handles. Calling the constructor directly makes the new handle the owner of an already existing path.

    Parameters
    ----------
    path
        The path of the owned file or directory.
    kind
        The kind of the filesystem object at the path.
    fs
        The filesystem primitives to use. Defaults to `OsFilesystem`.
    """

    def __init__(
        self, path: StrPath, kind: TempKind, fs: Optional[FilesystemOps] = None
    ) -> None:
        self._path = Path(path)
        self._kind = kind
        self._fs: FilesystemOps = fs if fs is not None else OsFilesystem()
        self._released = False
        self._finalizer = weakref.finalize(
            self, _cleanup_on_scope_end, self._path, self._fs
        )

    @classmethod
    def new_file(
        cls,
        parent: Optional[StrPath] = None,
        prefix: str = "",
        suffix: str = "",
        *,
        settings: Optional[TempSettings] = None,
        fs: Optional[FilesystemOps] = None,
        name_generator: NameGenerator = random_name,
    ) -> "Temp":
        """
        Create a new empty temporary file.

        Parameters
        ----------
        parent
            The directory in which the file is created. It should already exist. Defaults to the temporary directory of the system.
        prefix
            The start of the name of the file.
        suffix
            The end of the name of the file.
        settings
            The retry bound and the permission bits. Defaults to `TempSettings()`.
        fs
            The filesystem primitives to use. Defaults to `OsFilesystem`.
        name_generator
            The source of the unpredictable middle part of the name.

        Returns
        -------
        v
            The handle that owns the created file.

        Raises
        ------
        DirectoryUnavailable
            If the parent directory does not exist, is not a directory or is not writable.
        NameCollisionExhausted
            If all generated names collided with existing entries.
        CreationFailed
            If the file could not be created for any other reason.
        ValueError
            If the prefix, the suffix or a generated name contains a path separator or the settings are invalid.
        """
        fs_ops: FilesystemOps = fs if fs is not None else OsFilesystem()
        path = _create_unique(
            kind=TempKind.FILE,
            parent=parent,
            prefix=prefix,
            suffix=suffix,
            settings=resolve_settings(settings),
            fs=fs_ops,
            name_generator=name_generator,
        )
        return cls(path, TempKind.FILE, fs_ops)

    @classmethod
    def new_dir(
        cls,
        parent: Optional[StrPath] = None,
        prefix: str = "",
        suffix: str = "",
        *,
        settings: Optional[TempSettings] = None,
        fs: Optional[FilesystemOps] = None,
        name_generator: NameGenerator = random_name,
    ) -> "Temp":
        """
        Create a new empty temporary directory.

        The parent directory is not created. The parameters and the raised errors are the same as for `Temp.new_file`.
        """
        fs_ops: FilesystemOps = fs if fs is not None else OsFilesystem()
        path = _create_unique(
            kind=TempKind.DIR,
            parent=parent,
            prefix=prefix,
            suffix=suffix,
            settings=resolve_settings(settings),
            fs=fs_ops,
            name_generator=name_generator,
        )
        return cls(path, TempKind.DIR, fs_ops)

    @classmethod
    def new_file_in(cls, parent: StrPath, prefix: str = "", **kwargs) -> "Temp":
        """
        Create a new empty temporary file in an existing directory.
        """
        return cls.new_file(parent, prefix, **kwargs)

    @classmethod
    def new_dir_in(cls, parent: StrPath, prefix: str = "", **kwargs) -> "Temp":
        """
        Create a new empty temporary directory in an existing directory.
        """
        return cls.new_dir(parent, prefix, **kwargs)

    @property
    def path(self) -> Path:
        """
        The absolute path of the file or directory. It stays available after the release or the removal.
        """
        return self._path

    @property
    def kind(self) -> TempKind:
        return self._kind

    @property
    def released(self) -> bool:
        return self._released

    def to_path(self) -> Path:
        return Path(self._path)

    def release(self) -> None:
        """
        Give up the ownership of the file or directory, so it is not removed when the handle goes out of scope.

        Calling this function multiple times has no additional effect.
        """
        self._released = True
        self._finalizer.detach()

    def take(self) -> "Temp":
        """
        Move the ownership of the file or directory to a new handle.

        This handle becomes released, so only the returned handle removes the path.

        Returns
        -------
        v
            The new owner of the path.

        Raises
        ------
        ValueError
            If this handle does not own its path anymore, because it was released or already removed its path.
        """
        if not self._finalizer.alive:
            raise ValueError(
                f'The handle does not own the path "{self._path}" anymore.'
            )

        new_owner = type(self)(self._path, self._kind, self._fs)
        self.release()
        logger.debug("Moved the ownership of %s to a new handle", self._path)
        return new_owner

    def cleanup(self) -> None:
        """
        Remove the file or directory now instead of at the end of the scope.

        The path is removed at most once. This function does nothing if the handle is released or the path is already removed by this handle. A path that no longer exists is not an error.

        Raises
        ------
        CleanupFailed
            If the removal failed. The path is not removed by this handle later either.
        """
        if self._finalizer.detach() is None:
            return

        _remove_path(self._path, self._fs)

    def __fspath__(self) -> str:
        return str(self._path)

    def __enter__(self) -> "Temp":
        return self

    def __exit__(self, *argv, **argc) -> None:
        self._finalizer()

    def __copy__(self):
        raise TypeError(
            "Temp handles cannot be copied. Use Temp.take() to move the ownership."
        )

    def __deepcopy__(self, memo):
        raise TypeError(
            "Temp handles cannot be copied. Use Temp.take() to move the ownership."
        )

    def __reduce_ex__(self, protocol):
        raise TypeError("Temp handles cannot be pickled.")

    def __repr__(self) -> str:
        return f"Temp(kind={self._kind.value}, path='{self._path}', released={self._released})"


@contextmanager
def temp_file(
    parent: Optional[StrPath] = None, prefix: str = "", suffix: str = "", **kwargs
) -> Iterator[Temp]:
    """
    Create a temporary file for the duration of a ``with`` block.

    The file is removed on every exit path of the block. A failed removal is logged and does not hide the exception that leaves the block.

    The arguments are passed to `Temp.new_file`.
    """
    with Temp.new_file(parent, prefix, suffix, **kwargs) as temp:
        yield temp


@contextmanager
def temp_dir(
    parent: Optional[StrPath] = None, prefix: str = "", suffix: str = "", **kwargs
) -> Iterator[Temp]:
    """
    Create a temporary directory for the duration of a ``with`` block. See `temp_file`.
    """
    with Temp.new_dir(parent, prefix, suffix, **kwargs) as temp:
        yield temp


def _create_unique(
    kind: TempKind,
    parent: Optional[StrPath],
    prefix: str,
    suffix: str,
    settings: TempSettings,
    fs: FilesystemOps,
    name_generator: NameGenerator,
) -> Path:
    _check_name_part(prefix, "prefix")
    _check_name_part(suffix, "suffix")

    parent_dir = _resolve_parent(parent, fs)

    for attempt in range(1, settings.max_attempts + 1):
        name = name_generator()
        _check_name_part(name, "generated name")
        candidate = parent_dir / f"{prefix}{name}{suffix}"

        try:
            if kind == TempKind.FILE:
                fs.create_file_exclusive(candidate, settings.file_mode)
            else:
                fs.create_dir(candidate, settings.dir_mode)
        except FileExistsError:
            logger.debug(
                "Attempt %d/%d: %s already exists",
                attempt,
                settings.max_attempts,
                candidate,
            )
            continue
        except (FileNotFoundError, NotADirectoryError) as e:
            raise DirectoryUnavailable(
                f'The parent directory "{parent_dir}" disappeared: {e}', parent_dir
            ) from e
        except OSError as e:
            raise CreationFailed(
                f'Could not create the temporary {kind.value} "{candidate}": {e}',
                candidate,
            ) from e

        logger.debug("Created temporary %s %s", kind.value, candidate)
        return candidate

    raise NameCollisionExhausted(
        f'All {settings.max_attempts} generated names collided in "{parent_dir}".',
        parent_dir,
    )


def _resolve_parent(parent: Optional[StrPath], fs: FilesystemOps) -> Path:
    if parent is None:
        try:
            parent_dir = fs.system_temp_dir()
        except OSError as e:
            raise DirectoryUnavailable(
                f"The temporary directory of the system could not be resolved: {e}"
            ) from e
    else:
        parent_dir = Path(parent)

    parent_dir = parent_dir.absolute()

    if not fs.is_writable_dir(parent_dir):
        raise DirectoryUnavailable(
            f'The directory "{parent_dir}" does not exist, is not a directory or is not writable.',
            parent_dir,
        )

    return parent_dir


def _check_name_part(value: str, field_name: str) -> None:
    separators = {os.sep, "/"}
    if os.altsep is not None:
        separators.add(os.altsep)

    if any(sep in value for sep in separators):
        raise ValueError(
            f'The {field_name} should not contain path separators. Value: "{value}"'
        )


def _remove_path(path: Path, fs: FilesystemOps) -> None:
    try:
        found_kind = fs.kind_of(path)
        if found_kind is None:
            logger.debug("Nothing to remove at %s", path)
            return
        elif found_kind == TempKind.DIR:
            fs.remove_tree(path)
        else:
            fs.remove_file(path)
    except FileNotFoundError:
        logger.debug("%s was removed by someone else", path)
        return
    except OSError as e:
        raise CleanupFailed(f'Could not remove "{path}": {e}', path) from e

    logger.debug("Removed temporary %s %s", found_kind.value, path)


def _cleanup_on_scope_end(path: Path, fs: FilesystemOps) -> None:
    # must not reference the handle, otherwise it is never collected
    try:
        _remove_path(path, fs)
    except CleanupFailed as e:
        logger.warning("The temporary path %s is left behind", path, exc_info=e)
