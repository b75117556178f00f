from enum import Enum


class TempKind(Enum):
    """
    The kind of a filesystem object owned by a temporary resource handle.
    """

    FILE = "file"
    DIR = "dir"
