"""
Filesystem access used by the scanner and the import resolver.

`stat_file` never raises for a missing path: it returns MISSING, a stat
record with type UNKNOWN and -1 for every number.
"""

import os
import stat as stat_module
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Union


class FileType(IntEnum):
    UNKNOWN = 0
    FILE = 1
    DIRECTORY = 2
    SYMBOLIC_LINK = 64


@dataclass(frozen=True)
class FileStat:
    """Subset of os.stat_result the parser cares about."""
    type: FileType
    ctime: int
    mtime: int
    size: int

    @property
    def exists(self) -> bool:
        return self.size >= 0


MISSING = FileStat(type=FileType.UNKNOWN, ctime=-1, mtime=-1, size=-1)


def canonical_path(path: Union[str, Path]) -> str:
    """Absolute, normalised spelling of `path`; the key every table is stored under."""
    return os.path.abspath(os.fspath(path))


def file_exists(path: Union[str, Path]) -> bool:
    """True if `path` is an existing regular file."""
    return Path(path).is_file()


def read_file(path: Union[str, Path]) -> str:
    return Path(path).read_text(encoding='utf-8', errors='replace')


def stat_file(path: Union[str, Path]) -> FileStat:
    """Stat a path, returning MISSING when it does not exist."""
    try:
        st = os.lstat(path)
    except FileNotFoundError:
        return MISSING

    if stat_module.S_ISLNK(st.st_mode):
        # Report what the link points at, falling back to the link itself
        try:
            target = os.stat(path)
        except OSError:
            return FileStat(FileType.SYMBOLIC_LINK, int(st.st_ctime * 1000),
                            int(st.st_mtime * 1000), st.st_size)
        st = target

    if stat_module.S_ISREG(st.st_mode):
        file_type = FileType.FILE
    elif stat_module.S_ISDIR(st.st_mode):
        file_type = FileType.DIRECTORY
    else:
        file_type = FileType.UNKNOWN

    return FileStat(
        type=file_type,
        ctime=int(st.st_ctime * 1000),
        mtime=int(st.st_mtime * 1000),
        size=st.st_size,
    )
