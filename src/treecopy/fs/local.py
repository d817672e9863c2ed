import errno
import os
import shutil
from collections.abc import Hashable
from pathlib import Path
from typing import Protocol

from .spec import SpecFsEntry


def detect_case_sensitive() -> bool:
    """Whether the platform compares path names case-sensitively."""
    return os.path.normcase("Aa") == "Aa"


class FileSystem(Protocol):
    """
    Primitives the copy engine needs from a filesystem.

    Every method is a blocking call. Failures surface as ``OSError``.
    """

    @property
    def if_case_sensitive(self) -> bool: ...

    def exists(self, path: Path) -> bool: ...

    def is_dir(self, path: Path) -> bool: ...

    def file_size(self, path: Path) -> int: ...

    def list_dir(self, path: Path) -> list[SpecFsEntry]: ...

    def identify_dir(self, path: Path) -> Hashable: ...

    def copy_path(self, path_src: Path, path_dst: Path, *, if_dir: bool) -> None: ...


class LocalFileSystem:
    """``FileSystem`` backed by ``os`` and ``shutil``."""

    def __init__(self, *, if_case_sensitive: bool | None = None) -> None:
        self._if_case_sensitive = (
            detect_case_sensitive() if if_case_sensitive is None else if_case_sensitive
        )

    @property
    def if_case_sensitive(self) -> bool:
        return self._if_case_sensitive

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def file_size(self, path: Path) -> int:
        return path.stat().st_size

    def list_dir(self, path: Path) -> list[SpecFsEntry]:
        with os.scandir(path) as it:
            l_entries = [SpecFsEntry(Path(_e.path), _e.is_dir()) for _e in it]
        return sorted(l_entries, key=lambda e: e.path.name)

    def identify_dir(self, path: Path) -> Hashable:
        stat_dir = path.stat()
        return (stat_dir.st_dev, stat_dir.st_ino)

    def copy_path(self, path_src: Path, path_dst: Path, *, if_dir: bool) -> None:
        if if_dir:
            path_dst.mkdir(parents=True, exist_ok=True)
            return
        # shutil.copy2 would copy *into* an existing directory
        if path_dst.is_dir():
            raise IsADirectoryError(
                errno.EISDIR, "Destination is a directory", str(path_dst)
            )
        path_dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(path_src, path_dst)
