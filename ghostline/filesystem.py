#!/usr/bin/env python3
"""
Ghostline File System Access
Directory listing used by the path completion providers
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional

from .logger import logger

log = logger.get_logger("filesystem")


@dataclass(frozen=True)
class DirectoryEntry:
    name: str
    is_directory: bool


class FileSystem(ABC):
    """Read-only view of a file system"""

    separator = "/"

    @property
    @abstractmethod
    def cwd(self):
        """Directory that relative paths are resolved against"""

    @abstractmethod
    def list_directory(self, path: str) -> List[DirectoryEntry]:
        """Entries of a directory, or an empty list when it cannot be read"""

    @abstractmethod
    def file_exists(self, path: str) -> bool:
        ...

    @abstractmethod
    def is_directory(self, path: str) -> bool:
        ...


class LocalFileSystem(FileSystem):
    """The real file system, relative paths resolved against cwd"""

    separator = os.sep

    def __init__(self, cwd: Optional[str] = None):
        self._cwd = Path(cwd) if cwd else None

    @property
    def cwd(self) -> Path:
        """Fixed directory if one was given, otherwise the process working directory"""
        return self._cwd or Path.cwd()

    def _resolve(self, path: str) -> Path:
        candidate = Path(os.path.expanduser(path or "."))
        if not candidate.is_absolute():
            candidate = self.cwd / candidate
        return candidate

    def list_directory(self, path: str) -> List[DirectoryEntry]:
        directory = self._resolve(path)
        try:
            return sorted(
                (DirectoryEntry(entry.name, entry.is_dir()) for entry in directory.iterdir()),
                key=lambda e: e.name.lower(),
            )
        except OSError as e:
            log.debug(f"Cannot list {directory}: {e}")
            return []

    def file_exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def is_directory(self, path: str) -> bool:
        return self._resolve(path).is_dir()


class MemoryFileSystem(FileSystem):
    """
    In-memory tree built from POSIX-style paths. Paths ending in "/" are
    directories; parents of every path are created implicitly.
    """

    def __init__(self, paths: Iterable[str] = ()):
        self._directories = {PurePosixPath(".")}
        self._files = set()
        for path in paths:
            self.add(path)

    @property
    def cwd(self) -> PurePosixPath:
        return PurePosixPath(".")

    def add(self, path: str) -> None:
        node = PurePosixPath(path.rstrip("/"))
        if path.endswith("/"):
            self._directories.add(node)
        else:
            self._files.add(node)
        self._directories.update(node.parents)

    def list_directory(self, path: str) -> List[DirectoryEntry]:
        parent = PurePosixPath(path or ".")
        if parent not in self._directories:
            return []
        entries = [DirectoryEntry(d.name, True) for d in self._directories if d.parent == parent and d != parent]
        entries += [DirectoryEntry(f.name, False) for f in self._files if f.parent == parent]
        return sorted(entries, key=lambda e: e.name.lower())

    def file_exists(self, path: str) -> bool:
        return PurePosixPath(path) in self._files

    def is_directory(self, path: str) -> bool:
        return PurePosixPath(path.rstrip("/") or ".") in self._directories
