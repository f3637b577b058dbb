#!/usr/bin/env python3
"""
File and directory path completion
"""

import asyncio
from typing import List, Tuple

from ...filesystem import FileSystem, LocalFileSystem
from ...registry import CompletionSource
from ..models import CompletionContext, CompletionItem, ItemKind
from .base import ValueProvider, starts_with


def split_partial(partial: str, separator: str = "/") -> Tuple[str, str]:
    """Split "backup/fi" into the directory part "backup/" and the name prefix "fi" """
    index = max(partial.rfind("/"), partial.rfind(separator))
    return partial[:index + 1], partial[index + 1:]


def quote(path: str) -> str:
    return f'"{path}"' if " " in path else path


class PathProvider(ValueProvider):
    """Lists the directory named by the partial value; directories sort first"""

    cacheable = False
    include_files = True

    def __init__(self, filesystem: FileSystem = None):
        self.filesystem = filesystem or LocalFileSystem()

    async def get_completions(self, ctx: CompletionContext) -> List[CompletionItem]:
        separator = self.filesystem.separator
        directory, prefix = split_partial(ctx.partial, separator)
        entries = await asyncio.to_thread(self.filesystem.list_directory, directory or ".")

        directories = []
        files = []
        for entry in entries:
            if not starts_with(entry.name, prefix):
                continue
            if entry.name.startswith(".") and not prefix.startswith("."):
                continue
            if entry.is_directory:
                display = entry.name + separator
                directories.append(CompletionItem(display, quote(directory + display), "", ItemKind.PATH, terminal=False))
            elif self.include_files:
                files.append(CompletionItem(entry.name, quote(directory + entry.name), "", ItemKind.PATH))
        return directories + files


class FilePathProvider(PathProvider):
    priority = 60
    source = CompletionSource.FILE_PATH


class DirectoryPathProvider(PathProvider):
    priority = 61
    source = CompletionSource.DIRECTORY_PATH
    include_files = False
