#!/usr/bin/env python3
"""
Ghostline Input History
Past input lines, newest first, shared by the prompt session and the history provider
"""

from pathlib import Path
from typing import Iterable, Optional, Tuple

from prompt_toolkit.history import FileHistory, History, InMemoryHistory


class InputHistory(History):
    """
    prompt_toolkit history that also exposes a restartable, newest-first view
    of its entries for the completion engine.
    """

    def __init__(self, path: Optional[str] = None, initial: Iterable[str] = ()):
        super().__init__()
        if path:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            self._backend = FileHistory(str(path))
        else:
            self._backend = InMemoryHistory()
        self._entries = list(self._backend.load_history_strings())
        for line in initial:
            self.record(line)

    def load_history_strings(self) -> Iterable[str]:
        return list(self._entries)

    def store_string(self, string: str) -> None:
        self._entries.insert(0, string)
        self._backend.store_string(string)

    def record(self, line: str) -> bool:
        """Append a submitted line, skipping blanks and immediate repeats"""
        if not line.strip() or (self._entries and self._entries[0] == line):
            return False
        self.append_string(line)
        return True

    def entries(self) -> Tuple[str, ...]:
        """All entries, most recent first"""
        return tuple(self._entries)

    def __len__(self):
        return len(self._entries)
