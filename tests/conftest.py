#!/usr/bin/env python3
"""Shared fixtures for the Ghostline tests"""

import asyncio
import os
import tempfile

# Keep config and log files out of the user's home and the working tree
_scratch = tempfile.mkdtemp(prefix="ghostline-tests-")
os.environ.setdefault("GHOSTLINE_HOME", os.path.join(_scratch, "home"))
os.environ.setdefault("GHOSTLINE_LOGGING_DIRECTORY", os.path.join(_scratch, "logs"))

import pytest

from ghostline.cli.sample_commands import build_sample_registry
from ghostline.completion.cache import CompletionCache
from ghostline.completion.controller import AutoCompleteController
from ghostline.completion.orchestrator import CompletionOrchestrator
from ghostline.completion.render import RecordingRenderer
from ghostline.filesystem import MemoryFileSystem
from ghostline.history import InputHistory


class ManualClock:
    """Clock that only moves when told to"""

    def __init__(self, start: float = 1000.0):
        self.current = start

    def now(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


def run(coro):
    return asyncio.run(coro)


def displays(result):
    return [item.display for item in result.items]


@pytest.fixture
def registry():
    return build_sample_registry()


@pytest.fixture
def filesystem():
    return MemoryFileSystem([
        "file1.txt",
        "file2.log",
        ".hidden",
        "backup/old.txt",
        "docs/readme.md",
        "my docs/",
    ])


@pytest.fixture
def history():
    return InputHistory()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def cache(clock):
    return CompletionCache(max_entries=100, default_ttl=300, clock=clock)


@pytest.fixture
def orchestrator(registry, history, filesystem, cache):
    return CompletionOrchestrator(registry, history, filesystem, cache=cache, cache_ttl=300, menu_size=10)


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def controller(orchestrator, renderer, history):
    return AutoCompleteController(orchestrator, renderer, history)
