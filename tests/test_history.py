#!/usr/bin/env python3
"""Tests for input history and the file system views"""

from ghostline.filesystem import LocalFileSystem, MemoryFileSystem
from ghostline.history import InputHistory


class TestInputHistory:
    """Test recording and the newest-first view"""

    def test_newest_first(self):
        history = InputHistory(initial=["help", "deploy -F"])
        assert history.entries() == ("deploy -F", "help")
        assert len(history) == 2

    def test_blank_lines_skipped(self):
        history = InputHistory()
        assert not history.record("   ")
        assert len(history) == 0

    def test_immediate_repeat_skipped(self):
        history = InputHistory()
        assert history.record("help")
        assert not history.record("help")
        assert history.record("exit")
        assert history.record("help")
        assert history.entries() == ("help", "exit", "help")

    def test_file_backed_history_persists(self, tmp_path):
        path = tmp_path / "nested" / "history"
        InputHistory(str(path)).record("deploy -e dev")
        assert InputHistory(str(path)).entries() == ("deploy -e dev",)

    def test_prompt_toolkit_view(self):
        history = InputHistory(initial=["a", "b"])
        assert list(history.load_history_strings()) == ["b", "a"]


class TestMemoryFileSystem:
    """Test the in-memory tree"""

    def test_implicit_parents(self):
        fs = MemoryFileSystem(["a/b/c.txt"])
        assert fs.is_directory("a")
        assert fs.is_directory("a/b/")
        assert fs.file_exists("a/b/c.txt")

    def test_listing_sorted_case_insensitively(self):
        fs = MemoryFileSystem(["B.txt", "a.txt", "c/"])
        assert [e.name for e in fs.list_directory(".")] == ["a.txt", "B.txt", "c"]
        assert fs.list_directory(".")[2].is_directory

    def test_missing_directory_is_empty(self):
        assert MemoryFileSystem(["a.txt"]).list_directory("nope") == []


class TestLocalFileSystem:
    """Test the real file system view"""

    def test_lists_relative_to_cwd(self, tmp_path):
        (tmp_path / "data").mkdir()
        (tmp_path / "notes.txt").write_text("x")
        fs = LocalFileSystem(str(tmp_path))
        entries = fs.list_directory(".")
        assert [(e.name, e.is_directory) for e in entries] == [("data", True), ("notes.txt", False)]
        assert fs.file_exists("notes.txt")
        assert fs.is_directory("data")

    def test_unreadable_directory_is_empty(self, tmp_path):
        assert LocalFileSystem(str(tmp_path)).list_directory("missing") == []

    def test_cwd_defaults_to_process_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert LocalFileSystem().cwd.resolve() == tmp_path.resolve()
        assert LocalFileSystem(str(tmp_path / "x")).cwd == tmp_path / "x"
