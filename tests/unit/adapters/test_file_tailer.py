"""Unit tests for FileTailer rotation, truncation and partial-line handling."""

import threading
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import Mock

import pytest
from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from pmctl.adapters.logs.tailer import FileTailer, decode_line
from pmctl.adapters.logs.watcher import LogDirectoryHandler, watch_log_directory
from tests.helpers import wait_for


class TestDecodeLine:
    def test_strips_newline(self) -> None:
        assert decode_line(b"hello\n") == "hello"

    def test_strips_crlf(self) -> None:
        assert decode_line(b"hello\r\n") == "hello"

    def test_keeps_inner_whitespace(self) -> None:
        assert decode_line(b"  a  b \n") == "  a  b "


class TestFollow:
    @pytest.fixture
    def log_path(self, tmp_path: Path) -> Path:
        return tmp_path / "web.out"

    @pytest.fixture
    def lines(self) -> list[str]:
        return []

    @pytest.fixture
    def tailer(self, log_path: Path, lines: list[str]) -> Iterator[FileTailer]:
        tailer = FileTailer(log_path, lines.append, poll_interval=0.02)
        yield tailer
        tailer.stop()

    def _run(self, tailer: FileTailer) -> threading.Thread:
        thread = threading.Thread(target=tailer.follow, daemon=True)
        thread.start()
        return thread

    def test_reads_from_beginning(self, log_path: Path, lines: list[str], tailer: FileTailer) -> None:
        log_path.write_text("a\nb\n")

        self._run(tailer)

        assert wait_for(lambda: lines == ["a", "b"])

    def test_holds_partial_line_until_newline(
        self, log_path: Path, lines: list[str], tailer: FileTailer
    ) -> None:
        log_path.write_text("a\npart")
        self._run(tailer)
        assert wait_for(lambda: lines == ["a"])

        with log_path.open("a") as f:
            f.write("ial\n")

        assert wait_for(lambda: lines == ["a", "partial"])

    @pytest.mark.slow
    def test_waits_for_missing_file(
        self, log_path: Path, lines: list[str], tailer: FileTailer
    ) -> None:
        thread = self._run(tailer)
        assert thread.is_alive()

        log_path.write_text("late\n")

        # Missing files are rechecked once per second.
        assert wait_for(lambda: lines == ["late"], timeout=5)

    def test_reopens_after_rotation(
        self, log_path: Path, lines: list[str], tailer: FileTailer
    ) -> None:
        log_path.write_text("old1\n")
        self._run(tailer)
        assert wait_for(lambda: lines == ["old1"])

        log_path.rename(log_path.with_suffix(".out.1"))
        log_path.write_text("new1\nnew2\n")

        assert wait_for(lambda: lines == ["old1", "new1", "new2"])

    def test_rotation_keeps_trailing_partial_line(
        self, log_path: Path, lines: list[str], tailer: FileTailer
    ) -> None:
        log_path.write_text("a\npart")
        self._run(tailer)
        assert wait_for(lambda: lines == ["a"])

        log_path.rename(log_path.with_suffix(".out.1"))
        log_path.write_text("b\n")

        assert wait_for(lambda: lines == ["a", "part", "b"])

    def test_rewinds_after_truncation(
        self, log_path: Path, lines: list[str], tailer: FileTailer
    ) -> None:
        log_path.write_text("first line\nsecond line\n")
        self._run(tailer)
        assert wait_for(lambda: len(lines) == 2)

        log_path.write_text("x\n")

        assert wait_for(lambda: lines[-1:] == ["x"])

    def test_stop_event_ends_follow(self, log_path: Path, tailer: FileTailer) -> None:
        log_path.write_text("")
        thread = self._run(tailer)

        tailer.stop_event.set()
        thread.join(timeout=5)

        assert not thread.is_alive()

    def test_unreadable_path_raises(self, log_path: Path, tailer: FileTailer) -> None:
        log_path.mkdir()

        with pytest.raises(IsADirectoryError):
            tailer.follow()


class TestWatchedFollow:
    """Tailers woken by filesystem events; the rescan interval is far too long to matter."""

    @pytest.fixture
    def log_dir(self, tmp_path: Path) -> Path:
        directory = tmp_path / "web"
        directory.mkdir()
        return directory

    @pytest.fixture
    def lines(self) -> list[str]:
        return []

    @pytest.fixture
    def tailer(self, log_dir: Path, lines: list[str]) -> Iterator[FileTailer]:
        tailer = FileTailer(log_dir / "web.out", lines.append, poll_interval=60)
        observer = watch_log_directory(log_dir, [tailer])
        try:
            yield tailer
        finally:
            tailer.stop()
            observer.stop()
            observer.join()

    def _run(self, tailer: FileTailer) -> None:
        threading.Thread(target=tailer.follow, daemon=True).start()

    def test_append_wakes_tailer(self, log_dir: Path, lines: list[str], tailer: FileTailer) -> None:
        (log_dir / "web.out").write_text("a\n")
        self._run(tailer)
        assert wait_for(lambda: lines == ["a"])

        with (log_dir / "web.out").open("a") as f:
            f.write("b\n")

        assert wait_for(lambda: lines == ["a", "b"])

    def test_rotation_wakes_tailer(
        self, log_dir: Path, lines: list[str], tailer: FileTailer
    ) -> None:
        (log_dir / "web.out").write_text("old\n")
        self._run(tailer)
        assert wait_for(lambda: lines == ["old"])

        (log_dir / "web.out").rename(log_dir / "web.out.1")
        (log_dir / "web.out").write_text("new\n")

        assert wait_for(lambda: lines == ["old", "new"])

    def test_stop_returns_without_waiting_for_rescan(
        self, log_dir: Path, tailer: FileTailer
    ) -> None:
        (log_dir / "web.out").write_text("")
        thread = threading.Thread(target=tailer.follow, daemon=True)
        thread.start()

        tailer.stop()
        thread.join(timeout=5)

        assert not thread.is_alive()


class TestLogDirectoryHandler:
    @pytest.fixture
    def tailers(self, tmp_path: Path) -> dict[str, Mock]:
        return {
            suffix: Mock(spec=FileTailer, path=tmp_path / f"web.{suffix}")
            for suffix in ("err", "out")
        }

    @pytest.fixture
    def handler(self, tailers: dict[str, Mock]) -> LogDirectoryHandler:
        return LogDirectoryHandler(tailers.values())

    def test_modified_wakes_only_matching_tailer(
        self, handler: LogDirectoryHandler, tailers: dict[str, Mock], tmp_path: Path
    ) -> None:
        handler.dispatch(FileModifiedEvent(str(tmp_path / "web.out")))

        tailers["out"].wake.assert_called_once_with()
        tailers["err"].wake.assert_not_called()

    def test_created_and_deleted_wake(
        self, handler: LogDirectoryHandler, tailers: dict[str, Mock], tmp_path: Path
    ) -> None:
        handler.dispatch(FileDeletedEvent(str(tmp_path / "web.err")))
        handler.dispatch(FileCreatedEvent(str(tmp_path / "web.err")))

        assert tailers["err"].wake.call_count == 2

    def test_moved_wakes_source_and_destination(
        self, handler: LogDirectoryHandler, tailers: dict[str, Mock], tmp_path: Path
    ) -> None:
        handler.dispatch(FileMovedEvent(str(tmp_path / "web.err"), str(tmp_path / "web.out")))

        tailers["err"].wake.assert_called_once_with()
        tailers["out"].wake.assert_called_once_with()

    def test_unrelated_events_ignored(
        self, handler: LogDirectoryHandler, tailers: dict[str, Mock], tmp_path: Path
    ) -> None:
        handler.dispatch(FileModifiedEvent(str(tmp_path / "web.out.1")))
        handler.dispatch(DirModifiedEvent(str(tmp_path)))

        tailers["out"].wake.assert_not_called()
        tailers["err"].wake.assert_not_called()
