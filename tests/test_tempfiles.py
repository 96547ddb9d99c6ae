"""Tests for temp file tracking and cleanup."""

from pathlib import Path
from unittest.mock import patch

from msub.utils.tempfiles import TempFileTracker


def test_cleanup_removes_tracked_files_once(tmp_path):
    a = tmp_path / "a.wav"
    b = tmp_path / "b.srt"
    a.write_bytes(b"x")
    tracker = TempFileTracker()
    tracker.track(a)
    tracker.track(b)  # never created
    tracker.track(a)

    tracker.cleanup()
    tracker.cleanup()

    assert not a.exists()
    assert tracker.attempted == [a, b]
    assert tracker.failed == []


def test_keep_skips_deletion(tmp_path):
    a = tmp_path / "a.wav"
    a.write_bytes(b"x")
    tracker = TempFileTracker(keep=True)
    tracker.track(a)
    tracker.cleanup()
    assert a.exists()
    assert tracker.attempted == []


def test_failures_are_recorded_not_raised(tmp_path):
    a = tmp_path / "a.wav"
    tracker = TempFileTracker()
    tracker.track(a)
    with patch.object(Path, "unlink", side_effect=PermissionError("locked")):
        tracker.cleanup()
    assert tracker.failed == [a]


def test_remove_empty_dir(tmp_path):
    workspace = tmp_path / "ws"
    workspace.mkdir()
    TempFileTracker().remove_empty_dir(workspace)
    assert not workspace.exists()

    busy = tmp_path / "busy"
    busy.mkdir()
    (busy / "keep.txt").touch()
    TempFileTracker().remove_empty_dir(busy)
    assert busy.exists()
