import queue

import pytest

from forgeshell.watcher import EventKind, FileEvent, FileWatcher, watch_files


def test_file_watcher_creation():
    watcher = FileWatcher()
    assert len(watcher.watched_paths) == 0
    assert watcher.poll_interval == 1.0


def test_watch_file(tmp_path):
    file_path = tmp_path / "test.txt"
    watcher = FileWatcher()
    watcher.watch(file_path)
    assert len(watcher.watched_paths) == 1
    assert watcher.watched_paths[0] == file_path


def test_poll_interval_minimum():
    assert FileWatcher(poll_interval=0.05).poll_interval == 0.1
    assert FileWatcher(poll_interval=0.5).poll_interval == 0.5


def test_existing_empty_file_reports_no_change(tmp_path):
    file_path = tmp_path / "test.txt"
    file_path.touch()
    watcher = FileWatcher()
    watcher.watch(file_path)
    assert watcher.check_changes() == []


def test_check_changes_lifecycle(tmp_path):
    file_path = tmp_path / "test.txt"
    watcher = FileWatcher()
    watcher.watch(file_path)

    assert watcher.check_changes() == []

    file_path.write_text("")
    assert watcher.check_changes() == [FileEvent(EventKind.CREATED, file_path)]

    file_path.write_text("hello")
    assert watcher.check_changes() == [FileEvent(EventKind.MODIFIED, file_path)]
    assert watcher.check_changes() == []

    file_path.unlink()
    assert watcher.check_changes() == [FileEvent(EventKind.DELETED, file_path)]
    assert watcher.check_changes() == []


def test_background_watcher_delivers_events(tmp_path):
    file_path = tmp_path / "new.txt"
    watcher = FileWatcher(poll_interval=0.1)
    watcher.watch(file_path)
    events = watcher.start()
    try:
        file_path.write_text("data")
        event = events.get(timeout=5)
    finally:
        watcher.stop()
    assert event == FileEvent(EventKind.CREATED, file_path)


def test_start_twice_raises(tmp_path):
    watcher = FileWatcher(poll_interval=0.1)
    watcher.watch(tmp_path / "x")
    watcher.start()
    try:
        with pytest.raises(RuntimeError):
            watcher.start()
    finally:
        watcher.stop()


def test_watch_files_reports_deletion(tmp_path):
    file_path = tmp_path / "gone.txt"
    file_path.write_text("x")
    events = watch_files([file_path])
    file_path.unlink()
    event = events.get(timeout=5)
    assert event.kind is EventKind.DELETED
    assert event.path == file_path
    with pytest.raises(queue.Empty):
        events.get(timeout=1.5)