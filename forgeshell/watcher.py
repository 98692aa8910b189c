"""Polling file watcher that reports creation, modification and deletion."""

from __future__ import annotations

import enum
import os
import queue
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .globbing import glob
from .operations import PathLike

MIN_POLL_INTERVAL = 0.1
DEFAULT_POLL_INTERVAL = 1.0


class EventKind(enum.Enum):
    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"
    ERROR = "error"


@dataclass(frozen=True)
class FileEvent:
    """A change seen on a watched path, or an error while watching."""

    kind: EventKind
    path: Optional[Path] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class _FileState:
    exists: bool
    modified: Optional[int] = None
    size: int = 0

    @classmethod
    def of(cls, path: Path) -> "_FileState":
        try:
            info = os.stat(path)
        except OSError:
            return cls(False)
        return cls(True, info.st_mtime_ns, info.st_size)


@dataclass
class FileWatcher:
    """Watches paths by polling their metadata at a fixed interval (seconds)."""

    poll_interval: float = DEFAULT_POLL_INTERVAL
    watched_paths: List[Path] = field(default_factory=list)
    _states: Dict[Path, _FileState] = field(default_factory=dict, repr=False)
    _stop: threading.Event = field(default_factory=threading.Event, repr=False)
    _thread: Optional[threading.Thread] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.poll_interval = max(self.poll_interval, MIN_POLL_INTERVAL)

    def watch(self, path: PathLike) -> None:
        """Add a file or directory to the watched set."""
        path = Path(path)
        self._states[path] = _FileState.of(path)
        self.watched_paths.append(path)

    def check_changes(self) -> List[FileEvent]:
        """Poll every watched path once and return the events found."""
        events = []
        for path in list(self.watched_paths):
            current = _FileState.of(path)
            previous = self._states.get(path, _FileState(False))
            if not previous.exists and current.exists:
                events.append(FileEvent(EventKind.CREATED, path))
            elif previous.exists and not current.exists:
                events.append(FileEvent(EventKind.DELETED, path))
            elif previous.exists and current.exists and (
                previous.modified != current.modified or previous.size != current.size
            ):
                events.append(FileEvent(EventKind.MODIFIED, path))
            self._states[path] = current
        return events

    def start(self) -> "queue.Queue[FileEvent]":
        """Start polling in a background thread; events arrive on the returned queue."""
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("watcher is already running")
        for path in self.watched_paths:
            self._states[path] = _FileState.of(path)

        events: "queue.Queue[FileEvent]" = queue.Queue()
        self._stop.clear()

        def poll() -> None:
            while not self._stop.wait(self.poll_interval):
                try:
                    for event in self.check_changes():
                        events.put(event)
                except Exception as exc:  # report and keep watching
                    events.put(FileEvent(EventKind.ERROR, message=f"Error watching: {exc}"))

        self._thread = threading.Thread(target=poll, name="file-watcher", daemon=True)
        self._thread.start()
        return events

    def stop(self) -> None:
        """Stop the background thread, if running."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None


def watch_file(path: PathLike) -> "queue.Queue[FileEvent]":
    watcher = FileWatcher()
    watcher.watch(path)
    return watcher.start()


def watch_files(paths: Iterable[PathLike]) -> "queue.Queue[FileEvent]":
    watcher = FileWatcher()
    for path in paths:
        watcher.watch(path)
    return watcher.start()


def watch_glob(pattern: str) -> "queue.Queue[FileEvent]":
    """Watch every path that ``pattern`` matches now."""
    return watch_files(glob(pattern))