"""File and directory operations, including bulk operations over many files."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple, Union

PathLike = Union[str, "os.PathLike[str]"]


def _split_lines(content: str) -> List[str]:
    """Split text on ``\\n``, dropping a trailing ``\\r`` and a final empty line."""
    if not content:
        return []
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def read_file(path: PathLike) -> str:
    """Return the whole content of a UTF-8 text file."""
    with open(path, "r", encoding="utf-8", newline="") as handle:
        return handle.read()


def write_file(path: PathLike, content: str) -> None:
    """Replace the content of a file, creating it if needed."""
    with open(path, "w", encoding="utf-8", newline="") as handle:
        handle.write(content)


def delete_file(path: PathLike) -> None:
    """Remove a single file."""
    os.remove(path)


def create_directory(path: PathLike) -> None:
    """Create a directory and any missing parents."""
    os.makedirs(path, exist_ok=True)


def list_directory(path: PathLike) -> List[str]:
    """Return the sorted names of the entries in a directory."""
    return sorted(os.listdir(path))


def file_exists(path: PathLike) -> bool:
    return os.path.exists(path)


def is_file(path: PathLike) -> bool:
    return os.path.isfile(path)


def is_directory(path: PathLike) -> bool:
    return os.path.isdir(path)


def get_file_size(path: PathLike) -> int:
    """Return the size of a file in bytes."""
    return os.stat(path).st_size


def copy_file(src: PathLike, dest: PathLike) -> None:
    """Copy file content and permission bits."""
    shutil.copy(src, dest)


def move_file(src: PathLike, dest: PathLike) -> None:
    os.rename(src, dest)


def append_to_file(path: PathLike, content: str) -> None:
    """Append text to a file, creating it if needed."""
    with open(path, "a", encoding="utf-8", newline="") as handle:
        handle.write(content)


def read_file_lines(path: PathLike) -> List[str]:
    """Return the lines of a text file without line terminators."""
    return _split_lines(read_file(path))


def get_current_dir() -> str:
    return os.getcwd()


def change_dir(path: PathLike) -> None:
    os.chdir(path)


def set_permissions(path: PathLike, mode: int) -> None:
    """Set Unix permission bits; does nothing on Windows."""
    if os.name == "nt":
        return
    os.chmod(path, mode)


def is_readable(path: PathLike) -> bool:
    """Return whether the path can be opened for reading."""
    try:
        fd = os.open(path, os.O_RDONLY)
    except OSError:
        return False
    os.close(fd)
    return True


def is_writable(path: PathLike) -> bool:
    """Return whether the path can be opened for writing.

    A path that does not exist is probed by creating it and removing it again.
    """
    try:
        fd = os.open(path, os.O_WRONLY)
    except OSError:
        pass
    else:
        os.close(fd)
        return True
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT)
    except OSError:
        return False
    os.close(fd)
    try:
        os.remove(path)
    except OSError:
        pass
    return True


# --- Bulk operations ---------------------------------------------------------


@dataclass
class BulkOpResult:
    """Outcome of a bulk operation on a single path."""

    path: Path
    success: bool
    error: Optional[str] = None


@dataclass
class BulkOpSummary:
    """Totals over the results of a bulk operation."""

    results: List[BulkOpResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.success)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    def is_success(self) -> bool:
        return self.failed == 0


def _ok(path: Path) -> BulkOpResult:
    return BulkOpResult(path, True)


def _fail(path: Path, message: str) -> BulkOpResult:
    return BulkOpResult(path, False, message)


def _file_name(path: Path) -> Optional[str]:
    name = path.name
    if not name or name == "..":
        return None
    return name


def _bulk_relocate(
    files: Iterable[PathLike],
    dest_dir: PathLike,
    action: Callable[[Path, Path], object],
    verb: str,
) -> BulkOpSummary:
    paths = [Path(f) for f in files]
    try:
        create_directory(dest_dir)
    except OSError as exc:
        return BulkOpSummary(
            [_fail(p, f"Failed to create destination directory: {exc}") for p in paths]
        )

    results = []
    for source in paths:
        name = _file_name(source)
        if name is None:
            results.append(_fail(source, "Invalid file name"))
            continue
        try:
            action(source, Path(dest_dir) / name)
        except OSError as exc:
            results.append(_fail(source, f"{verb} failed: {exc}"))
        else:
            results.append(_ok(source))
    return BulkOpSummary(results)


def bulk_copy(files: Iterable[PathLike], dest_dir: PathLike) -> BulkOpSummary:
    """Copy files into a destination directory, which is created if needed."""
    return _bulk_relocate(files, dest_dir, shutil.copy, "Copy")


def bulk_move(files: Iterable[PathLike], dest_dir: PathLike) -> BulkOpSummary:
    """Move files into a destination directory, which is created if needed."""
    return _bulk_relocate(files, dest_dir, os.rename, "Move")


def bulk_delete(files: Iterable[PathLike]) -> BulkOpSummary:
    """Delete files and directory trees; missing paths count as deleted."""
    results = []
    for path in map(Path, files):
        try:
            if path.is_file():
                path.unlink()
            elif path.is_dir():
                shutil.rmtree(path)
        except OSError as exc:
            results.append(_fail(path, f"Delete failed: {exc}"))
        else:
            results.append(_ok(path))
    return BulkOpSummary(results)


def bulk_transform(
    files: Iterable[PathLike], transform: Callable[[str], str]
) -> BulkOpSummary:
    """Rewrite each file with the text returned by ``transform``."""
    results = []
    for path in map(Path, files):
        try:
            content = read_file(path)
        except (OSError, ValueError) as exc:
            results.append(_fail(path, f"Read failed: {exc}"))
            continue
        try:
            transformed = transform(content)
        except Exception as exc:  # any failure of the caller's transform
            results.append(_fail(path, f"Transform failed: {exc}"))
            continue
        try:
            write_file(path, transformed)
        except OSError as exc:
            results.append(_fail(path, f"Write failed: {exc}"))
        else:
            results.append(_ok(path))
    return BulkOpSummary(results)


def bulk_search_replace(
    files: Iterable[PathLike], search: str, replace: str
) -> BulkOpSummary:
    """Replace every occurrence of ``search`` with ``replace`` in each file."""
    return bulk_transform(files, lambda content: content.replace(search, replace))


def _bulk_rename(
    files: Iterable[PathLike], new_name: Callable[[str], str]
) -> BulkOpSummary:
    results = []
    for path in map(Path, files):
        if path.anchor and path.parent == path:
            results.append(_fail(path, "No parent directory found"))
            continue
        name = _file_name(path)
        if name is None:
            results.append(_fail(path, "No file name found"))
            continue
        try:
            os.rename(path, path.parent / new_name(name))
        except OSError as exc:
            results.append(_fail(path, f"Rename failed: {exc}"))
        else:
            results.append(_ok(path))
    return BulkOpSummary(results)


def bulk_rename_prefix(files: Iterable[PathLike], prefix: str) -> BulkOpSummary:
    """Prepend ``prefix`` to each file name."""
    return _bulk_rename(files, lambda name: f"{prefix}{name}")


def bulk_rename_suffix(files: Iterable[PathLike], suffix: str) -> BulkOpSummary:
    """Insert ``suffix`` before the last extension of each file name."""

    def rename(name: str) -> str:
        dot = name.rfind(".")
        if dot == -1:
            return f"{name}{suffix}"
        return f"{name[:dot]}{suffix}{name[dot:]}"

    return _bulk_rename(files, rename)


def bulk_count_lines(files: Iterable[PathLike]) -> List[Tuple[Path, int]]:
    """Count the lines of each file; unreadable files count as zero."""
    counts = []
    for path in map(Path, files):
        try:
            count = len(_split_lines(read_file(path)))
        except (OSError, ValueError):
            count = 0
        counts.append((path, count))
    return counts