"""Depth-first directory traversal and simple file finders."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .operations import PathLike


@dataclass
class DirectoryWalker:
    """Collects every file below a root path, depth first.

    A ``max_depth`` of zero yields nothing; any other depth does not limit the
    traversal. Directories that cannot be read are skipped.
    """

    root: PathLike
    follow_symlinks: bool = False
    max_depth: Optional[int] = None

    def walk(self) -> List[str]:
        if self.max_depth is not None and self.max_depth <= 0:
            return []

        files: List[str] = []
        stack = [os.fspath(self.root)]
        while stack:
            current = stack.pop()
            if os.path.isfile(current):
                files.append(current)
                continue
            if not os.path.isdir(current):
                continue
            try:
                names = sorted(os.listdir(current))
            except OSError:
                continue

            dirs: List[str] = []
            for name in names:
                entry = os.path.join(current, name)
                if os.path.isfile(entry):
                    files.append(entry)
                elif os.path.isdir(entry):
                    dirs.append(entry)
                elif self.follow_symlinks and os.path.islink(entry):
                    try:
                        target = os.readlink(entry)
                    except OSError:
                        continue
                    if os.path.isfile(target):
                        files.append(entry)
                    elif os.path.isdir(target):
                        dirs.append(entry)
            stack.extend(reversed(dirs))
        return files


def walk_directory(root: PathLike) -> List[str]:
    return DirectoryWalker(root).walk()


def walk_directory_with_depth(root: PathLike, max_depth: int) -> List[str]:
    return DirectoryWalker(root, max_depth=max_depth).walk()


def find_files_by_extension(root: PathLike, extension: str) -> List[str]:
    """Return files whose extension equals ``extension``, ignoring case."""
    wanted = extension.lower()
    found = []
    for file in walk_directory(root):
        suffix = Path(file).suffix
        if suffix and suffix[1:].lower() == wanted:
            found.append(file)
    return found


def find_files_by_name_pattern(root: PathLike, pattern: str) -> List[str]:
    """Return files whose name contains ``pattern``, ignoring case."""
    wanted = pattern.lower()
    return [
        file for file in walk_directory(root) if wanted in Path(file).name.lower()
    ]