"""Glob pattern matching with ``*``, ``**``, ``?`` and ``[...]`` sets."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List

from .operations import PathLike

_GLOB_CHARS = ("*", "?", "[")


def _set_matches(char_set: str, ch: str) -> bool:
    """Return whether ``ch`` is accepted by the body of a ``[...]`` set."""
    negated = char_set.startswith("^")
    index = 1 if negated else 0
    matched = False
    while index < len(char_set):
        if index + 2 < len(char_set) and char_set[index + 1] == "-":
            if char_set[index] <= ch <= char_set[index + 2]:
                matched = True
                break
            index += 3
        else:
            if ch == char_set[index]:
                matched = True
                break
            index += 1
    return matched != negated


def _match(pattern: str, text: str) -> bool:
    plen, tlen = len(pattern), len(text)

    @lru_cache(maxsize=None)
    def match_at(p: int, t: int) -> bool:
        if p >= plen:
            return t >= tlen
        current = pattern[p]

        if current == "*" and p + 1 < plen and pattern[p + 1] == "*":
            nxt = p + 2
            while nxt < plen and pattern[nxt] == "/":
                nxt += 1
            # Zero or more whole directories: resume at a directory boundary.
            return any(
                match_at(nxt, i)
                for i in range(t, tlen + 1)
                if i == t or i == tlen or text[i - 1] == "/"
            )

        if current == "*":
            if match_at(p + 1, t):
                return True
            for i in range(t, tlen):
                if text[i] == "/":
                    break
                if match_at(p + 1, i + 1):
                    return True
            return False

        if current == "?":
            if t >= tlen or text[t] == "/":
                return False
            return match_at(p + 1, t + 1)

        if current == "[":
            end = pattern.find("]", p + 1)
            if end != -1:
                if t >= tlen:
                    return False
                if _set_matches(pattern[p + 1 : end], text[t]):
                    return match_at(end + 1, t + 1)
                return False

        if t >= tlen or current != text[t]:
            return False
        return match_at(p + 1, t + 1)

    return match_at(0, 0)


class GlobMatcher:
    """Matches path strings against a single glob pattern."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern

    def matches(self, path: PathLike) -> bool:
        return _match(self.pattern, os.fspath(path))

    def __repr__(self) -> str:
        return f"GlobMatcher({self.pattern!r})"


def _collect(directory: Path, matcher: GlobMatcher, recursive: bool) -> List[Path]:
    if not directory.is_dir():
        return []
    found: List[Path] = []
    with os.scandir(directory) as entries:
        for entry in entries:
            path = directory / entry.name
            if matcher.matches(path):
                found.append(path)
            if recursive and path.is_dir():
                found.extend(_collect(path, matcher, recursive))
    return found


def glob(pattern: str) -> List[Path]:
    """Return the sorted paths that match ``pattern``.

    Absolute patterns are searched from ``/``, others from the current
    directory; the pattern is matched against full paths. Only patterns
    containing ``**`` descend into subdirectories.
    """
    root = Path("/") if pattern.startswith("/") else Path(os.getcwd())
    matcher = GlobMatcher(pattern)
    return sorted(_collect(root, matcher, recursive="**" in pattern))


def expand_globs(patterns: Iterable[str]) -> List[Path]:
    """Expand glob patterns, keep literal paths, and return them sorted and unique."""
    found: List[Path] = []
    for pattern in patterns:
        if any(ch in pattern for ch in _GLOB_CHARS):
            found.extend(glob(pattern))
        else:
            found.append(Path(pattern))
    return sorted(set(found))