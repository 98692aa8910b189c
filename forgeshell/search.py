"""Plain-text search in strings and files."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Tuple

from .operations import PathLike, read_file_lines


class TextMatch(NamedTuple):
    """A match in a string: character offset and length."""

    start: int
    length: int


class FileMatch(NamedTuple):
    """A match in a file: 1-based line and column, and length."""

    line: int
    column: int
    length: int


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


@dataclass
class TextSearcher:
    """Finds every (possibly overlapping) occurrence of a pattern."""

    case_sensitive: bool = True
    whole_word: bool = False

    def search_in_text(self, text: str, pattern: str) -> List[TextMatch]:
        haystack = text if self.case_sensitive else text.lower()
        needle = pattern if self.case_sensitive else pattern.lower()
        matches = []
        pos = haystack.find(needle)
        while pos != -1:
            if not self.whole_word or self._is_word_boundary(text, pos, len(needle)):
                matches.append(TextMatch(pos, len(needle)))
            pos = haystack.find(needle, pos + 1)
        return matches

    def search_in_file(self, file_path: PathLike, pattern: str) -> List[FileMatch]:
        return [
            FileMatch(line_no, match.start + 1, match.length)
            for line_no, line in enumerate(read_file_lines(file_path), start=1)
            for match in self.search_in_text(line, pattern)
        ]

    @staticmethod
    def _is_word_boundary(text: str, pos: int, length: int) -> bool:
        start_ok = pos == 0 or not _is_word_char(text[pos - 1])
        end = pos + length
        end_ok = end >= len(text) or not _is_word_char(text[end])
        return start_ok and end_ok


def search_text(text: str, pattern: str) -> List[TextMatch]:
    return TextSearcher().search_in_text(text, pattern)


def search_text_case_insensitive(text: str, pattern: str) -> List[TextMatch]:
    return TextSearcher(case_sensitive=False).search_in_text(text, pattern)


def search_file(file_path: PathLike, pattern: str) -> List[FileMatch]:
    return TextSearcher().search_in_file(file_path, pattern)


def search_multiple_files(
    file_paths: Iterable[PathLike], pattern: str
) -> List[Tuple[PathLike, List[FileMatch]]]:
    """Search each file; unreadable files and files without matches are left out."""
    searcher = TextSearcher()
    results = []
    for path in file_paths:
        try:
            matches = searcher.search_in_file(path, pattern)
        except (OSError, ValueError):
            continue
        if matches:
            results.append((path, matches))
    return results