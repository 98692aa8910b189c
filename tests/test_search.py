import pytest

from forgeshell.search import (
    TextSearcher,
    search_file,
    search_multiple_files,
    search_text,
    search_text_case_insensitive,
)


def test_matches_slice_back_to_pattern():
    text = "the cat sat on the mat with the cat"
    matches = search_text(text, "the")
    assert len(matches) == text.count("the")
    for start, length in matches:
        assert text[start:start + length] == "the"


def test_overlapping_matches():
    assert search_text("aaa", "aa") == [(0, 2), (1, 2)]


def test_no_match_returns_empty():
    assert search_text("abcdef", "xyz") == []


def test_case_sensitivity():
    text = "Hello HELLO hello"
    sensitive = search_text(text, "hello")
    insensitive = search_text_case_insensitive(text, "hello")
    assert len(sensitive) == 1
    assert text[sensitive[0].start:sensitive[0].start + 5] == "hello"
    assert len(insensitive) == 3
    for start, length in insensitive:
        assert text[start:start + length].lower() == "hello"


def test_whole_word_filters_embedded_matches():
    text = "cat concat cat_x cat"
    plain = TextSearcher().search_in_text(text, "cat")
    whole = TextSearcher(whole_word=True).search_in_text(text, "cat")
    assert len(whole) < len(plain)
    assert set(whole) <= set(plain)
    for start, length in whole:
        before = text[start - 1] if start > 0 else " "
        after = text[start + length] if start + length < len(text) else " "
        assert not (before.isalnum() or before == "_")
        assert not (after.isalnum() or after == "_")
    assert [m.start for m in whole] == [0, 17]


def test_search_in_file_uses_one_based_positions(tmp_path):
    target = tmp_path / "sample.txt"
    target.write_text("foo\nbar foo\nnothing\n")
    matches = search_file(str(target), "foo")
    assert matches == [(1, 1, 3), (2, 5, 3)]
    assert matches[1].line == 2
    assert matches[1].column == 5


def test_search_file_missing_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        search_file(str(tmp_path / "absent.txt"), "x")


def test_search_multiple_files_skips_unreadable_and_empty(tmp_path):
    hit = tmp_path / "hit.txt"
    hit.write_text("needle in haystack\nanother needle\n")
    miss = tmp_path / "miss.txt"
    miss.write_text("nothing here\n")
    absent = tmp_path / "absent.txt"
    paths = [str(hit), str(miss), str(absent)]
    results = search_multiple_files(paths, "needle")
    assert [path for path, _ in results] == [str(hit)]
    assert [m.line for m in results[0][1]] == [1, 2]


def test_case_insensitive_searcher_in_file(tmp_path):
    target = tmp_path / "mixed.txt"
    target.write_text("Error\nerror\nERROR\n")
    matches = TextSearcher(case_sensitive=False).search_in_file(target, "error")
    assert [m.line for m in matches] == [1, 2, 3]
    assert all(m.column == 1 for m in matches)