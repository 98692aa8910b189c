from pathlib import Path

import pytest

from forgeshell.globbing import GlobMatcher, expand_globs, glob


def test_simple_wildcard():
    matcher = GlobMatcher("*.rs")
    assert matcher.matches(Path("main.rs"))
    assert matcher.matches(Path("lib.rs"))
    assert not matcher.matches(Path("main.txt"))


def test_double_wildcard():
    matcher = GlobMatcher("**/*.rs")
    assert matcher.matches(Path("src/main.rs"))
    assert matcher.matches(Path("src/lib/mod.rs"))
    assert matcher.matches(Path("tests/unit/test.rs"))
    assert not matcher.matches(Path("README.md"))


def test_question_mark():
    matcher = GlobMatcher("test?.rs")
    assert matcher.matches(Path("test1.rs"))
    assert matcher.matches(Path("testa.rs"))
    assert not matcher.matches(Path("test12.rs"))
    assert not matcher.matches(Path("test.rs"))


def test_character_sets():
    matcher = GlobMatcher("test[0-9].rs")
    assert matcher.matches(Path("test1.rs"))
    assert matcher.matches(Path("test9.rs"))
    assert not matcher.matches(Path("testa.rs"))

    negated = GlobMatcher("test[^0-9].rs")
    assert not negated.matches(Path("test1.rs"))
    assert negated.matches(Path("testa.rs"))


def test_complex_patterns():
    matcher = GlobMatcher("src/**/*.rs")
    assert matcher.matches(Path("src/main.rs"))
    assert matcher.matches(Path("src/cli/commands/mod.rs"))


def test_single_star_does_not_cross_directories():
    matcher = GlobMatcher("*.rs")
    assert not matcher.matches("src/main.rs")


def test_question_mark_does_not_match_separator():
    assert not GlobMatcher("a?b").matches("a/b")


def test_unclosed_bracket_is_literal():
    matcher = GlobMatcher("file[1")
    assert matcher.matches("file[1")
    assert not matcher.matches("file1")


def test_matches_accepts_strings():
    assert GlobMatcher("data_[a-c]?.csv").matches("data_b7.csv")


@pytest.fixture
def tree(tmp_path, monkeypatch):
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "b.txt").write_text("b")
    (tmp_path / "d.md").write_text("d")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "c.txt").write_text("c")
    monkeypatch.chdir(tmp_path)
    return Path.cwd()


def test_glob_recursive(tree):
    assert glob("**/*.txt") == [tree / "a.txt", tree / "b.txt", tree / "sub" / "c.txt"]


def test_glob_matches_directories(tree):
    assert glob("**/sub") == [tree / "sub"]


def test_glob_results_are_sorted(tree):
    results = glob("**/*")
    assert results == sorted(results)
    assert tree / "d.md" in results


def test_expand_globs_keeps_literals_sorted_and_unique():
    assert expand_globs(["b", "a", "b"]) == [Path("a"), Path("b")]


def test_expand_globs_mixes_patterns_and_literals(tree):
    result = expand_globs(["**/*.md", "zz_literal"])
    assert result == sorted([tree / "d.md", Path("zz_literal")])