"""Unit tests for the character-window TextChunker."""

from __future__ import annotations

import pytest

from lectro.services.indexing.chunker import TextChunker, normalize_whitespace


def _text(length: int) -> str:
    # Distinct characters make window positions easy to check.
    alphabet = "abcdefghijklmnopqrstuvwxyz"
    return "".join(alphabet[i % 26] for i in range(length))


class TestNormalizeWhitespace:
    def test_collapses_runs_and_trims(self) -> None:
        assert normalize_whitespace("  Call\n\nme \t Ishmael.  ") == "Call me Ishmael."


class TestTextChunker:
    def test_short_chapter_skipped(self) -> None:
        chunker = TextChunker()
        assert chunker.split("Table of Contents") == []
        assert chunker.split("x" * 50) == []
        assert chunker.split("x" * 51) == ["x" * 51]

    def test_whitespace_only_skipped(self) -> None:
        assert TextChunker().split(" \n\t " * 40) == []

    def test_windows_overlap(self) -> None:
        chunker = TextChunker(chunk_size=1000, overlap=200)
        text = _text(2500)
        windows = chunker.split(text)

        assert [len(w) for w in windows] == [1000, 1000, 900]
        assert windows[0] == text[0:1000]
        assert windows[1] == text[800:1800]
        assert windows[2] == text[1600:2500]
        assert windows[0][-200:] == windows[1][:200]

    def test_exact_fit_has_no_redundant_tail(self) -> None:
        chunker = TextChunker(chunk_size=100, overlap=20, min_chapter_chars=10)
        assert len(chunker.split(_text(100))) == 1
        assert len(chunker.split(_text(180))) == 2

    def test_whitespace_normalized_before_split(self) -> None:
        chunker = TextChunker(chunk_size=60, overlap=10, min_chapter_chars=5)
        windows = chunker.split("word   " * 30)
        assert all("  " not in window for window in windows)

    @pytest.mark.parametrize(
        ("chunk_size", "overlap"),
        [(0, 0), (100, 100), (100, 150), (100, -1)],
    )
    def test_invalid_configuration(self, chunk_size: int, overlap: int) -> None:
        with pytest.raises(ValueError):
            TextChunker(chunk_size=chunk_size, overlap=overlap)
