"""Fixed-size character windows with overlap.

Chapter text arrives as extracted EPUB/HTML text.  Whitespace runs are
collapsed to single spaces, then the text is cut into ``chunk_size``
character windows that start every ``chunk_size - overlap`` characters, so
consecutive windows share ``overlap`` characters and a sentence crossing a
boundary is still whole in one of them.

Chapters whose normalized text is ``min_chapter_chars`` characters or fewer
are navigation pages, copyright stubs and the like; they yield nothing.
"""

from __future__ import annotations

import re

import structlog

logger = structlog.get_logger(logger_name=__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


class TextChunker:
    """Splits chapter text into overlapping character windows.

    Parameters
    ----------
    chunk_size:
        Window length in characters (default 1000).
    overlap:
        Characters shared by consecutive windows (default 200).  Must be
        smaller than *chunk_size*.
    min_chapter_chars:
        Normalized chapters of this length or shorter are skipped.
    """

    def __init__(
        self,
        chunk_size: int = 1000,
        overlap: int = 200,
        min_chapter_chars: int = 50,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if not 0 <= overlap < chunk_size:
            raise ValueError(
                f"overlap must be in [0, chunk_size), got {overlap} for chunk_size {chunk_size}"
            )
        self._chunk_size = chunk_size
        self._overlap = overlap
        self._min_chapter_chars = min_chapter_chars

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def overlap(self) -> int:
        return self._overlap

    def split(self, text: str) -> list[str]:
        """Return the overlapping windows of *text* after normalization."""
        normalized = normalize_whitespace(text or "")
        if len(normalized) <= self._min_chapter_chars:
            return []

        step = self._chunk_size - self._overlap
        windows: list[str] = []
        for start in range(0, len(normalized), step):
            windows.append(normalized[start : start + self._chunk_size])
            # Stop once a window reaches the end; later ones would be
            # suffixes of it.
            if start + self._chunk_size >= len(normalized):
                break

        logger.debug("chapter_split", chars=len(normalized), windows=len(windows))
        return windows
