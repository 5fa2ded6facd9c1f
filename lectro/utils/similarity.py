"""Cosine similarity scoring and top-K ranking.

The vector index is small enough (one JSON file per library) that search is
a brute-force linear scan: every stored chunk is scored against the query
embedding and the best ``limit`` are kept.  Two operations live here:

1. **cosine_similarity** -- ``dot(a, b) / (|a| * |b|)``.  Undefined inputs
   (a zero-magnitude vector or vectors of different lengths) return NaN so
   callers can tell "no meaningful score" apart from a real score of 0.0.
2. **rank_chunks** -- Score, sort descending, truncate.  NaN scores sort
   after every real score; ties keep the original store order.
"""

import math
from collections.abc import Iterable, Sequence

from lectro.models.vectors import Chunk, SearchHit


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return the cosine similarity of *a* and *b* in ``[-1.0, 1.0]``.

    Returns NaN when the lengths differ or either vector has zero magnitude.
    """
    if len(a) != len(b):
        return math.nan

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    denominator = math.sqrt(norm_a) * math.sqrt(norm_b)
    if denominator == 0.0:
        return math.nan
    return dot / denominator


def _rank_key(hit: SearchHit) -> tuple[int, float]:
    if math.isnan(hit.score):
        return (1, 0.0)
    return (0, -hit.score)


def rank_chunks(
    chunks: Iterable[Chunk],
    query_embedding: Sequence[float],
    limit: int,
) -> tuple[list[SearchHit], int]:
    """Score every chunk against *query_embedding* and keep the top *limit*.

    Returns:
        ``(hits, mismatched)`` where *hits* is sorted by score descending and
        *mismatched* counts chunks whose embedding length differed from the
        query's (those score NaN).
    """
    query_len = len(query_embedding)
    mismatched = 0
    scored: list[SearchHit] = []
    for chunk in chunks:
        if len(chunk.embedding) != query_len:
            mismatched += 1
        scored.append(
            SearchHit(
                book_id=chunk.book_id,
                score=cosine_similarity(query_embedding, chunk.embedding),
                text=chunk.text,
                chapter_title=chunk.chapter_title,
            )
        )

    # list.sort is stable, so equal scores keep store order.
    scored.sort(key=_rank_key)
    return scored[:limit], mismatched
