"""Lectro domain models - re-exports all public model classes.

    - vectors.py - chunk records, the persisted snapshot, search hits, stats
    - rag.py     - chat excerpts, conversation turns and answers
"""

from __future__ import annotations

from lectro.models.rag import ChatMessage, RagAnswer, RagContext
from lectro.models.vectors import (
    Chunk,
    SearchHit,
    VectorStoreSnapshot,
    VectorStoreStats,
    format_timestamp,
)

__all__ = [
    "ChatMessage",
    "Chunk",
    "RagAnswer",
    "RagContext",
    "SearchHit",
    "VectorStoreSnapshot",
    "VectorStoreStats",
    "format_timestamp",
]
