"""Unit tests for the vector and RAG data models."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pydantic
import pytest

from lectro.models.rag import ChatMessage, RagAnswer, RagContext
from lectro.models.vectors import Chunk, VectorStoreSnapshot, format_timestamp


class TestChunk:
    def test_accepts_camel_case_and_snake_case(self) -> None:
        a = Chunk.model_validate({"id": "x", "bookId": "b", "embedding": [1.0]})
        b = Chunk(id="x", book_id="b", embedding=[1.0])
        assert a.book_id == b.book_id == "b"

    def test_requires_id_and_book_id(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            Chunk.model_validate({"bookId": "b", "embedding": [1.0]})
        with pytest.raises(pydantic.ValidationError):
            Chunk.model_validate({"id": "", "bookId": "b", "embedding": [1.0]})

    def test_rejects_non_numeric_embedding(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            Chunk.model_validate({"id": "x", "bookId": "b", "embedding": ["a"]})

    def test_is_frozen(self) -> None:
        chunk = Chunk(id="x", book_id="b", embedding=[1.0])
        with pytest.raises(pydantic.ValidationError):
            chunk.text = "changed"  # type: ignore[misc]

    def test_to_record_keeps_extras_and_uses_wire_names(self) -> None:
        chunk = Chunk.model_validate(
            {
                "id": "x",
                "bookId": "b",
                "embedding": [0.5],
                "text": "t",
                "chapterTitle": "Ch",
                "startCfi": "epubcfi(/6/2)",
            }
        )
        record = chunk.to_record()
        assert record == {
            "id": "x",
            "bookId": "b",
            "embedding": [0.5],
            "text": "t",
            "chapterTitle": "Ch",
            "startCfi": "epubcfi(/6/2)",
        }

    def test_to_record_omits_unset_chapter_title(self) -> None:
        record = Chunk(id="x", book_id="b", embedding=[1.0]).to_record()
        assert "chapterTitle" not in record


class TestSnapshot:
    def test_empty_document(self) -> None:
        assert VectorStoreSnapshot().to_document() == {"chunks": [], "lastSync": None}

    def test_timestamp_is_utc_with_z_suffix(self) -> None:
        moment = datetime(2026, 10, 17, 9, 30, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(moment) == "2026-10-17T07:30:00.000000Z"

    def test_naive_timestamp_treated_as_utc(self) -> None:
        assert format_timestamp(datetime(2026, 1, 1)).startswith("2026-01-01T00:00:00")


class TestRagModels:
    def test_context_aliases(self) -> None:
        ctx = RagContext.model_validate(
            {"bookId": "b1", "bookTitle": "Moby-Dick", "chapterTitle": "Loomings", "content": "c"}
        )
        assert ctx.book_title == "Moby-Dick"
        assert ctx.cfi is None

    def test_chat_message_role_is_restricted(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            ChatMessage(role="system", content="nope")  # type: ignore[arg-type]

    def test_answer_serializes_used_sources_alias(self) -> None:
        answer = RagAnswer(response="r", used_sources=[])
        assert answer.model_dump(by_alias=True) == {"response": "r", "usedSources": []}
