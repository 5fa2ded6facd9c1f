"""RAG chat data models.

The reader client sends book excerpts (usually picked from its own search
results) together with a question and the running conversation; the chat
service answers from those excerpts only.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class RagContext(BaseModel):
    """One excerpt handed to the LLM as grounding material."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    book_id: str = Field(alias="bookId")
    book_title: str = Field(alias="bookTitle")
    chapter_title: str = Field(default="", alias="chapterTitle")
    content: str
    # EPUB canonical fragment identifier, used by the client to jump to the passage.
    cfi: str | None = None


class ChatMessage(BaseModel):
    """A previous turn in the conversation."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class RagAnswer(BaseModel):
    """The LLM answer plus the excerpts it appears to have drawn on."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    response: str
    used_sources: list[RagContext] = Field(default_factory=list, alias="usedSources")
