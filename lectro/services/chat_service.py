"""Retrieval-augmented chat over the user's book library.

The reader sends a question, optionally with the excerpts it already
retrieved and the prior conversation.  This service builds one prompt from
those pieces, asks the LLM, and reports which books the answer mentions.

Data flow
---------
1. RETRIEVE   -- When the caller supplied no excerpts and a search service
                 is wired, run a semantic search and turn the top hits into
                 contexts.
2. PROMPT     -- Number every excerpt as ``[Source i - "title", chapter]``
                 and prepend the conversation history.
3. COMPLETE   -- Single LLM call; provider errors propagate.
4. ATTRIBUTE  -- A context counts as *used* when its book title appears in
                 the answer (case-insensitive).  A cheap heuristic, but it
                 needs no second model call.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from lectro.interfaces.llm_provider import ILLMProvider
from lectro.models.rag import ChatMessage, RagAnswer, RagContext
from lectro.services.search_service import SearchService
from lectro.utils.errors import ValidationError
from lectro.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)


class RagChatService:
    """Answers questions about the library from retrieved book excerpts.

    Parameters
    ----------
    llm:
        LLM provider used to generate the answer.
    search_service:
        Optional search service for automatic retrieval.  When ``None``,
        only caller-supplied contexts are used.
    context_limit:
        Number of hits retrieved when the caller supplies no contexts.
    temperature, max_tokens:
        Passed through to the LLM call.
    """

    _SYSTEM_PROMPT = (
        "You are a knowledgeable assistant helping a user explore their personal "
        "book library. Answer questions by synthesizing information from the "
        "provided book excerpts."
    )

    _INSTRUCTIONS = (
        "Instructions:\n"
        "1. Synthesize information from multiple sources when relevant\n"
        "2. Reference specific books when citing information\n"
        "3. If the excerpts don't contain relevant information, say so honestly\n"
        "4. Be conversational and insightful\n"
        "5. Draw connections between different books when appropriate\n\n"
        "Provide a helpful, well-structured response."
    )

    def __init__(
        self,
        llm: ILLMProvider,
        search_service: SearchService | None = None,
        context_limit: int = 8,
        temperature: float = 0.4,
        max_tokens: int = 2000,
    ) -> None:
        self._llm = llm
        self._search_service = search_service
        self._context_limit = context_limit
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def answer(
        self,
        query: str,
        contexts: Sequence[RagContext] = (),
        history: Sequence[ChatMessage] = (),
        model: str | None = None,
    ) -> RagAnswer:
        """Answer *query* grounded in *contexts* (retrieved if empty)."""
        if not query or not query.strip():
            raise ValidationError(message="Query is required")

        contexts = list(contexts)
        if not contexts and self._search_service is not None:
            contexts = await self._retrieve(query)

        user_prompt = self._build_prompt(query, contexts, history)
        response = await self._llm.complete(
            system_prompt=self._SYSTEM_PROMPT,
            user_prompt=user_prompt,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            model=model,
        )

        used = find_used_sources(response, contexts)
        logger.info(
            "rag_answer_generated",
            contexts=len(contexts),
            history=len(history),
            used_sources=len(used),
            provider=self._llm.get_provider_name(),
        )
        return RagAnswer(response=response, used_sources=used)

    # -- Private helpers ------------------------------------------------------

    async def _retrieve(self, query: str) -> list[RagContext]:
        hits = await self._search_service.search(query, self._context_limit)
        logger.debug("rag_contexts_retrieved", hits=len(hits))
        # Chunks carry no book title; the book id stands in for it.
        return [
            RagContext(
                book_id=hit.book_id,
                book_title=hit.book_id,
                chapter_title=hit.chapter_title or "",
                content=hit.text,
            )
            for hit in hits
        ]

    def _build_prompt(
        self,
        query: str,
        contexts: Sequence[RagContext],
        history: Sequence[ChatMessage],
    ) -> str:
        context_text = "\n\n".join(
            f'[Source {i} - "{ctx.book_title}", {ctx.chapter_title}]:\n{ctx.content}'
            for i, ctx in enumerate(contexts, start=1)
        )
        history_text = "\n".join(
            f"{'User' if msg.role == 'user' else 'Assistant'}: {msg.content}"
            for msg in history
        )

        parts: list[str] = []
        if history_text:
            parts.append(f"Previous conversation:\n{history_text}")
        parts.append(f"User's question: {query}")
        parts.append(f"Relevant excerpts from the user's library:\n{context_text}")
        parts.append(self._INSTRUCTIONS)
        return "\n\n".join(parts)


def find_used_sources(response: str, contexts: Sequence[RagContext]) -> list[RagContext]:
    """Return the contexts whose book title occurs in *response*."""
    lowered = response.lower()
    return [
        ctx for ctx in contexts if ctx.book_title and ctx.book_title.lower() in lowered
    ]
