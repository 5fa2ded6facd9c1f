"""Application services: search, RAG chat and server-side indexing."""

from lectro.services.chat_service import RagChatService
from lectro.services.indexing.chunker import TextChunker
from lectro.services.indexing.indexing_service import ChapterText, IndexingService
from lectro.services.search_service import SearchService

__all__ = [
    "ChapterText",
    "IndexingService",
    "RagChatService",
    "SearchService",
    "TextChunker",
]
