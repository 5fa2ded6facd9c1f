"""Server-side book indexing: chunk chapter text, embed, store."""

from lectro.services.indexing.chunker import TextChunker
from lectro.services.indexing.indexing_service import ChapterText, IndexingService

__all__ = ["ChapterText", "IndexingService", "TextChunker"]
