"""Abstract base class for vector-store providers.

Defines the contract for persisting chunk embeddings and searching them by
similarity.  The only implementation today is the flat JSON file; a real
vector database could replace it behind the same interface once libraries
grow past what a whole-file read per request can handle.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

from lectro.models.vectors import Chunk, SearchHit, VectorStoreSnapshot, VectorStoreStats


# Concrete implementation: JsonFileVectorStore (lectro/providers/vector_store/)
class IVectorStoreProvider(ABC):
    """Contract for the chunk store used by search, sync and indexing.

    All methods are async so file or network I/O never blocks the event loop.
    """

    @abstractmethod
    async def load(self) -> VectorStoreSnapshot:
        """Return every stored chunk and the last sync time.

        A store that has never been written returns an empty snapshot.

        Raises
        ------
        lectro.utils.errors.ReadError
            If the persisted data exists but cannot be parsed.
        """

    @abstractmethod
    async def merge(
        self,
        incoming: Sequence[Chunk],
        deleted_book_ids: Iterable[str] = (),
        replaced_book_ids: Iterable[str] = (),
    ) -> int:
        """Upsert *incoming* by id, then drop every chunk of *deleted_book_ids*.

        Incoming chunks always win on id collision.  Deletion applies to the
        merged result, so chunks of a deleted book are removed even when they
        arrived in the same call.  Stored chunks of *replaced_book_ids* are
        discarded before the upsert; all of it is one write, so a failure
        leaves the previous chunks in place.

        Returns
        -------
        int
            Total number of chunks stored after the merge.

        Raises
        ------
        lectro.utils.errors.ReadError
            If the existing data cannot be parsed (nothing is written).
        lectro.utils.errors.WriteError
            If serialization or the write fails.
        """

    @abstractmethod
    async def search(self, query_embedding: Sequence[float], limit: int) -> list[SearchHit]:
        """Return at most *limit* chunks ranked by cosine similarity, descending.

        Raises
        ------
        lectro.utils.errors.ValidationError
            If *limit* is not a positive integer.
        lectro.utils.errors.ReadError
            If the persisted data cannot be parsed.
        """

    @abstractmethod
    async def get_stats(self) -> VectorStoreStats:
        """Return aggregate numbers about the stored chunks."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this store, e.g. ``"json_file"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the store's backing location is usable."""
