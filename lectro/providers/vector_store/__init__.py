"""Vector store provider implementations.

JsonFileVectorStore keeps every chunk in one JSON document under the library
root.  To move to a real vector database, implement IVectorStoreProvider and
register it in lectro/main.py.
"""

from lectro.providers.vector_store.json_file_provider import JsonFileVectorStore, merge_chunks

__all__ = ["JsonFileVectorStore", "merge_chunks"]
