"""
Data layer for Teamate.

Provides the participant vector stores, data models, and the retrieval
collaborator that feeds matching runs.

Submodules:
- vector_store: ChromaDB and in-memory embedding stores
- models: Pydantic data models/schemas
- retrieval: Strict deserialization of store records into participants
"""

from .vector_store import (
    ChromaVectorStore,
    InMemoryVectorStore,
    VectorRecord,
    VectorStore,
    get_vector_store,
    load_records_from_json,
)

__all__ = [
    "ChromaVectorStore",
    "InMemoryVectorStore",
    "VectorRecord",
    "VectorStore",
    "get_vector_store",
    "load_records_from_json",
]
