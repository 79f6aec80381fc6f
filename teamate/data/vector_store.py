"""
Vector store abstraction for participant embeddings.

Supports a ChromaDB backend for persistent or remote storage and an
in-memory backend for tests and file-based runs.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Optional

from teamate.utils.config import get_settings
from teamate.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class VectorRecord:
    """A stored embedding with its metadata."""

    id: str
    embedding: Optional[list[float]]
    metadata: dict[str, Any] = field(default_factory=dict)
    document: Optional[str] = None


class VectorStore(ABC):
    """Abstract base class for vector stores."""

    def connect(self) -> None:
        """Open the underlying connection; idempotent."""

    def close(self) -> None:
        """Release the underlying connection; idempotent."""

    def __enter__(self) -> "VectorStore":
        self.connect()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @abstractmethod
    def upsert(self, records: list[VectorRecord]) -> None:
        """Add or replace records."""
        pass

    @abstractmethod
    def get(self, ids: list[str]) -> list[VectorRecord]:
        """Get records by ID; unknown ids are skipped."""
        pass

    @abstractmethod
    def iter_records(self, batch_size: int = 1000) -> Iterator[VectorRecord]:
        """Iterate over every stored record."""
        pass

    @abstractmethod
    def delete(self, ids: list[str]) -> None:
        """Delete records by ID."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Get total number of records in store."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove all records from store."""
        pass


def _to_float_list(values: Any) -> Optional[list[float]]:
    if values is None:
        return None
    return [float(v) for v in values]


def _clean_metadata(metadata: dict[str, Any]) -> dict[str, Any]:
    # Chroma rejects None metadata values
    return {k: v for k, v in metadata.items() if v is not None}


class ChromaVectorStore(VectorStore):
    """
    ChromaDB-based vector store implementation.

    Uses a persistent local client, or an HTTP client when a host is given.
    """

    def __init__(
        self,
        collection_name: Optional[str] = None,
        persist_directory: Optional[Path] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
    ):
        """
        Initialize ChromaDB vector store.

        Args:
            collection_name: Name of the collection to use.
            persist_directory: Directory for persistent storage.
            host: Chroma server host; local persistent storage when unset.
            port: Chroma server port.
        """
        settings = get_settings()
        self.collection_name = collection_name or settings.vector_store.collection_name
        self.persist_directory = persist_directory or settings.vector_store.persist_directory
        self.host = host or settings.vector_store.host
        self.port = port or settings.vector_store.port

        self._client = None
        self._collection = None
        self._initialized = False

    def connect(self) -> None:
        """Lazy initialization of ChromaDB client."""
        if self._initialized:
            return

        try:
            import chromadb
            from chromadb.config import Settings as ChromaSettings

            chroma_settings = ChromaSettings(anonymized_telemetry=False, allow_reset=True)

            if self.host:
                logger.info(f"Connecting to ChromaDB at {self.host}:{self.port}")
                self._client = chromadb.HttpClient(
                    host=self.host,
                    port=self.port,
                    settings=chroma_settings,
                )
            else:
                self.persist_directory.mkdir(parents=True, exist_ok=True)
                logger.info(f"Initializing ChromaDB at: {self.persist_directory}")
                self._client = chromadb.PersistentClient(
                    path=str(self.persist_directory),
                    settings=chroma_settings,
                )

            self._collection = self._client.get_or_create_collection(
                name=self.collection_name,
                metadata={"hnsw:space": "cosine"},
            )

            self._initialized = True
            logger.info(
                f"ChromaDB initialized with collection: {self.collection_name} "
                f"({self._collection.count()} records)"
            )

        except ImportError:
            logger.error("chromadb not installed. Install with: pip install chromadb")
            raise
        except Exception as e:
            logger.error(f"Failed to initialize ChromaDB: {e}")
            raise

    def close(self) -> None:
        """Drop the client; the next call reconnects."""
        if self._initialized:
            logger.debug(f"Closing ChromaDB collection: {self.collection_name}")
        self._client = None
        self._collection = None
        self._initialized = False

    @property
    def collection(self):
        """Get the ChromaDB collection."""
        if not self._initialized:
            self.connect()
        return self._collection

    def _to_records(self, results: dict[str, Any]) -> list[VectorRecord]:
        ids = results.get("ids") or []
        embeddings = results.get("embeddings")
        metadatas = results.get("metadatas")
        documents = results.get("documents")

        records = []
        for i, record_id in enumerate(ids):
            records.append(VectorRecord(
                id=record_id,
                embedding=_to_float_list(embeddings[i]) if embeddings is not None else None,
                metadata=dict(metadatas[i] or {}) if metadatas is not None else {},
                document=documents[i] if documents is not None else None,
            ))
        return records

    def upsert(self, records: list[VectorRecord]) -> None:
        """
        Add or update records in the collection.

        Args:
            records: Records to store; each must carry an embedding.
        """
        if not records:
            return

        documents = [r.document for r in records]
        self.collection.upsert(
            ids=[r.id for r in records],
            embeddings=[r.embedding for r in records],
            metadatas=[_clean_metadata(r.metadata) for r in records],
            documents=documents if all(d is not None for d in documents) else None,
        )

        logger.debug(f"Upserted {len(records)} records to collection")

    def get(self, ids: list[str]) -> list[VectorRecord]:
        """Get records by ID."""
        if not ids:
            return []

        results = self.collection.get(
            ids=ids,
            include=["embeddings", "documents", "metadatas"],
        )
        return self._to_records(results)

    def iter_records(self, batch_size: int = 1000) -> Iterator[VectorRecord]:
        """Page through the whole collection."""
        offset = 0
        while True:
            results = self.collection.get(
                limit=batch_size,
                offset=offset,
                include=["embeddings", "documents", "metadatas"],
            )
            batch = self._to_records(results)
            yield from batch

            if len(batch) < batch_size:
                break
            offset += batch_size

    def delete(self, ids: list[str]) -> None:
        """Delete records by ID."""
        if ids:
            self.collection.delete(ids=ids)
            logger.debug(f"Deleted {len(ids)} records from collection")

    def count(self) -> int:
        """Get total number of records in collection."""
        return self.collection.count()

    def clear(self) -> None:
        """Clear all records from collection."""
        # Delete and recreate collection
        if self._client and self._collection:
            self._client.delete_collection(self.collection_name)
            self._collection = self._client.create_collection(
                name=self.collection_name,
                metadata={"hnsw:space": "cosine"},
            )
            logger.info(f"Cleared collection: {self.collection_name}")


class InMemoryVectorStore(VectorStore):
    """
    Dictionary-backed vector store.

    Keeps insertion order, so iteration is deterministic.
    """

    def __init__(self, records: Optional[list[VectorRecord]] = None):
        self._records: dict[str, VectorRecord] = {}
        if records:
            self.upsert(records)

    def upsert(self, records: list[VectorRecord]) -> None:
        for record in records:
            self._records[record.id] = record
        logger.debug(f"Upserted {len(records)} records in memory")

    def get(self, ids: list[str]) -> list[VectorRecord]:
        return [self._records[i] for i in ids if i in self._records]

    def iter_records(self, batch_size: int = 1000) -> Iterator[VectorRecord]:
        yield from list(self._records.values())

    def delete(self, ids: list[str]) -> None:
        for record_id in ids:
            self._records.pop(record_id, None)

    def count(self) -> int:
        return len(self._records)

    def clear(self) -> None:
        self._records.clear()


def load_records_from_json(path: Path) -> list[VectorRecord]:
    """
    Load pre-embedded participant records from a JSON file.

    Accepts a list of objects, or an object with a "participants" list. Each
    object needs an "id" and an "embedding" (or "values") array; a nested
    "metadata" object and any other top-level keys become metadata.

    Raises:
        ValueError: If the file does not have the expected shape.
    """
    with open(path, encoding="utf-8") as f:
        payload = json.load(f)

    if isinstance(payload, dict):
        payload = payload.get("participants")
    if not isinstance(payload, list):
        raise ValueError(f"Expected a list of participants in {path}")

    records = []
    for position, item in enumerate(payload):
        if not isinstance(item, dict) or "id" not in item:
            raise ValueError(f"Entry {position} in {path} has no 'id'")

        item = dict(item)
        record_id = str(item.pop("id"))
        embedding = item.pop("embedding", None)
        if embedding is None:
            embedding = item.pop("values", None)
        metadata = dict(item.pop("metadata", None) or {})
        document = item.pop("document", None)
        metadata.update(item)

        records.append(VectorRecord(
            id=record_id,
            embedding=embedding,
            metadata=metadata,
            document=document,
        ))

    logger.info(f"Loaded {len(records)} records from {path}")
    return records


def get_vector_store(
    provider: Optional[str] = None,
    **kwargs,
) -> VectorStore:
    """
    Factory function to get a vector store instance.

    Args:
        provider: Vector store provider ('chromadb' or 'memory').
                 Defaults to config setting.
        **kwargs: Additional arguments for the vector store.

    Returns:
        VectorStore instance.
    """
    settings = get_settings()
    provider = provider or settings.vector_store.provider

    if provider == "chromadb":
        return ChromaVectorStore(**kwargs)
    elif provider == "memory":
        return InMemoryVectorStore(**kwargs)
    else:
        raise ValueError(f"Unknown vector store provider: {provider}")
