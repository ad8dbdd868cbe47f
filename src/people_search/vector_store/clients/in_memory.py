"""In-memory vector store with cosine similarity search."""

import asyncio
import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
from concurrent.futures import ThreadPoolExecutor

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity

from ...core.exceptions import VectorStoreError, VectorStoreNotInitializedError
from ..embedder import Embedder
from ..models import (
    DocumentSearchResponse,
    MemoryVector,
    StoreDocument,
    VectorSearchResponse,
)

logger = logging.getLogger(__name__)

# Nearest neighbours fetched per requested result, leaving room for filtering
CANDIDATE_MULTIPLIER = 2


def distance_to_similarity(distance: float) -> float:
    """Map a cosine distance in [0, 2] onto a similarity in [0, 1]."""
    return max(0.0, min(1.0, 1.0 - distance / 2.0))


def matches_metadata_filter(metadata: Dict[str, Any], metadata_filter: Dict[str, Any]) -> bool:
    """
    Check stored metadata against filter criteria.

    Every filter key must be present. List-valued metadata (e.g. skills)
    matches a scalar filter by membership and a list filter by any shared
    element; everything else must be equal.
    """
    for key, expected in metadata_filter.items():
        if key not in metadata:
            return False

        actual = metadata[key]
        if isinstance(actual, (list, tuple, set)):
            if isinstance(expected, (list, tuple, set)):
                if not any(value in actual for value in expected):
                    return False
            elif expected not in actual:
                return False
        elif actual != expected:
            return False

    return True


class InMemoryVectorStoreClient:
    """
    Vector store keeping every embedding in process memory.

    Profiles are stored as documents keyed by their ``uuid`` metadata and
    searched with a linear cosine-similarity scan.
    """

    def __init__(
        self,
        embedder: Embedder,
        executor: Optional[ThreadPoolExecutor] = None,
        max_workers: int = 4
    ):
        """
        Initialize in-memory vector store client.

        Args:
            embedder: Converts document and query text to vectors
            executor: Thread pool for similarity computation
            max_workers: Pool size when no executor is given
        """
        self.embedder = embedder
        self._vectors: Optional[Dict[str, MemoryVector]] = None
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=max_workers)

    async def initialize(self) -> None:
        """Create an empty store. Calling it again keeps existing vectors."""
        if self._vectors is None:
            logger.info("Initializing in-memory vector store for user search...")
            self._vectors = {}
        logger.info("In-memory vector store initialized")

    def is_initialized(self) -> bool:
        return self._vectors is not None

    async def add_documents(self, documents: Sequence[StoreDocument]) -> None:
        """
        Embed and store documents.

        Documents are keyed by ``metadata["uuid"]`` (generated when absent);
        adding a document whose key already exists replaces it.

        Raises:
            VectorStoreNotInitializedError: If initialize() was not called
            VectorStoreError: If embedding fails
        """
        vectors = self._ensure_initialized()
        if not documents:
            return

        logger.info(f"Adding {len(documents)} user documents...")

        try:
            embeddings = await self.embedder.embed_documents([doc.page_content for doc in documents])
        except Exception as e:
            logger.error(f"Failed to add documents: {str(e)}")
            raise VectorStoreError(f"Add documents failed: {str(e)}")

        if len(embeddings) != len(documents):
            raise VectorStoreError(
                f"Add documents failed: got {len(embeddings)} embeddings for {len(documents)} documents"
            )

        for doc, embedding in zip(documents, embeddings):
            doc_id = doc.metadata.get("uuid") or uuid.uuid4().hex
            vectors[doc_id] = MemoryVector(
                content=doc.page_content,
                embedding=list(embedding),
                metadata=dict(doc.metadata),
                id=doc_id
            )

        logger.info(f"Successfully added {len(documents)} user documents")
        logger.info(f"Current total documents count: {len(vectors)}")

    async def upsert_vector(
        self,
        id: str,
        text: str,
        vector: Sequence[float],
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """Store a precomputed vector under ``id``."""
        vectors = self._ensure_initialized()
        vectors[id] = MemoryVector(content=text, embedding=list(vector), metadata=dict(metadata or {}), id=id)

    async def upsert_vectors_batch(self, items: Iterable[Dict[str, Any]]) -> None:
        """Store precomputed vectors given as dicts with id, text, vector and metadata."""
        for item in items:
            await self.upsert_vector(item["id"], item["text"], item["vector"], item.get("metadata"))

    async def search_documents(
        self,
        query: str,
        top_k: int = 5,
        metadata_filter: Optional[Dict[str, Any]] = None,
        threshold: float = 0.7
    ) -> List[DocumentSearchResponse]:
        """
        Search documents by natural language query with optional metadata filtering.

        Suits queries like "data scientists in Germany" combined with a
        filter such as ``{"skills": "Python"}``.

        Args:
            query: Natural language query
            top_k: Maximum number of results
            metadata_filter: Exact-match / contains criteria on metadata
            threshold: Minimum similarity score

        Returns:
            Hits sorted by similarity, highest first

        Raises:
            VectorStoreNotInitializedError: If initialize() was not called
            VectorStoreError: If embedding or scoring fails
        """
        self._ensure_initialized()
        logger.info(f"Searching for: '{query}' (top_k: {top_k}, threshold: {threshold})")

        try:
            query_vector = await self.embedder.embed_query(query)
        except Exception as e:
            logger.error(f"Document search failed: {str(e)}")
            raise VectorStoreError(f"Document search failed: {str(e)}")

        results = [
            DocumentSearchResponse(
                id=hit.id,
                score=hit.score,
                text=hit.text,
                metadata=hit.metadata,
                document=StoreDocument(page_content=hit.text, metadata=hit.metadata)
            )
            for hit in await self.search_vector(query_vector, top_k, threshold, metadata_filter)
        ]

        logger.info(f"Found {len(results)} matching users")
        return results

    async def search_vector(
        self,
        query_vector: Sequence[float],
        top_k: int = 5,
        threshold: float = 0.7,
        metadata_filter: Optional[Dict[str, Any]] = None
    ) -> List[VectorSearchResponse]:
        """
        Rank stored vectors against a query vector.

        The ``CANDIDATE_MULTIPLIER * top_k`` nearest vectors are taken first,
        then the threshold and metadata filter are applied.
        """
        vectors = self._ensure_initialized()
        if not vectors:
            return []

        snapshot = list(vectors.values())
        try:
            candidates = await asyncio.get_event_loop().run_in_executor(
                self._executor, self._nearest_sync, snapshot, list(query_vector), top_k * CANDIDATE_MULTIPLIER
            )
        except Exception as e:
            logger.error(f"Vector search failed: {str(e)}")
            raise VectorStoreError(f"Vector search failed: {str(e)}")

        results = []
        for memory_vector, score in candidates:
            if score < threshold:
                continue
            if metadata_filter and not matches_metadata_filter(memory_vector.metadata, metadata_filter):
                continue
            results.append(
                VectorSearchResponse(
                    id=self._result_id(memory_vector),
                    score=score,
                    text=memory_vector.content,
                    metadata=memory_vector.metadata
                )
            )

        results.sort(key=lambda r: r.score, reverse=True)
        return results[:top_k]

    def _nearest_sync(
        self,
        snapshot: List[MemoryVector],
        query_vector: List[float],
        limit: int
    ) -> List[Tuple[MemoryVector, float]]:
        """Cosine scan over the snapshot, run in the thread pool."""
        matrix = np.asarray([mv.embedding for mv in snapshot], dtype=float)
        query = np.asarray(query_vector, dtype=float).reshape(1, -1)

        similarities = cosine_similarity(query, matrix).flatten()
        distances = 1.0 - similarities

        # Stable sort keeps insertion order between equal distances
        order = np.argsort(distances, kind="stable")[:limit]
        return [(snapshot[idx], distance_to_similarity(float(distances[idx]))) for idx in order]

    @staticmethod
    def _result_id(memory_vector: MemoryVector) -> str:
        metadata = memory_vector.metadata
        return str(metadata.get("uuid") or metadata.get("id") or memory_vector.id or "unknown")

    async def get_vector(self, id: str) -> Optional[VectorSearchResponse]:
        """Return the stored document as a hit with score 1.0, or None."""
        vectors = self._ensure_initialized()
        memory_vector = vectors.get(id)
        if memory_vector is None:
            return None

        return VectorSearchResponse(
            id=id,
            score=1.0,
            text=memory_vector.content,
            metadata=memory_vector.metadata
        )

    async def delete_vector(self, id: str) -> bool:
        vectors = self._ensure_initialized()
        return vectors.pop(id, None) is not None

    async def size(self) -> int:
        return len(self._vectors) if self._vectors is not None else 0

    async def clear(self) -> None:
        vectors = self._ensure_initialized()
        vectors.clear()
        logger.info("In-memory vector store cleared")

    async def get_all_memory_vectors(self) -> List[MemoryVector]:
        """Copies of every stored vector in insertion order."""
        vectors = self._ensure_initialized()
        logger.info(f"Found {len(vectors)} memory vectors")
        return [
            MemoryVector(
                content=mv.content,
                embedding=list(mv.embedding),
                metadata=dict(mv.metadata),
                id=mv.id
            )
            for mv in vectors.values()
        ]

    async def close(self) -> None:
        """Release the thread pool if this client created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def _ensure_initialized(self) -> Dict[str, MemoryVector]:
        if self._vectors is None:
            raise VectorStoreNotInitializedError("Vector store not initialized. Call initialize() first.")
        return self._vectors
