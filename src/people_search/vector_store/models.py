"""Vector store data models."""

from enum import Enum
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field


class VectorStoreProvider(str, Enum):
    """Vector store backends."""
    IN_MEMORY = "in-memory"
    POSTGRESQL = "postgresql"
    MILVUS = "milvus"
    CHROMA = "chroma"
    PINECONE = "pinecone"


@dataclass
class StoreDocument:
    """Text plus metadata, the unit added to a vector store."""
    page_content: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class MemoryVector:
    """A stored embedding with its source text."""
    content: str
    embedding: List[float]
    metadata: Dict[str, Any] = field(default_factory=dict)
    id: Optional[str] = None


@dataclass
class VectorSearchResponse:
    """
    A single search hit.

    Attributes:
        id: Stored vector identifier
        score: Similarity score (0.0-1.0, higher is more similar)
        text: Original text content
        metadata: Stored metadata
    """
    id: str
    score: float
    text: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate search response."""
        if not 0.0 <= self.score <= 1.0:
            raise ValueError("Score must be between 0.0 and 1.0")


@dataclass
class DocumentSearchResponse(VectorSearchResponse):
    """Search hit carrying the full stored document."""
    document: Optional[StoreDocument] = None


@dataclass
class VectorStoreConfig:
    """Per-request store options."""
    batch_size: Optional[int] = None
    threshold: Optional[float] = None
    top_k: Optional[int] = None
    auto_initialize: bool = True
    provider_extras: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AddDocumentsRequest:
    documents: List[StoreDocument]
    provider: Optional[VectorStoreProvider] = None
    config: VectorStoreConfig = field(default_factory=VectorStoreConfig)


@dataclass
class AddDocumentsResponse:
    success: bool
    documents_added: int
    total_documents: int
    processing_time_ms: float


@dataclass
class SearchDocumentsRequest:
    """Similarity search; unset top_k/threshold fall back to settings."""
    query: str
    top_k: Optional[int] = None
    metadata_filter: Optional[Dict[str, Any]] = None
    threshold: Optional[float] = None
    provider: Optional[VectorStoreProvider] = None
    config: VectorStoreConfig = field(default_factory=VectorStoreConfig)


@dataclass
class SearchDocumentsResponse:
    results: List[DocumentSearchResponse]
    total_found: int
    query: str
    provider: VectorStoreProvider
    processing_time_ms: float


@dataclass
class GetDocumentRequest:
    id: str
    provider: Optional[VectorStoreProvider] = None


@dataclass
class GetDocumentResponse:
    result: Optional[VectorSearchResponse]
    found: bool
    provider: VectorStoreProvider


@dataclass
class VectorStoreStats:
    provider: VectorStoreProvider
    total_documents: int
    is_initialized: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider.value,
            "total_documents": self.total_documents,
            "is_initialized": self.is_initialized,
        }
