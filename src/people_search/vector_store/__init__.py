"""Vector store layer: models, embedders, backends and service."""

from .embedder import Embedder, LLMEmbedder
from .clients import InMemoryVectorStoreClient, VectorStoreClient
from .models import (
    AddDocumentsRequest,
    AddDocumentsResponse,
    DocumentSearchResponse,
    GetDocumentRequest,
    GetDocumentResponse,
    MemoryVector,
    SearchDocumentsRequest,
    SearchDocumentsResponse,
    StoreDocument,
    VectorSearchResponse,
    VectorStoreConfig,
    VectorStoreProvider,
    VectorStoreStats,
)
from .service import VectorStoreService

__all__ = [
    "Embedder",
    "LLMEmbedder",
    "InMemoryVectorStoreClient",
    "VectorStoreClient",
    "AddDocumentsRequest",
    "AddDocumentsResponse",
    "DocumentSearchResponse",
    "GetDocumentRequest",
    "GetDocumentResponse",
    "MemoryVector",
    "SearchDocumentsRequest",
    "SearchDocumentsResponse",
    "StoreDocument",
    "VectorSearchResponse",
    "VectorStoreConfig",
    "VectorStoreProvider",
    "VectorStoreStats",
    "VectorStoreService",
]
