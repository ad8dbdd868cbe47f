"""Vector store backends."""

from .base import VectorStoreClient
from .in_memory import InMemoryVectorStoreClient

__all__ = ["VectorStoreClient", "InMemoryVectorStoreClient"]
