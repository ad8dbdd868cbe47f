"""Vector store client interface."""

from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

from ..models import DocumentSearchResponse, MemoryVector, StoreDocument, VectorSearchResponse


@runtime_checkable
class VectorStoreClient(Protocol):
    """Operations VectorStoreService expects from a backend."""

    async def initialize(self) -> None: ...

    def is_initialized(self) -> bool: ...

    async def add_documents(self, documents: Sequence[StoreDocument]) -> None: ...

    async def search_documents(
        self,
        query: str,
        top_k: int = 5,
        metadata_filter: Optional[Dict[str, Any]] = None,
        threshold: float = 0.7,
    ) -> List[DocumentSearchResponse]: ...

    async def get_vector(self, id: str) -> Optional[VectorSearchResponse]: ...

    async def delete_vector(self, id: str) -> bool: ...

    async def size(self) -> int: ...

    async def clear(self) -> None: ...

    async def get_all_memory_vectors(self) -> List[MemoryVector]: ...

    async def close(self) -> None: ...
