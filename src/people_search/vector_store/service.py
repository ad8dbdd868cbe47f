"""Provider-neutral vector store service."""

import asyncio
import logging
from typing import Dict, List, Optional

from ..core.config import Settings, get_settings
from ..core.exceptions import (
    PeopleSearchError,
    ProviderNotAvailableError,
    ValidationError,
    VectorStoreError,
)
from ..utils.validators import (
    validate_documents_batch,
    validate_identifier,
    validate_search_params,
    validate_search_query,
)
from .clients.base import VectorStoreClient
from .clients.in_memory import InMemoryVectorStoreClient
from .embedder import Embedder
from .models import (
    AddDocumentsRequest,
    AddDocumentsResponse,
    GetDocumentRequest,
    GetDocumentResponse,
    SearchDocumentsRequest,
    SearchDocumentsResponse,
    VectorStoreProvider,
    VectorStoreStats,
)

logger = logging.getLogger(__name__)


class VectorStoreService:
    """
    Routes vector store operations to the client registered for a provider.

    Requests without an explicit provider go to the default provider
    (in-memory unless changed).
    """

    def __init__(
        self,
        clients: Optional[Dict[VectorStoreProvider, VectorStoreClient]] = None,
        embedder: Optional[Embedder] = None,
        default_provider: VectorStoreProvider = VectorStoreProvider.IN_MEMORY,
        settings: Optional[Settings] = None
    ):
        """
        Initialize vector store service.

        Args:
            clients: Store clients by provider
            embedder: Used to build the default in-memory client when no clients are given
            default_provider: Provider used when a request names none
            settings: Application settings (search defaults)
        """
        self.settings = settings or get_settings()
        self._clients: Dict[VectorStoreProvider, VectorStoreClient] = {}

        if clients is None:
            if embedder is None:
                raise ValidationError("An embedder is required to build the default in-memory client")
            clients = {
                VectorStoreProvider.IN_MEMORY: InMemoryVectorStoreClient(
                    embedder=embedder, max_workers=self.settings.max_workers
                )
            }
        self._clients.update(clients)

        if default_provider not in self._clients:
            raise ProviderNotAvailableError(f"Provider {default_provider.value} is not available")
        self.default_provider = default_provider

    def _select(self, provider: Optional[VectorStoreProvider]) -> VectorStoreProvider:
        return provider or self.default_provider

    def get_client(self, provider: Optional[VectorStoreProvider] = None) -> VectorStoreClient:
        """
        Return the client for a provider (default provider when None).

        Raises:
            ProviderNotAvailableError: If no client is registered
        """
        selected = self._select(provider)
        client = self._clients.get(selected)
        if client is None:
            raise ProviderNotAvailableError(f"No client available for provider: {selected.value}")
        return client

    async def initialize(self, provider: Optional[VectorStoreProvider] = None) -> None:
        """Initialize a vector store client."""
        logger.info("Initializing vector store...")

        client = self.get_client(provider)
        await client.initialize()

        logger.info(f"Initialized with provider: {self._select(provider).value}")

    async def add_documents(self, request: AddDocumentsRequest) -> AddDocumentsResponse:
        """
        Add documents to a vector store.

        The store is initialized first unless ``config.auto_initialize`` is False.

        Raises:
            ValidationError: If the document list is empty
            VectorStoreError: If the backend fails
        """
        start_time = asyncio.get_event_loop().time()
        logger.info("Adding documents to vector store...")

        validate_documents_batch(request.documents)

        selected = self._select(request.provider)
        client = self.get_client(selected)

        if request.config.auto_initialize and not client.is_initialized():
            await self.initialize(selected)

        logger.info(f"Using provider: {selected.value} for {len(request.documents)} documents")

        try:
            await client.add_documents(request.documents)
        except PeopleSearchError:
            raise
        except Exception as e:
            logger.error(f"Failed to add documents: {str(e)}")
            raise VectorStoreError(f"Failed to add documents: {str(e)}")

        processing_time_ms = (asyncio.get_event_loop().time() - start_time) * 1000
        total_documents = await client.size()

        logger.info(f"Added {len(request.documents)} documents in {processing_time_ms:.1f}ms")

        return AddDocumentsResponse(
            success=True,
            documents_added=len(request.documents),
            total_documents=total_documents,
            processing_time_ms=processing_time_ms
        )

    async def search_documents(self, request: SearchDocumentsRequest) -> SearchDocumentsResponse:
        """
        Similarity search with optional metadata filter.

        Raises:
            ValidationError: If the query is empty or parameters are out of range
            VectorStoreError: If the backend fails
        """
        start_time = asyncio.get_event_loop().time()
        logger.info(f"Searching documents: '{request.query}'")

        query = validate_search_query(request.query)
        top_k = request.top_k if request.top_k is not None else (
            request.config.top_k or self.settings.search_top_k
        )
        threshold = request.threshold if request.threshold is not None else (
            request.config.threshold if request.config.threshold is not None else self.settings.search_threshold
        )
        validate_search_params(top_k, threshold)

        selected = self._select(request.provider)
        client = self.get_client(selected)

        try:
            results = await client.search_documents(query, top_k, request.metadata_filter, threshold)
        except PeopleSearchError:
            raise
        except Exception as e:
            logger.error(f"Search failed: {str(e)}")
            raise VectorStoreError(f"Search failed: {str(e)}")

        processing_time_ms = (asyncio.get_event_loop().time() - start_time) * 1000
        logger.info(f"Found {len(results)} results in {processing_time_ms:.1f}ms")

        return SearchDocumentsResponse(
            results=results,
            total_found=len(results),
            query=query,
            provider=selected,
            processing_time_ms=processing_time_ms
        )

    async def get_document(self, request: GetDocumentRequest) -> GetDocumentResponse:
        """Fetch a stored document by id."""
        logger.info(f"Getting document: {request.id}")

        doc_id = validate_identifier(request.id)
        selected = self._select(request.provider)
        client = self.get_client(selected)

        result = await client.get_vector(doc_id)

        return GetDocumentResponse(
            result=result,
            found=result is not None,
            provider=selected
        )

    async def get_stats(self, provider: Optional[VectorStoreProvider] = None) -> VectorStoreStats:
        selected = self._select(provider)
        client = self.get_client(selected)

        return VectorStoreStats(
            provider=selected,
            total_documents=await client.size(),
            is_initialized=client.is_initialized()
        )

    def set_default_provider(self, provider: VectorStoreProvider) -> None:
        """
        Change the provider used when requests name none.

        Raises:
            ProviderNotAvailableError: If the provider has no client
        """
        if provider not in self._clients:
            raise ProviderNotAvailableError(f"Provider {provider.value} is not available")

        self.default_provider = provider
        logger.info(f"Default provider set to: {provider.value}")

    def get_available_providers(self) -> List[VectorStoreProvider]:
        return list(self._clients.keys())

    async def health_check(self, provider: Optional[VectorStoreProvider] = None) -> bool:
        """True when the provider's client exists and is initialized."""
        try:
            return self.get_client(provider).is_initialized()
        except Exception as e:
            logger.error(f"Health check failed: {str(e)}")
            return False

    async def close(self) -> None:
        """Close every registered client."""
        for client in self._clients.values():
            await client.close()
        logger.info("Vector store service closed")
