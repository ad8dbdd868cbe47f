"""Test the in-memory vector store and the vector store service."""

import pytest

from people_search.core.exceptions import (
    ProviderNotAvailableError,
    ValidationError,
    VectorStoreError,
    VectorStoreNotInitializedError,
)
from people_search.vector_store.clients.in_memory import (
    InMemoryVectorStoreClient,
    distance_to_similarity,
    matches_metadata_filter,
)
from people_search.vector_store.models import (
    AddDocumentsRequest,
    GetDocumentRequest,
    SearchDocumentsRequest,
    StoreDocument,
    VectorStoreConfig,
    VectorStoreProvider,
)
from people_search.vector_store.service import VectorStoreService

from conftest import KeywordEmbedder


class FailingEmbedder:
    async def embed_documents(self, texts):
        raise RuntimeError("embedding backend down")

    async def embed_query(self, text):
        raise RuntimeError("embedding backend down")


def doc(uuid, text, **metadata):
    return StoreDocument(page_content=text, metadata={"uuid": uuid, **metadata})


class TestSimilarityHelpers:
    """Test distance conversion and metadata filtering."""

    def test_distance_to_similarity(self):
        """Test cosine distance maps onto [0, 1]."""
        assert distance_to_similarity(0.0) == 1.0
        assert distance_to_similarity(1.0) == 0.5
        assert distance_to_similarity(2.0) == 0.0
        # Floating point noise outside [0, 2] is clamped
        assert distance_to_similarity(-1e-9) == 1.0
        assert distance_to_similarity(2.0000001) == 0.0

    def test_metadata_filter_scalar(self):
        """Test scalar filters need equal values."""
        metadata = {"location": "Berlin", "role": "Engineer"}

        assert matches_metadata_filter(metadata, {"location": "Berlin"})
        assert not matches_metadata_filter(metadata, {"location": "Paris"})
        assert not matches_metadata_filter(metadata, {"team": "core"})
        assert matches_metadata_filter(metadata, {})

    def test_metadata_filter_lists(self):
        """Test list metadata matches by membership or overlap."""
        metadata = {"skills": ["Python", "Kubernetes"]}

        assert matches_metadata_filter(metadata, {"skills": "Python"})
        assert matches_metadata_filter(metadata, {"skills": ["Go", "Kubernetes"]})
        assert not matches_metadata_filter(metadata, {"skills": ["Go"]})
        assert not matches_metadata_filter(metadata, {"skills": "Go"})


class TestInMemoryVectorStoreClient:
    """Test InMemoryVectorStoreClient."""

    @pytest.fixture
    async def client(self):
        client = InMemoryVectorStoreClient(KeywordEmbedder(), max_workers=2)
        await client.initialize()
        yield client
        await client.close()

    async def test_requires_initialize(self):
        """Test operations before initialize() fail."""
        client = InMemoryVectorStoreClient(KeywordEmbedder())

        assert not client.is_initialized()
        assert await client.size() == 0
        with pytest.raises(VectorStoreNotInitializedError, match="initialize"):
            await client.add_documents([doc("a", "python")])
        with pytest.raises(VectorStoreNotInitializedError):
            await client.search_documents("python")

        await client.close()

    async def test_initialize_twice_keeps_data(self, client):
        """Test re-initializing does not drop stored vectors."""
        await client.add_documents([doc("a", "python engineer")])
        await client.initialize()

        assert await client.size() == 1

    async def test_add_and_search(self, client):
        """Test documents are found by similarity, best first."""
        await client.add_documents([
            doc("a", "Python engineer in Berlin", name="Alice"),
            doc("b", "Designer in London", name="Bob"),
            doc("c", "Python data scientist", name="Carol"),
        ])

        results = await client.search_documents("python engineer", top_k=5, threshold=0.6)

        assert [r.id for r in results] == ["a", "c"]
        assert results[0].score > results[1].score
        assert results[0].document.page_content == "Python engineer in Berlin"
        assert results[0].metadata["name"] == "Alice"

    async def test_same_uuid_replaces(self, client):
        """Test adding a document with an existing uuid replaces it."""
        await client.add_documents([doc("a", "python")])
        await client.add_documents([doc("a", "java")])

        assert await client.size() == 1
        stored = await client.get_vector("a")
        assert stored.text == "java"
        assert stored.score == 1.0

    async def test_generated_ids(self, client):
        """Test documents without uuid get distinct generated ids."""
        await client.add_documents([
            StoreDocument(page_content="python"),
            StoreDocument(page_content="python"),
        ])

        vectors = await client.get_all_memory_vectors()
        assert len({v.id for v in vectors}) == 2

    async def test_search_vector_scores(self, client):
        """Test scores and threshold on precomputed vectors."""
        await client.upsert_vectors_batch([
            {"id": "same", "text": "same", "vector": [1.0, 0.0]},
            {"id": "close", "text": "close", "vector": [0.8, 0.6]},
            {"id": "orthogonal", "text": "orthogonal", "vector": [0.0, 1.0]},
            {"id": "opposite", "text": "opposite", "vector": [-1.0, 0.0]},
        ])

        results = await client.search_vector([1.0, 0.0], top_k=5, threshold=0.0)

        assert [r.id for r in results] == ["same", "close", "orthogonal", "opposite"]
        assert [r.score for r in results] == pytest.approx([1.0, 0.9, 0.5, 0.0])

        above = await client.search_vector([1.0, 0.0], top_k=5, threshold=0.7)
        assert [r.id for r in above] == ["same", "close"]

    async def test_filter_applies_to_candidate_window(self, client):
        """Test filtering happens after the 2 * top_k nearest are taken."""
        await client.upsert_vectors_batch([
            {"id": "a", "text": "a", "vector": [1.0, 0.0], "metadata": {"city": "Paris"}},
            {"id": "b", "text": "b", "vector": [0.9, 0.1], "metadata": {"city": "Paris"}},
            {"id": "c", "text": "c", "vector": [0.8, 0.2], "metadata": {"city": "Berlin"}},
        ])

        narrow = await client.search_vector([1.0, 0.0], top_k=1, threshold=0.0, metadata_filter={"city": "Berlin"})
        wide = await client.search_vector([1.0, 0.0], top_k=2, threshold=0.0, metadata_filter={"city": "Berlin"})

        assert narrow == []
        assert [r.id for r in wide] == ["c"]

    async def test_result_id_fallbacks(self, client):
        """Test hit ids prefer metadata uuid, then metadata id."""
        await client.upsert_vector("key-1", "x", [1.0, 0.0], {"uuid": "u-1"})
        await client.upsert_vector("key-2", "y", [1.0, 0.0], {"id": 42})
        await client.upsert_vector("key-3", "z", [1.0, 0.0])

        results = await client.search_vector([1.0, 0.0], top_k=3, threshold=0.0)

        assert [r.id for r in results] == ["u-1", "42", "key-3"]

    async def test_empty_store_search(self, client):
        """Test searching an empty store returns nothing."""
        assert await client.search_documents("python") == []

    async def test_delete_and_clear(self, client):
        """Test deleting and clearing vectors."""
        await client.add_documents([doc("a", "python"), doc("b", "java")])

        assert await client.delete_vector("a") is True
        assert await client.delete_vector("a") is False
        assert await client.get_vector("a") is None

        await client.clear()
        assert await client.size() == 0

    async def test_memory_vectors_are_copies(self, client):
        """Test returned vectors do not alias stored state."""
        await client.add_documents([doc("a", "python", skills=["Python"])])

        vectors = await client.get_all_memory_vectors()
        vectors[0].metadata["skills"] = ["Cobol"]
        vectors[0].embedding.append(99.0)

        stored = await client.get_all_memory_vectors()
        assert stored[0].metadata["skills"] == ["Python"]
        assert 99.0 not in stored[0].embedding

    async def test_embedding_failure(self):
        """Test embedder failures surface as VectorStoreError."""
        client = InMemoryVectorStoreClient(FailingEmbedder())
        await client.initialize()

        with pytest.raises(VectorStoreError, match="embedding backend down"):
            await client.add_documents([doc("a", "python")])
        with pytest.raises(VectorStoreError):
            await client.search_documents("python")

        await client.close()


class TestVectorStoreService:
    """Test VectorStoreService."""

    def test_requires_embedder_or_clients(self, settings):
        """Test the default client needs an embedder."""
        with pytest.raises(ValidationError):
            VectorStoreService(settings=settings)

    def test_unknown_default_provider(self, embedder, settings):
        """Test a default provider without a client is rejected."""
        with pytest.raises(ProviderNotAvailableError):
            VectorStoreService(
                embedder=embedder,
                default_provider=VectorStoreProvider.PINECONE,
                settings=settings
            )

    async def test_add_auto_initializes(self, embedder, settings):
        """Test adding documents initializes the store on demand."""
        service = VectorStoreService(embedder=embedder, settings=settings)

        response = await service.add_documents(AddDocumentsRequest(documents=[doc("a", "python")]))

        assert response.success
        assert response.documents_added == 1
        assert response.total_documents == 1
        assert response.processing_time_ms >= 0
        await service.close()

    async def test_add_without_auto_initialize(self, embedder, settings):
        """Test auto_initialize=False leaves an uninitialized store untouched."""
        service = VectorStoreService(embedder=embedder, settings=settings)
        request = AddDocumentsRequest(
            documents=[doc("a", "python")],
            config=VectorStoreConfig(auto_initialize=False)
        )

        with pytest.raises(VectorStoreNotInitializedError):
            await service.add_documents(request)
        await service.close()

    async def test_add_validation(self, vector_store):
        """Test empty batches and empty documents are rejected."""
        with pytest.raises(ValidationError, match="cannot be empty"):
            await vector_store.add_documents(AddDocumentsRequest(documents=[]))
        with pytest.raises(ValidationError, match="content"):
            await vector_store.add_documents(AddDocumentsRequest(documents=[doc("a", "  ")]))

    async def test_search_defaults_from_settings(self, vector_store):
        """Test unset top_k and threshold fall back to settings."""
        await vector_store.add_documents(AddDocumentsRequest(documents=[
            doc("a", "python engineer"),
            doc("b", "designer"),
        ]))

        response = await vector_store.search_documents(SearchDocumentsRequest(query="  python  "))

        assert response.query == "python"
        assert response.total_found == 1
        assert response.results[0].id == "a"
        assert response.provider == VectorStoreProvider.IN_MEMORY

    async def test_search_request_overrides(self, vector_store):
        """Test request threshold and top_k win over settings."""
        await vector_store.add_documents(AddDocumentsRequest(documents=[
            doc("a", "python engineer"),
            doc("b", "designer"),
        ]))

        response = await vector_store.search_documents(
            SearchDocumentsRequest(query="python", top_k=1, threshold=0.0)
        )

        assert [r.id for r in response.results] == ["a"]

    async def test_search_metadata_filter(self, vector_store):
        """Test the metadata filter is passed to the client."""
        await vector_store.add_documents(AddDocumentsRequest(documents=[
            doc("a", "python engineer", location="Berlin"),
            doc("b", "python engineer", location="Paris"),
        ]))

        response = await vector_store.search_documents(
            SearchDocumentsRequest(query="python engineer", metadata_filter={"location": "Paris"})
        )

        assert [r.id for r in response.results] == ["b"]

    async def test_search_validation(self, vector_store):
        """Test invalid queries and parameters are rejected."""
        with pytest.raises(ValidationError, match="Search query"):
            await vector_store.search_documents(SearchDocumentsRequest(query=""))
        with pytest.raises(ValidationError, match="top_k"):
            await vector_store.search_documents(SearchDocumentsRequest(query="python", top_k=0))
        with pytest.raises(ValidationError, match="threshold"):
            await vector_store.search_documents(SearchDocumentsRequest(query="python", threshold=1.5))

    async def test_get_document(self, vector_store):
        """Test fetching documents by id."""
        await vector_store.add_documents(AddDocumentsRequest(documents=[doc("a", "python")]))

        found = await vector_store.get_document(GetDocumentRequest(id="a"))
        missing = await vector_store.get_document(GetDocumentRequest(id="zzz"))

        assert found.found and found.result.text == "python"
        assert not missing.found and missing.result is None
        with pytest.raises(ValidationError):
            await vector_store.get_document(GetDocumentRequest(id=" "))

    async def test_stats_and_health(self, embedder, settings):
        """Test stats and health before and after initialization."""
        service = VectorStoreService(embedder=embedder, settings=settings)

        assert await service.health_check() is False
        assert (await service.get_stats()).is_initialized is False

        await service.initialize()
        await service.add_documents(AddDocumentsRequest(documents=[doc("a", "python")]))

        stats = await service.get_stats()
        assert await service.health_check() is True
        assert stats.to_dict() == {"provider": "in-memory", "total_documents": 1, "is_initialized": True}
        assert await service.health_check(VectorStoreProvider.CHROMA) is False
        await service.close()

    def test_providers(self, embedder, settings):
        """Test provider registration and default switching."""
        service = VectorStoreService(embedder=embedder, settings=settings)

        assert service.get_available_providers() == [VectorStoreProvider.IN_MEMORY]
        with pytest.raises(ProviderNotAvailableError):
            service.set_default_provider(VectorStoreProvider.MILVUS)
        with pytest.raises(ProviderNotAvailableError):
            service.get_client(VectorStoreProvider.MILVUS)

    async def test_custom_clients(self, embedder, settings):
        """Test explicitly registered clients and default provider."""
        memory = InMemoryVectorStoreClient(embedder)
        service = VectorStoreService(
            clients={VectorStoreProvider.CHROMA: memory},
            default_provider=VectorStoreProvider.CHROMA,
            settings=settings
        )

        await service.initialize()

        assert service.get_client() is memory
        assert (await service.get_stats()).provider == VectorStoreProvider.CHROMA
        await service.close()
