"""Pytest configuration and shared fixtures."""

import re
import pytest
from typing import Any, Callable, Dict, List, Optional, Sequence

from people_search.core.config import Settings
from people_search.llm.models import LLMModelConfig, LLMProvider, LLMRequest, StructuredOutputRequest
from people_search.llm.service import LLMService
from people_search.users.models import ExtractedUser, RelevancyJudgment, UserProfile, UserRelevancy
from people_search.vector_store.service import VectorStoreService
from people_search.api.service import PeopleSearchService


VOCABULARY = [
    "python", "java", "javascript", "react", "kubernetes", "figma",
    "engineer", "designer", "scientist", "data", "manager", "marketing",
    "berlin", "london", "paris",
]


def keyword_vector(text: str) -> List[float]:
    """Count vocabulary words; texts with no known word map to the zero vector."""
    tokens = re.findall(r"[a-z]+", text.lower())
    return [float(tokens.count(word)) for word in VOCABULARY]


class KeywordEmbedder:
    """Deterministic embedder over a small fixed vocabulary."""

    def __init__(self):
        self.document_batches: List[List[str]] = []
        self.queries: List[str] = []

    async def embed_documents(self, texts: Sequence[str]) -> List[List[float]]:
        self.document_batches.append(list(texts))
        return [keyword_vector(text) for text in texts]

    async def embed_query(self, text: str) -> List[float]:
        self.queries.append(text)
        return keyword_vector(text)


class RejectingEmbedder(KeywordEmbedder):
    """Keyword embedder that fails for any document mentioning ``marker``."""

    def __init__(self, marker: str):
        super().__init__()
        self.marker = marker

    async def embed_documents(self, texts: Sequence[str]) -> List[List[float]]:
        if any(self.marker in text for text in texts):
            raise RuntimeError(f"cannot embed {self.marker}")
        return await super().embed_documents(texts)


class FakeLLMClient:
    """
    Scripted LLM client recording every call.

    ``text`` and ``structured`` compute replies from (request, config).
    ``failures`` maps a model id to the exception raised for it.
    """

    def __init__(
        self,
        text: Optional[Callable[[LLMRequest, LLMModelConfig], str]] = None,
        structured: Optional[Callable[[StructuredOutputRequest, LLMModelConfig], Any]] = None,
        failures: Optional[Dict[str, Exception]] = None
    ):
        self.text = text or (lambda request, config: "ok")
        self.structured = structured or (lambda request, config: request.schema())
        self.failures = failures or {}
        self.calls: List[tuple] = []

    def _record(self, method: str, request: Any, config: LLMModelConfig) -> None:
        self.calls.append((method, request, config))
        if config.model_name in self.failures:
            raise self.failures[config.model_name]

    @property
    def models_used(self) -> List[str]:
        return [config.model_name for _, _, config in self.calls]

    async def generate_text(self, request, config):
        self._record("generate_text", request, config)
        return self.text(request, config)

    async def generate_structured_output(self, request, config):
        self._record("generate_structured_output", request, config)
        return self.structured(request, config)

    async def generate_structured_output_with_examples(self, request, config):
        self._record("generate_structured_output_with_examples", request, config)
        return self.structured(request, config)

    async def embed(self, inputs, config):
        self._record("embed", inputs, config)
        return [keyword_vector(str(item)) for item in inputs]


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment's .env file."""
    return Settings(
        _env_file=None,
        openai_api_key="test-key",
        search_top_k=5,
        search_threshold=0.6,
        max_workers=2,
        log_level="WARNING"
    )


@pytest.fixture
def fake_client() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def llm_service(fake_client, settings) -> LLMService:
    return LLMService(clients={LLMProvider.OPENAI: fake_client}, settings=settings)


@pytest.fixture
def embedder() -> KeywordEmbedder:
    return KeywordEmbedder()


@pytest.fixture
async def vector_store(embedder, settings):
    """Initialized in-memory vector store service."""
    service = VectorStoreService(embedder=embedder, settings=settings)
    await service.initialize()
    yield service
    await service.close()


@pytest.fixture
def sample_profiles() -> List[UserProfile]:
    """Three people with distinct roles, skills and cities."""
    return [
        UserProfile(
            id="1",
            name="Alice Smith",
            email="alice@example.com",
            role="Software Engineer",
            location="Berlin",
            skills=["Python", "Kubernetes"],
            previous_companies=["Acme"],
            interests=["climbing"],
            experience="8 years building backend services"
        ),
        UserProfile(
            id="2",
            name="Bob Brown",
            email="bob@example.com",
            role="Product Designer",
            location="London",
            skills=["Figma"],
            interests=["photography"],
            experience="6 years of product work"
        ),
        UserProfile(
            id="3",
            name="Carol Jones",
            email="carol@example.com",
            role="Data Scientist",
            location="Paris",
            skills=["Python"],
            experience="5 years of machine learning research"
        ),
    ]


PLAIN_TEXT_PEOPLE = {
    "Dana Lee is a React engineer based in London who loves JavaScript.": ExtractedUser(
        name="Dana Lee",
        role="Frontend Engineer",
        location="London",
        skills=["React", "JavaScript"],
    ),
    "Someone who likes cooking.": ExtractedUser(name="null", role="", location=None),
}


def scripted_structured(relevancy_by_name: Optional[Dict[str, str]] = None):
    """Structured handler: extraction from PLAIN_TEXT_PEOPLE, relevancy by profile name."""
    relevancy_by_name = relevancy_by_name or {}

    def handler(request: StructuredOutputRequest, config: LLMModelConfig):
        if request.schema is ExtractedUser:
            for text, extracted in PLAIN_TEXT_PEOPLE.items():
                if text in request.prompt:
                    return extracted
            return ExtractedUser()

        if request.schema is RelevancyJudgment:
            for name, relevancy in relevancy_by_name.items():
                if name in request.prompt:
                    return RelevancyJudgment(relevancy=relevancy, reason=f"{name} judged {relevancy}")
            return RelevancyJudgment(relevancy=UserRelevancy.LOW, reason="no match")

        return request.schema()

    return handler


def scripted_text(request: LLMRequest, config: LLMModelConfig) -> str:
    """Final answers and match explanations, told apart by their prompts."""
    if "Your response:" in request.prompt:
        return "  Alice Smith is a Python engineer in Berlin.  "
    if "explain specifically why" in request.prompt:
        name = "Alice" if "Alice" in request.prompt else "Someone"
        return f" {name} matches the search. "
    return "ok"


@pytest.fixture
def scripted_client() -> FakeLLMClient:
    """Client judging Alice HIGH, Carol LOW and Bob MID."""
    return FakeLLMClient(
        text=scripted_text,
        structured=scripted_structured({"Alice Smith": "HIGH", "Carol Jones": "LOW", "Bob Brown": "MID"})
    )


@pytest.fixture
async def people_search(scripted_client, embedder, settings):
    """Initialized people search service backed by fakes."""
    llm = LLMService(clients={LLMProvider.OPENAI: scripted_client}, settings=settings)
    async with PeopleSearchService.create(
        settings=settings,
        llm_service=llm,
        embedder=embedder,
        log_level="WARNING"
    ) as service:
        yield service


@pytest.fixture
async def populated_search(people_search, sample_profiles):
    """People search service holding the sample profiles."""
    await people_search.ingest_profiles(sample_profiles, source="json")
    return people_search
