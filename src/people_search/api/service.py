"""High-level API service for people search."""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Sequence

from ..core.config import Settings, get_settings
from ..core.exceptions import PeopleSearchError, SearchError, ValidationError
from ..llm.service import LLMService
from ..users.models import PersonMatch, UserProfile, UserRelevancy
from ..users.service import UserService
from ..utils.logging_config import setup_logging
from ..utils.validators import validate_search_query
from ..vector_store.embedder import Embedder, LLMEmbedder
from ..vector_store.models import DocumentSearchResponse, SearchDocumentsRequest
from ..vector_store.service import VectorStoreService

logger = logging.getLogger(__name__)

PLAIN_TEXT_SOURCE = "plain_text"

_KEEP_RELEVANCY = (UserRelevancy.HIGH, UserRelevancy.MID)


@dataclass
class SyncReport:
    """Number of profiles saved per source."""
    counts: Dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def to_dict(self) -> Dict[str, Any]:
        return {**self.counts, "total": self.total}


@dataclass
class PeopleSearchResponse:
    """Outcome of a people search."""
    query: str
    results: List[PersonMatch]
    final_answer: str
    processing_time_ms: float

    @property
    def total_found(self) -> int:
        return len(self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "results": [match.to_dict() for match in self.results],
            "total_found": self.total_found,
            "final_answer": self.final_answer,
            "processing_time_ms": round(self.processing_time_ms, 1),
        }


class PeopleSearchService:
    """
    High-level service interface for people search.

    Wires settings, logging, the LLM service, the vector store and the user
    service together, and runs the ingest and search pipelines.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        llm_service: Optional[LLMService] = None,
        embedder: Optional[Embedder] = None,
        vector_store: Optional[VectorStoreService] = None,
        log_level: Optional[str] = None
    ):
        """
        Initialize people search service.

        Args:
            settings: Application settings
            llm_service: Model access; built from settings when omitted
            embedder: Profile embedder; defaults to LLM embeddings
            vector_store: Profile store; defaults to an in-memory store
            log_level: Overrides settings.log_level
        """
        self.settings = settings or get_settings()
        setup_logging(level=log_level or self.settings.log_level)

        self.llm_service = llm_service or LLMService(settings=self.settings)
        self.vector_store = vector_store or VectorStoreService(
            embedder=embedder or LLMEmbedder(self.llm_service),
            settings=self.settings
        )
        self.user_service = UserService(self.llm_service, self.vector_store)

        self._initialized = False
        logger.info("People search service initialized")

    async def initialize(self) -> None:
        """Initialize the vector store."""
        try:
            await self.vector_store.initialize()
            self._initialized = True
            logger.info("Service initialization complete")

        except Exception as e:
            logger.error(f"Failed to initialize service: {str(e)}")
            raise PeopleSearchError(f"Service initialization failed: {str(e)}")

    async def ingest_plain_text(self, texts: Sequence[str]) -> SyncReport:
        """
        Extract profiles from free-text descriptions and save them.

        The original text is kept as the profile description. A text that
        fails to extract or save is logged and skipped.

        Args:
            texts: One description per person

        Returns:
            Report with the number of saved profiles
        """
        self._check_initialized()

        outcomes = await asyncio.gather(*(self._ingest_text(index, text) for index, text in enumerate(texts)))
        saved = sum(1 for ok in outcomes if ok)

        logger.info(f"Saved {saved} of {len(texts)} plain text profiles")
        return SyncReport(counts={PLAIN_TEXT_SOURCE: saved})

    async def _ingest_text(self, index: int, text: str) -> bool:
        try:
            logger.info(f"Processing text record #{index}")
            user = await self.user_service.extract_user_from_plain_text(text)
            saved = await self.user_service.save_user(replace(user, description=text))
            if saved is None:
                return False

            logger.info(f"User saved from record #{index}, uuid: {saved.uuid} name: {saved.name}")
            return True

        except PeopleSearchError as e:
            logger.error(f"Error processing text record #{index}: {str(e)}")
            return False

    async def ingest_profiles(self, profiles: Sequence[UserProfile], source: str = "structured") -> SyncReport:
        """
        Save already-structured profiles (e.g. from JSON, CSV or a CRM).

        Args:
            profiles: Profiles to save
            source: Label the saved count is reported under

        Returns:
            Report with the number of saved profiles
        """
        self._check_initialized()

        saved = await self.user_service.save_users(profiles)
        logger.info(f"Saved {len(saved)} of {len(profiles)} profiles from {source}")
        return SyncReport(counts={source: len(saved)})

    async def sync_users(
        self,
        plain_texts: Sequence[str] = (),
        sources: Optional[Mapping[str, Sequence[UserProfile]]] = None
    ) -> SyncReport:
        """
        Ingest every source, keeping going when one source fails.

        Args:
            plain_texts: Free-text descriptions
            sources: Structured profiles by source label

        Returns:
            Combined report
        """
        logger.info("Starting user sync process...")
        report = SyncReport(counts={PLAIN_TEXT_SOURCE: 0})

        if plain_texts:
            report.counts.update((await self.ingest_plain_text(plain_texts)).counts)

        for source, profiles in (sources or {}).items():
            try:
                report.counts.update((await self.ingest_profiles(profiles, source=source)).counts)
            except PeopleSearchError as e:
                logger.error(f"Error processing {source} profiles: {str(e)}")
                report.counts[source] = 0

        logger.info(f"User sync completed: {report.to_dict()}")
        return report

    async def search(
        self,
        query: str,
        top_k: Optional[int] = None,
        threshold: Optional[float] = None,
        metadata_filter: Optional[Dict[str, Any]] = None
    ) -> PeopleSearchResponse:
        """
        Answer a natural-language people query.

        Vector hits are judged by the language model; only HIGH and MID
        relevancy matches are kept, each with an explanation, and a final
        conversational answer is generated over them.

        Args:
            query: Natural-language search
            top_k: Maximum vector hits to consider
            threshold: Minimum similarity for vector hits
            metadata_filter: Exact-match / contains filter on profile fields

        Returns:
            Matches sorted by similarity plus the final answer

        Raises:
            ValidationError: If the query is empty
            SearchError: If any pipeline step fails
        """
        self._check_initialized()
        start_time = asyncio.get_event_loop().time()
        text = validate_search_query(query)

        try:
            logger.info(f"Searching for: '{text}'")
            search_results = await self.vector_store.search_documents(
                SearchDocumentsRequest(
                    query=text,
                    top_k=top_k,
                    threshold=threshold,
                    metadata_filter=metadata_filter
                )
            )

            logger.info(f"Found {search_results.total_found} similarity matches, now filtering by relevancy...")
            relevant = await self._filter_by_relevancy(text, search_results.results)
            logger.info(f"After relevancy filtering: {len(relevant)} users remain")

            final_answer = await self.user_service.get_users_final_answer(text, relevant)

            reasons = await asyncio.gather(*(
                self.user_service.get_user_match_explanation(result.metadata, result.text, text)
                for result in relevant
            ))
            matches = [
                self._to_person_match(result, reason, index)
                for index, (result, reason) in enumerate(zip(relevant, reasons))
            ]
            matches.sort(key=lambda m: m.match_score, reverse=True)

        except ValidationError:
            raise
        except Exception as e:
            logger.error(f"Search failed: {str(e)}")
            raise SearchError(f"Search failed: {str(e)}")

        processing_time_ms = (asyncio.get_event_loop().time() - start_time) * 1000
        logger.info(f"Search completed: {len(matches)} results in {processing_time_ms:.1f}ms")

        return PeopleSearchResponse(
            query=text,
            results=matches,
            final_answer=final_answer,
            processing_time_ms=processing_time_ms
        )

    async def _filter_by_relevancy(
        self,
        query: str,
        results: List[DocumentSearchResponse]
    ) -> List[DocumentSearchResponse]:
        relevancies = await asyncio.gather(*(
            self.user_service.user_relevancy_to_query(result.metadata, result.text, query)
            for result in results
        ))

        relevant = []
        for result, relevancy in zip(results, relevancies):
            if relevancy in _KEEP_RELEVANCY:
                relevant.append(result)
            else:
                logger.info(f"Filtered out {result.metadata.get('name')} - {relevancy.value} relevancy")
        return relevant

    @staticmethod
    def _to_person_match(result: DocumentSearchResponse, reason: str, index: int) -> PersonMatch:
        metadata = result.metadata
        return PersonMatch(
            id=metadata.get("uuid") or f"result-{index}",
            name=metadata.get("name") or "Unknown",
            email=metadata.get("email"),
            location=metadata.get("location"),
            role=metadata.get("role"),
            skills=metadata.get("skills") or [],
            experience=metadata.get("experience"),
            interests=metadata.get("interests") or [],
            previous_companies=metadata.get("previous_companies") or [],
            description=result.text,
            match_score=round(result.score * 100),
            match_reason=reason
        )

    async def list_users(self) -> Dict[str, Any]:
        """Saved profiles plus vector store statistics."""
        users = await self.user_service.get_all_users()
        stats = await self.vector_store.get_stats()
        return {
            "users": [user.to_dict() for user in users],
            "stats": stats.to_dict(),
        }

    async def get_stats(self) -> Dict[str, Any]:
        """Get service, LLM and vector store statistics."""
        self._check_initialized()

        stats = await self.vector_store.get_stats()
        return {
            'service': {
                'initialized': self._initialized,
                'total_users': len(await self.user_service.get_all_users()),
            },
            'llm': {
                'providers': [provider.value for provider in self.llm_service.get_available_providers()],
            },
            'vector_store': stats.to_dict()
        }

    async def health_check(self) -> Dict[str, Any]:
        """Perform health check."""
        try:
            if not self._initialized:
                return {
                    'status': 'not_initialized',
                    'message': 'Service not initialized'
                }

            is_ready = await self.vector_store.health_check()
            return {
                'status': 'healthy' if is_ready else 'not_ready',
                'is_ready': is_ready,
                'stats': await self.get_stats(),
                'timestamp': asyncio.get_event_loop().time()
            }

        except Exception as e:
            logger.error(f"Health check failed: {str(e)}")
            return {
                'status': 'error',
                'message': str(e)
            }

    def _check_initialized(self) -> None:
        """Check if service is properly initialized."""
        if not self._initialized:
            raise PeopleSearchError("Service not initialized. Call initialize() first.")

    async def close(self) -> None:
        """Clean up resources and close the service."""
        try:
            await self.vector_store.close()
            self._initialized = False
            logger.info("Service closed successfully")

        except Exception as e:
            logger.error(f"Error during service shutdown: {str(e)}")

    @classmethod
    @asynccontextmanager
    async def create(cls, **kwargs: Any) -> AsyncIterator["PeopleSearchService"]:
        """
        Create and manage service lifecycle with context manager.

        Args:
            **kwargs: Service constructor arguments

        Yields:
            Initialized people search service
        """
        service = cls(**kwargs)

        try:
            await service.initialize()
            yield service
        finally:
            await service.close()
