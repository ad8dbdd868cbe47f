"""
Semantic People Search

Ingests user profiles, extracts structured fields with a language model,
embeds them into an in-memory vector store and answers natural-language
queries by combining vector similarity with LLM relevance judgments.
"""

from .api.service import PeopleSearchService, PeopleSearchResponse, SyncReport
from .core.config import Settings
from .llm.registry import ModelRegistry, ModelSelector
from .llm.service import LLMService
from .users.models import UserProfile, PersonMatch, UserRelevancy
from .users.service import UserService
from .vector_store.clients.in_memory import InMemoryVectorStoreClient
from .vector_store.service import VectorStoreService

__version__ = "1.0.0"

__all__ = [
    "PeopleSearchService",
    "PeopleSearchResponse",
    "SyncReport",
    "Settings",
    "ModelRegistry",
    "ModelSelector",
    "LLMService",
    "UserProfile",
    "PersonMatch",
    "UserRelevancy",
    "UserService",
    "InMemoryVectorStoreClient",
    "VectorStoreService",
]
