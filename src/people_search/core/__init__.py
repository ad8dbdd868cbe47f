"""Core components: configuration and exceptions."""

from .config import Settings, get_settings
from .exceptions import (
    PeopleSearchError,
    ConfigurationError,
    ValidationError,
    LLMError,
    ProviderNotAvailableError,
    ModelSelectionError,
    StructuredOutputError,
    VectorStoreError,
    VectorStoreNotInitializedError,
    ExtractionError,
    SearchError,
)

__all__ = [
    "Settings",
    "get_settings",
    "PeopleSearchError",
    "ConfigurationError",
    "ValidationError",
    "LLMError",
    "ProviderNotAvailableError",
    "ModelSelectionError",
    "StructuredOutputError",
    "VectorStoreError",
    "VectorStoreNotInitializedError",
    "ExtractionError",
    "SearchError",
]
