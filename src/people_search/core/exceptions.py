"""Custom exceptions for the people search system."""


class PeopleSearchError(Exception):
    """Base exception for people search operations."""
    pass


class ConfigurationError(PeopleSearchError):
    """Exception raised for configuration issues."""
    pass


class ValidationError(PeopleSearchError):
    """Exception raised during input validation."""
    pass


class LLMError(PeopleSearchError):
    """Exception raised when a language model call fails."""
    pass


class ProviderNotAvailableError(LLMError):
    """Exception raised when no client is registered for a provider."""
    pass


class ModelSelectionError(LLMError):
    """Exception raised when no model satisfies a use case."""
    pass


class StructuredOutputError(LLMError):
    """Exception raised when a model response does not match the schema."""
    pass


class VectorStoreError(PeopleSearchError):
    """Exception raised during vector store operations."""
    pass


class VectorStoreNotInitializedError(VectorStoreError):
    """Exception raised when the vector store is used before initialize()."""
    pass


class ExtractionError(PeopleSearchError):
    """Exception raised during profile extraction."""
    pass


class SearchError(PeopleSearchError):
    """Exception raised during search operations."""
    pass
