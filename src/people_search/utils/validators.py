"""Input validation utilities."""

from typing import Any, List, Optional

from ..core.exceptions import ValidationError

MAX_TOP_K = 1000


def is_invalid_field(value: Any) -> bool:
    """True for None, blank strings and the literal string "null"."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == "" or value.strip().lower() == "null"
    return False


def has_required_profile_fields(user: Any) -> bool:
    """A profile is only worth storing with a name, a role and a location."""
    return not any(
        is_invalid_field(getattr(user, field, None))
        for field in ("name", "role", "location")
    )


def validate_search_query(query: Optional[str]) -> str:
    """
    Validate a free-text search query.

    Args:
        query: Raw query text

    Returns:
        The stripped query

    Raises:
        ValidationError: If query is missing or blank
    """
    if not isinstance(query, str) or not query.strip():
        raise ValidationError("Search query is required and cannot be empty")
    return query.strip()


def validate_search_params(top_k: int, threshold: float) -> None:
    """
    Validate vector search parameters.

    Raises:
        ValidationError: If top_k or threshold is out of range
    """
    if top_k <= 0:
        raise ValidationError("top_k must be positive")
    if top_k > MAX_TOP_K:
        raise ValidationError(f"top_k cannot exceed {MAX_TOP_K}")
    if not 0.0 <= threshold <= 1.0:
        raise ValidationError("Similarity threshold must be between 0.0 and 1.0")


def validate_documents_batch(documents: List[Any]) -> None:
    """
    Validate a batch of store documents.

    Raises:
        ValidationError: If the batch is empty or holds empty documents
    """
    if not documents:
        raise ValidationError("Documents array is required and cannot be empty")

    for doc in documents:
        content = getattr(doc, "page_content", None)
        if not isinstance(content, str) or not content.strip():
            raise ValidationError("Document content cannot be empty")


def validate_identifier(value: Optional[str], what: str = "Document ID") -> str:
    """Validate a non-empty identifier and return it stripped."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{what} is required and cannot be empty")
    return value.strip()
