"""Utility modules for people search."""

from .logging_config import setup_logging
from .llm_json import extract_json, require_object
from .profile_text import user_to_searchable_text, convert_to_plain_text
from .validators import (
    is_invalid_field,
    has_required_profile_fields,
    validate_search_query,
    validate_search_params,
)

__all__ = [
    "setup_logging",
    "extract_json",
    "require_object",
    "user_to_searchable_text",
    "convert_to_plain_text",
    "is_invalid_field",
    "has_required_profile_fields",
    "validate_search_query",
    "validate_search_params",
]
