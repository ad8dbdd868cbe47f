"""Rendering user profiles as text for embeddings and prompts."""

from typing import Any, Dict, List, Mapping, Union

# (label, field) in the order they appear in the searchable text
_LABELLED_FIELDS = [
    ("Name", "name"),
    ("Email", "email"),
    ("Role", "role"),
    ("Location", "location"),
]
_LABELLED_LISTS = [
    ("Skills", "skills"),
    ("Previous Companies", "previous_companies"),
    ("Interests", "interests"),
]


def _get(source: Any, key: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(key)
    return getattr(source, key, None)


def _field_parts(source: Any) -> List[str]:
    parts = []
    for label, key in _LABELLED_FIELDS:
        value = _get(source, key)
        if value:
            parts.append(f"{label}: {value}")
    for label, key in _LABELLED_LISTS:
        values = _get(source, key)
        if values:
            parts.append(f"{label}: {', '.join(values)}")
    experience = _get(source, "experience")
    if experience:
        parts.append(f"Experience: {experience}")
    return parts


def user_to_searchable_text(user: Any) -> str:
    """
    Render a profile as labelled lines, the text that gets embedded.

    Empty fields are skipped. Works with UserProfile objects and plain dicts.

    Args:
        user: Profile object or metadata mapping

    Returns:
        Newline separated "Label: value" text
    """
    parts = []

    description = _get(user, "description")
    if description:
        parts.append(f"Description: {description}")
    user_id = _get(user, "id")
    if user_id:
        parts.append(f"user {user_id}")
    parts.extend(_field_parts(user))

    return "\n".join(parts)


def convert_to_plain_text(output: Union[Dict[str, Any], Any, None]) -> str:
    """Render an extraction result as the assistant turn of a few-shot example."""
    if output is None or isinstance(output, (str, int, float, bool, list)):
        return "No relevant information found."

    parts = _field_parts(output)
    if not parts:
        return "No relevant user information found in the text."

    return "Extracted information:\n" + "\n".join(parts)
