"""Error hints for item file validation errors.

Provides user-friendly hints with actionable remediation steps
for common problems in song lists and drafts.
"""

from typing import Final


# Mapping of error types to user-friendly hints
ERROR_HINTS: Final[dict[str, str]] = {
    "missing": "This field is required. Every song needs a title and an artist.",
    "string_type": "This field must be a text string.",
    "int_type": "This field must be an integer (whole number).",
    "list_type": "The file must contain a list of songs, or a mapping with a 'songs' list.",
    "dict_type": "Each song must be a mapping of field names to values.",
    "extra_forbidden": "Unknown field. Check the field name spelling.",
    "greater_than_equal": "The value is too small. Positions and counts start at 0.",
    "file_not_found": "The file does not exist. Check the file path.",
    "yaml_parse_error": "Invalid YAML/JSON syntax. Check quoting and indentation.",
}

# Field-specific hints for more context
FIELD_HINTS: Final[dict[str, str]] = {
    "id": "Use the catalog id, or omit it to match by title and artist.",
    "title": "The song title as shown in the catalog.",
    "artist": "The primary artist name.",
    "pendingComparison": "Drafts must be saved by songrank; do not edit the pending comparison.",
    "probePosition": "Must point at the probe item inside the ranked list.",
    "comparisonCount": "Must be a non-negative integer.",
}


def get_error_hint(error_type: str, field_name: str | None = None) -> str:
    """Get a user-friendly hint for a validation error.

    Args:
        error_type: The Pydantic error type (e.g., 'missing', 'list_type').
        field_name: Optional field path for field-specific hints.

    Returns:
        A user-friendly hint string.
    """
    if field_name:
        simple_field = field_name.split(".")[-1]
        if simple_field in FIELD_HINTS:
            return FIELD_HINTS[simple_field]

    return ERROR_HINTS.get(error_type, "Check the song list format for valid values.")


def format_validation_error(
    location: str,
    message: str,
    error_type: str,
    *,
    include_hint: bool = True,
) -> str:
    """Format a validation error with optional hint.

    Args:
        location: The error location (e.g., '3.title').
        message: The original error message.
        error_type: The error type.
        include_hint: Whether to include a hint.

    Returns:
        Formatted error string.
    """
    base = f"{location}: {message}" if location else message
    if include_hint:
        hint = get_error_hint(error_type, location)
        return f"{base}\n    Hint: {hint}"
    return base
