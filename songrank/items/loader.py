"""Loading item lists from YAML or JSON files."""

from pathlib import Path
from typing import Any

import structlog
import yaml

from songrank.items.models import Item
from songrank.items.records import RecordError, item_from_record


logger = structlog.get_logger()


class ItemsValidationError(Exception):
    """Raised when an item file fails validation."""

    def __init__(self, errors: list[dict[str, str]], file_path: str) -> None:
        """Initialize the error.

        Args:
            errors: List of validation error details.
            file_path: Path to the file that failed validation.
        """
        self.errors = errors
        self.file_path = file_path
        super().__init__(f"Validation failed for {file_path}: {len(errors)} errors")


def read_document(path: Path) -> Any:
    """Parse a YAML or JSON document.

    Args:
        path: File to read. JSON is valid YAML, so one parser covers both.

    Returns:
        Parsed document.

    Raises:
        ItemsValidationError: If the file is missing or not parseable.
    """
    try:
        with path.open(encoding="utf-8") as f:
            return yaml.safe_load(f)
    except FileNotFoundError:
        raise ItemsValidationError(
            [{"loc": "", "msg": f"File not found: {path}", "type": "file_not_found"}],
            str(path),
        ) from None
    except yaml.YAMLError as e:
        raise ItemsValidationError(
            [{"loc": "", "msg": str(e), "type": "yaml_parse_error"}],
            str(path),
        ) from e


def _extract_records(document: Any) -> list[Any] | None:
    """Accept a bare list, or a mapping with a ``songs``/``items`` list."""
    if isinstance(document, list):
        return document
    if isinstance(document, dict):
        for key in ("songs", "items", "ranked"):
            if isinstance(document.get(key), list):
                return document[key]
    if document is None:
        return []
    return None


def parse_items(records: list[Any], file_path: str = "<memory>") -> list[Item]:
    """Convert raw records into Items, collecting every error.

    Args:
        records: Raw records.
        file_path: Source path for error reporting.

    Returns:
        Items in input order.

    Raises:
        ItemsValidationError: If any record is invalid.
    """
    items: list[Item] = []
    errors: list[dict[str, str]] = []

    for index, record in enumerate(records):
        if not isinstance(record, dict):
            errors.append(
                {"loc": str(index), "msg": "Each entry must be a mapping.", "type": "dict_type"}
            )
            continue
        try:
            items.append(item_from_record(record))
        except RecordError as e:
            errors.append({"loc": str(index), "msg": str(e), "type": "missing"})

    if errors:
        logger.error(
            "items_validation_failed",
            file_path=file_path,
            error_count=len(errors),
        )
        raise ItemsValidationError(errors, file_path)

    return items


def load_items(path: Path) -> list[Item]:
    """Load and validate an item file.

    Args:
        path: YAML or JSON file holding a list of song records.

    Returns:
        Items in file order.

    Raises:
        ItemsValidationError: If the file or any record is invalid.
    """
    document = read_document(path)
    records = _extract_records(document)
    if records is None:
        raise ItemsValidationError(
            [{"loc": "", "msg": "Expected a list of songs.", "type": "list_type"}],
            str(path),
        )
    items = parse_items(records, str(path))
    logger.info("items_loaded", file_path=str(path), count=len(items))
    return items


def load_ordering(path: Path) -> list[Item]:
    """Load a finished ranking, best first.

    Stored ranking rows carry a ``rank`` field; when every record has one the
    records are ordered by it, otherwise file order is kept.

    Args:
        path: YAML or JSON file holding a ranked list.

    Returns:
        Items in rank order.

    Raises:
        ItemsValidationError: If the file or any record is invalid.
    """
    document = read_document(path)
    records = _extract_records(document)
    if records is None:
        raise ItemsValidationError(
            [{"loc": "", "msg": "Expected a list of songs.", "type": "list_type"}],
            str(path),
        )

    if records and all(isinstance(r, dict) and isinstance(r.get("rank"), int) for r in records):
        records = sorted(records, key=lambda r: r["rank"])

    items = parse_items(records, str(path))
    logger.info("ordering_loaded", file_path=str(path), count=len(items))
    return items
