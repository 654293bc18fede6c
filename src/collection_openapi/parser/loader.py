"""Read collection files from disk."""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from collection_openapi.errors import CollectionFileError
from .detect import classify_document

logger = logging.getLogger(__name__)


def load_collection_file(file_path: Path) -> dict[str, Any]:
    """Load a collection exported as JSON or YAML.

    Returns the raw mapping; run it through ``sanitize_collection`` (or
    ``convert_collection``, which does so) before use.
    """
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CollectionFileError(f"Cannot read {file_path}: {e}") from e

    data = _parse(text, file_path)
    kind = classify_document(data)
    if kind == "openapi":
        raise CollectionFileError(f"{file_path} is already an OpenAPI/Swagger document")
    if kind != "collection":
        raise CollectionFileError(f"{file_path} does not look like a collection (no 'items' list)")

    logger.debug("Loaded collection %r from %s", data.get("name", ""), file_path)
    return data


def _parse(text: str, file_path: Path) -> Any:
    if file_path.suffix.lower() == ".json":
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise CollectionFileError(f"Invalid JSON in {file_path}: {e}") from e

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise CollectionFileError(f"Invalid YAML in {file_path}: {e}") from e
