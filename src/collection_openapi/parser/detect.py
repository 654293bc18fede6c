"""Auto-detect what kind of document a file holds."""

import json
from pathlib import Path
from typing import Any

import yaml


def detect_format(file_path: Path) -> str:
    """Detect the kind of an API document file.

    Returns: 'collection', 'openapi', or 'unknown'.
    """
    try:
        text = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return "unknown"

    # YAML is a superset of JSON, so this covers both
    try:
        return classify_document(yaml.safe_load(text))
    except yaml.YAMLError:
        pass

    # Some JSON (tabs inside strings, for one) is rejected by the YAML parser
    try:
        return classify_document(json.loads(text))
    except (json.JSONDecodeError, ValueError):
        pass

    return "unknown"


def classify_document(data: Any) -> str:
    """Classify an already-parsed document."""
    if not isinstance(data, dict):
        return "unknown"
    if "openapi" in data or "swagger" in data:
        return "openapi"
    if isinstance(data.get("items"), list):
        return "collection"
    return "unknown"
