"""Serialize OpenAPI documents and name export files."""

import json
import re

import yaml

FORMATS = ("json", "yaml")

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]+')


class _NoAliasDumper(yaml.SafeDumper):
    """Servers are shared between operations; write them out in full each time."""

    def ignore_aliases(self, data):
        return True


def dump_document(document: dict, fmt: str = "json", indent: int = 2) -> str:
    """Serialize ``document`` as JSON or YAML."""
    if fmt == "json":
        return json.dumps(document, indent=indent, ensure_ascii=False) + "\n"
    if fmt == "yaml":
        return yaml.dump(
            document,
            Dumper=_NoAliasDumper,
            sort_keys=False,
            allow_unicode=True,
            indent=indent,
        )
    raise ValueError(f"Unsupported output format: {fmt!r} (expected one of {', '.join(FORMATS)})")


def export_filename(collection_name: str, fmt: str = "json", environment: str | None = None) -> str:
    """``<collection>[.<environment>].openapi.<json|yaml>``"""
    base = _sanitize_piece(collection_name) or "collection"
    suffix = f".{_sanitize_piece(environment)}" if environment and _sanitize_piece(environment) else ""
    extension = "yaml" if fmt == "yaml" else "json"
    return f"{base}{suffix}.openapi.{extension}"


def _sanitize_piece(value: str | None) -> str:
    if not value or not isinstance(value, str):
        return ""
    return _UNSAFE_FILENAME_CHARS.sub("-", value.strip())
