"""Sanitize pass: clone a raw collection, scrub it and validate it.

The caller's collection is never touched. UIDs are dropped from items and
environments, and secret environment values are blanked before anything
downstream can read them.
"""

import copy
import logging
from typing import Any, Mapping

from pydantic import BaseModel

from .base import Collection

logger = logging.getLogger(__name__)


def sanitize_collection(collection: Mapping[str, Any] | Collection) -> Collection:
    """Return a scrubbed, immutable copy of ``collection``."""
    if isinstance(collection, BaseModel):
        data = collection.model_dump(by_alias=True, mode="json")
    elif isinstance(collection, Mapping):
        data = copy.deepcopy(dict(collection))
    else:
        logger.warning("Expected a collection mapping, got %s; converting an empty collection", type(collection).__name__)
        data = {}

    data["items"] = _strip_uids(data.get("items"))
    data["environments"] = _scrub_environments(data.get("environments"))
    return Collection.model_validate(data)


def _strip_uids(value: Any) -> Any:
    """Remove every ``uid`` key from a nested structure of dicts and lists."""
    if isinstance(value, dict):
        return {k: _strip_uids(v) for k, v in value.items() if k != "uid"}
    if isinstance(value, (list, tuple)):
        return [_strip_uids(v) for v in value]
    return value


def _scrub_environments(environments: Any) -> Any:
    if not isinstance(environments, (list, tuple)):
        return environments

    scrubbed = []
    for env in _strip_uids(environments):
        if isinstance(env, dict) and isinstance(env.get("variables"), list):
            env["variables"] = [_scrub_variable(v) for v in env["variables"]]
        scrubbed.append(env)
    return scrubbed


def _scrub_variable(variable: Any) -> Any:
    if isinstance(variable, dict) and variable.get("secret"):
        return {**variable, "value": ""}
    return variable
