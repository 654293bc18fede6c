"""Convert a collection into an OpenAPI 3.0.3 document.

The collection is sanitized first, then walked depth-first. Folders add a
tag and may override auth for everything below them; each HTTP/GraphQL
request becomes one operation under ``paths``. Servers and security
schemes are collected in per-call registries.
"""

import logging
import re
from typing import Any, Mapping, assert_never

from pydantic import BaseModel

from collection_openapi.errors import CollectionRequiredError
from collection_openapi.parser.base import (
    AuthConfig,
    Collection,
    Folder,
    Header,
    Item,
    NoAuth,
    Param,
    Request,
    UnsupportedItem,
)
from collection_openapi.parser.sanitize import sanitize_collection
from .body import build_request_body, build_response_stub
from .security import SecuritySchemeRegistry, get_effective_auth
from .servers import ServerRegistry
from .templates import resolve_template
from .urls import split_url

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.0.3"
DOCUMENT_VERSION = "1.0.0"
DEFAULT_TITLE = "Untitled Collection"
DEFAULT_SUMMARY = "Untitled Request"

_PATH_TEMPLATE = re.compile(r"{([^}]+)}")


class TraversalContext(BaseModel):
    """What a node inherits from the folders above it."""

    ancestors: tuple[str, ...] = ()
    parent_auth: AuthConfig | None = None


class _Conversion:
    """Accumulated output of one conversion call."""

    def __init__(self, variables: Mapping[str, Any]):
        self.variables = variables
        self.servers = ServerRegistry(variables)
        self.security = SecuritySchemeRegistry()
        self.paths: dict[str, dict[str, dict]] = {}


def convert_collection(
    collection: Mapping[str, Any] | Collection | None,
    variables: Mapping[str, Any] | None = None,
    environment: str | None = None,
) -> dict:
    """Convert ``collection`` to an OpenAPI document (a plain dict).

    ``environment`` names one of the collection's environments whose
    variables seed the resolution; explicit ``variables`` win over it.
    """
    if collection is None:
        raise CollectionRequiredError()

    sanitized = sanitize_collection(collection)
    state = _Conversion(collect_variables(sanitized, variables, environment))

    root_auth = get_effective_auth(sanitized.root.request.auth, NoAuth())
    traverse_items(sanitized.items, TraversalContext(parent_auth=root_auth), state)

    document: dict[str, Any] = {
        "openapi": OPENAPI_VERSION,
        "info": {
            "title": sanitized.name or DEFAULT_TITLE,
            "version": DOCUMENT_VERSION,
            "description": sanitized.root.docs,
        },
    }
    servers = state.servers.servers
    if servers:
        document["servers"] = servers
    document["paths"] = state.paths
    schemes = state.security.schemes
    if schemes:
        document["components"] = {"securitySchemes": schemes}

    logger.info(
        "Converted collection %r: %d paths, %d servers, %d security schemes",
        document["info"]["title"], len(state.paths), len(servers), len(schemes),
    )
    return document


def collect_variables(
    collection: Collection,
    variables: Mapping[str, Any] | None = None,
    environment: str | None = None,
) -> dict[str, Any]:
    """Merge environment variables (enabled, non-secret) with explicit ones."""
    values: dict[str, Any] = {}
    if environment:
        env = collection.find_environment(environment)
        if env is None:
            logger.warning("Environment %r not found in collection %r, ignoring it", environment, collection.name)
        else:
            for var in env.variables:
                if var.name and var.enabled and not var.secret:
                    values[var.name] = var.value
    if variables:
        values.update(variables)
    return values


def traverse_items(items: tuple[Item, ...], context: TraversalContext, state: _Conversion) -> None:
    """Walk ``items`` depth-first, pre-order."""
    for item in items:
        if isinstance(item, Folder):
            ancestors = context.ancestors + ((item.name,) if item.name else ())
            parent_auth = get_effective_auth(item.root.request.auth, context.parent_auth)
            traverse_items(item.items, TraversalContext(ancestors=ancestors, parent_auth=parent_auth), state)
        elif isinstance(item, Request):
            if item.request is None:
                logger.debug("Skipping request %r without request details", item.name)
                continue
            process_request(item, context, state)
        elif isinstance(item, UnsupportedItem):
            logger.debug("Skipping %r: item type %r has no OpenAPI form", item.name, item.type)
        else:
            assert_never(item)


def process_request(item: Request, context: TraversalContext, state: _Conversion) -> None:
    """Build the operation for one request and store it in ``state.paths``."""
    request = item.request
    url = split_url(request.url)
    host = resolve_template(url.host, state.variables)
    path = resolve_template(url.path, state.variables)

    declared_path_params = [p for p in request.params if p.type == "path" and p.name]
    openapi_path = _rewrite_path_params(path.templated, declared_path_params)

    server = state.servers.register(url.scheme, host.templated, host.used)

    operation: dict[str, Any] = {"summary": item.name or DEFAULT_SUMMARY}
    if request.docs:
        operation["description"] = request.docs
    if context.ancestors:
        operation["tags"] = list(context.ancestors)

    parameters = _build_parameters(openapi_path, request.params, state.variables)
    if parameters:
        operation["parameters"] = parameters

    sample_headers = _sample_headers(request.headers, state.variables)
    if sample_headers:
        operation["x-sample-headers"] = sample_headers

    request_body = build_request_body(request.body)
    if request_body:
        operation["requestBody"] = request_body

    operation["responses"] = {"200": build_response_stub(request.body)}

    effective_auth = get_effective_auth(request.auth, context.parent_auth)
    registration = state.security.register(effective_auth)
    if registration is not None:
        operation["security"] = [
            {name: list(scopes) for name, scopes in registration.requirement.items()}
        ]
    elif isinstance(effective_auth, NoAuth):
        operation["security"] = []

    if server is not None:
        operation["servers"] = [server]

    method = (request.method or "GET").lower()
    methods = state.paths.setdefault(openapi_path, {})
    if method in methods:
        # Last definition wins; no merge.
        logger.debug("Replacing earlier %s %s with %r", method.upper(), openapi_path, item.name)
    methods[method] = operation


def _rewrite_path_params(path: str, params: list[Param]) -> str:
    """Turn ``:name`` segments of declared path params into ``{name}``.

    Every matching segment is rewritten, not only the first.
    ``{{name}}`` placeholders are already ``{name}`` in the templated path.
    """
    for param in params:
        replacement = "{" + param.name + "}"
        path = re.sub(rf":{re.escape(param.name)}(?=/|$)", lambda _m: replacement, path)
    return path


def _build_parameters(openapi_path: str, params: tuple[Param, ...], variables: Mapping[str, Any]) -> list[dict]:
    path_params = [p for p in params if p.type == "path" and p.name and p.enabled]
    query_params = [p for p in params if p.type == "query" and p.name and p.enabled]

    parameters = [_parameter(p, "path", variables) for p in path_params]
    parameters.extend(_parameter(p, "query", variables) for p in query_params)

    declared = {p.name for p in path_params}
    for name in dict.fromkeys(_PATH_TEMPLATE.findall(openapi_path)):
        if name not in declared:
            parameters.append({"name": name, "in": "path", "required": True, "schema": {"type": "string"}})
    return parameters


def _parameter(param: Param, location: str, variables: Mapping[str, Any]) -> dict:
    parameter: dict[str, Any] = {
        "name": param.name,
        "in": location,
        "required": location == "path",
    }
    if param.description:
        parameter["description"] = param.description
    parameter["schema"] = {"type": "string"}

    example = resolve_template(param.value, variables).resolved
    if example:
        parameter["example"] = example
    return parameter


def _sample_headers(headers: tuple[Header, ...], variables: Mapping[str, Any]) -> dict[str, str]:
    return {
        header.name: resolve_template(header.value, variables).resolved
        for header in headers
        if header.enabled and header.name
    }
