"""Map request bodies to OpenAPI ``requestBody`` and response objects."""

import json
from typing import Any, assert_never

from collection_openapi.parser.base import (
    BodySpec,
    FileBody,
    FormField,
    FormUrlEncodedBody,
    GraphqlBody,
    JsonBody,
    MultipartFormBody,
    NoBody,
    SparqlBody,
    TextBody,
    XmlBody,
)
from .schema import infer_schema

DEFAULT_FIELD_NAME = "field"
MAX_EXAMPLE_DEPTH = 64
STRING_SCHEMA = {"type": "string"}
BINARY_SCHEMA = {"type": "string", "format": "binary"}


def build_request_body(body: BodySpec) -> dict | None:
    """Return an OpenAPI ``requestBody`` for ``body``, or None when it has none."""
    if isinstance(body, NoBody):
        return None
    if isinstance(body, JsonBody):
        example = parse_json_example(body.raw)
        return _content("application/json", schema=infer_schema(example), example=example)
    if isinstance(body, TextBody):
        return _content("text/plain", schema=dict(STRING_SCHEMA), example=body.text)
    if isinstance(body, XmlBody):
        return _content("application/xml", schema=dict(STRING_SCHEMA), example=body.xml)
    if isinstance(body, SparqlBody):
        return _content("application/sparql-query", schema=dict(STRING_SCHEMA), example=body.sparql)
    if isinstance(body, GraphqlBody):
        return _content("application/graphql", schema=dict(STRING_SCHEMA), example=body.graphql.query)
    if isinstance(body, FormUrlEncodedBody):
        return _form_url_encoded(body.fields)
    if isinstance(body, MultipartFormBody):
        return _multipart(body.fields)
    if isinstance(body, FileBody):
        return _content("application/octet-stream", schema=dict(BINARY_SCHEMA))
    assert_never(body)


def build_response_stub(body: BodySpec) -> dict:
    """Default ``200`` response: echoes the JSON body schema, else plain text."""
    content = {}
    if isinstance(body, JsonBody):
        schema = infer_schema(parse_json_example(body.raw))
        content["application/json"] = {"schema": schema}
    else:
        content["text/plain"] = {"schema": dict(STRING_SCHEMA)}

    return {"description": "Successful response", "content": content}


def parse_json_example(raw: str) -> Any:
    """Parse a JSON body; unparsable text is kept as a literal string example.

    Examples nested deeper than ``MAX_EXAMPLE_DEPTH`` are also kept as text,
    so that serializing the document cannot overflow the stack.
    """
    if not raw:
        return {}
    try:
        example = json.loads(raw)
    except (ValueError, RecursionError):
        return raw
    if _nesting_depth(example) > MAX_EXAMPLE_DEPTH:
        return raw
    return example


def _nesting_depth(value: Any) -> int:
    deepest = 0
    stack = [(value, 1)]
    while stack:
        current, depth = stack.pop()
        if isinstance(current, dict):
            children = current.values()
        elif isinstance(current, list):
            children = current
        else:
            continue
        deepest = max(deepest, depth)
        stack.extend((child, depth + 1) for child in children)
    return deepest


def _content(media_type: str, schema: dict, **extra: Any) -> dict:
    media = {"schema": schema}
    media.update(extra)
    return {"content": {media_type: media}}


def _field_name(field: FormField) -> str:
    return field.name or DEFAULT_FIELD_NAME


def _form_url_encoded(fields: tuple[FormField, ...]) -> dict:
    properties = {}
    example = {}
    for field in fields:
        name = _field_name(field)
        properties[name] = dict(STRING_SCHEMA)
        if field.value:
            example[name] = field.value

    schema = {"type": "object", "properties": properties}
    if example:
        return _content("application/x-www-form-urlencoded", schema=schema, example=example)
    return _content("application/x-www-form-urlencoded", schema=schema)


def _multipart(fields: tuple[FormField, ...]) -> dict:
    properties = {}
    for field in fields:
        properties[_field_name(field)] = dict(BINARY_SCHEMA if field.type == "file" else STRING_SCHEMA)
    return _content("multipart/form-data", schema={"type": "object", "properties": properties})
