"""``{{variable}}`` placeholder resolution.

Every string is rendered two ways: ``resolved`` substitutes known values
(for examples), ``templated`` rewrites placeholders to OpenAPI's ``{name}``
form (for paths and server URLs).
"""

import re
from typing import Any, Mapping

from pydantic import BaseModel

VARIABLE_PATTERN = re.compile(r"{{\s*([\w.\-]+)\s*}}")


class TemplateResult(BaseModel):
    resolved: Any
    templated: Any
    used: tuple[str, ...] = ()  # first-seen order
    unresolved: tuple[str, ...] = ()


def resolve_template(value: Any, variables: Mapping[str, Any] | None = None) -> TemplateResult:
    """Resolve ``{{name}}`` placeholders in ``value``.

    Unknown names resolve to the bare name. Non-string values pass through.
    """
    if not isinstance(value, str):
        return TemplateResult(resolved=value, templated=value)

    variables = variables or {}
    used: dict[str, None] = {}
    unresolved: dict[str, None] = {}

    def substitute(match: re.Match) -> str:
        name = match.group(1)
        used[name] = None
        known = variables.get(name)
        if known is None:
            unresolved[name] = None
            return name
        return str(known)

    resolved = VARIABLE_PATTERN.sub(substitute, value)
    templated = VARIABLE_PATTERN.sub(lambda m: "{" + m.group(1) + "}", value)

    return TemplateResult(
        resolved=resolved,
        templated=templated,
        used=tuple(used),
        unresolved=tuple(unresolved),
    )
