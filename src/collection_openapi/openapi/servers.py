"""Registry of OpenAPI ``servers`` entries keyed by scheme and templated host."""

import logging
from typing import Any, Iterable, Mapping

logger = logging.getLogger(__name__)


class ServerRegistry:
    """Deduplicates servers for one conversion.

    Every request on the same ``scheme://host`` gets the very same server
    dict, so the document's ``servers`` list and the operations agree.
    """

    def __init__(self, variables: Mapping[str, Any] | None = None):
        self.variables = variables or {}
        self._servers: dict[str, dict] = {}

    def register(self, scheme: str, templated_host: str, host_variables: Iterable[str] = ()) -> dict | None:
        if not templated_host or not templated_host.strip():
            return None

        url = f"{scheme}://{templated_host}"
        if url in self._servers:
            return self._servers[url]

        server: dict[str, Any] = {"url": url}
        server_variables = {name: {"default": self._default(name)} for name in host_variables}
        if server_variables:
            server["variables"] = server_variables

        self._servers[url] = server
        logger.debug("Registered server %s", url)
        return server

    @property
    def servers(self) -> list[dict]:
        return list(self._servers.values())

    def _default(self, name: str) -> str:
        value = self.variables.get(name)
        return "" if value is None else str(value)
