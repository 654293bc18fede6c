"""Split raw request URLs into scheme, host, path and query."""

import re
from typing import Any

from pydantic import BaseModel

DEFAULT_SCHEME = "https"

_SCHEME_PATTERN = re.compile(r"^([a-zA-Z][\w+\-.]*)://")
_SLASH_RUN = re.compile(r"/{2,}")


class UrlParts(BaseModel):
    scheme: str = DEFAULT_SCHEME
    host: str = ""
    path: str = "/"
    query: str = ""


def split_url(url: Any) -> UrlParts:
    """Split ``url`` into its parts. Never raises; bad input gives the defaults."""
    if not url or not isinstance(url, str):
        return UrlParts()

    working = url.strip()
    scheme = DEFAULT_SCHEME

    match = _SCHEME_PATTERN.match(working)
    if match:
        scheme = match.group(1)
        working = working[match.end():]

    query = ""
    if "?" in working:
        working, query = working.split("?", 1)

    if working.startswith("/"):
        host, path = "", working
    elif "/" in working:
        slash = working.index("/")
        host, path = working[:slash], working[slash:]
    else:
        host, path = working, "/"

    return UrlParts(scheme=scheme, host=host, path=normalize_path(path), query=query)


def normalize_path(path: Any) -> str:
    """Force a leading slash and collapse runs of slashes."""
    if not path or not isinstance(path, str):
        return "/"

    path = path.strip()
    if not path.startswith("/"):
        path = "/" + path
    return _SLASH_RUN.sub("/", path)
