"""Auth inheritance and the security scheme registry.

Identical auth configurations anywhere in a collection share one named
scheme (``auth_1``, ``auth_2``, ... in first-seen order).
"""

import json
import logging
import re
from typing import assert_never

from pydantic import BaseModel

from collection_openapi.parser.base import (
    ApiKeyAuth,
    AuthConfig,
    BasicAuth,
    BearerAuth,
    InheritAuth,
    NoAuth,
    OAuth2Auth,
    OAuth2Details,
    UnsupportedAuth,
)

logger = logging.getLogger(__name__)

DEFAULT_API_KEY_NAME = "X-API-Key"

# grantType -> OpenAPI flow name, and whether the flow takes each URL
_OAUTH2_FLOWS = {
    "client_credentials": ("clientCredentials", False, True),
    "authorization_code": ("authorizationCode", True, True),
    "implicit": ("implicit", True, False),
    "password": ("password", False, True),
}


class SecurityRegistration(BaseModel):
    scheme_name: str
    requirement: dict[str, list[str]]


def get_effective_auth(auth: AuthConfig | None, parent_auth: AuthConfig | None) -> AuthConfig | None:
    """Resolve ``inherit`` (or no auth at all) to the parent's auth."""
    if auth is None or isinstance(auth, InheritAuth):
        return parent_auth
    return auth


class SecuritySchemeRegistry:
    """Deduplicating store of ``components.securitySchemes`` for one conversion."""

    def __init__(self):
        self._definitions: dict[str, dict] = {}
        self._registrations: dict[str, SecurityRegistration] = {}

    def register(
        self, auth: AuthConfig | None, parent_auth: AuthConfig | None = None
    ) -> SecurityRegistration | None:
        """Register the effective auth and return the requirement to apply.

        Returns None when no scheme applies (no auth, or explicitly none).
        """
        auth = get_effective_auth(auth, parent_auth)
        if auth is None or isinstance(auth, (NoAuth, InheritAuth)):
            return None

        key = _dedup_key(auth)
        if key in self._registrations:
            return self._registrations[key]

        name = f"auth_{len(self._registrations) + 1}"
        definition, scopes = _scheme_definition(auth)
        registration = SecurityRegistration(scheme_name=name, requirement={name: scopes})
        self._definitions[name] = definition
        self._registrations[key] = registration
        logger.debug("Registered security scheme %s (%s)", name, auth.mode)
        return registration

    @property
    def schemes(self) -> dict[str, dict]:
        return dict(self._definitions)


def _dedup_key(auth: AuthConfig) -> str:
    if isinstance(auth, UnsupportedAuth):
        details = auth.details
    else:
        details = getattr(auth, auth.mode).model_dump(by_alias=True)
    return json.dumps({"mode": auth.mode, "details": details}, sort_keys=True, default=str)


def _scheme_definition(auth: AuthConfig) -> tuple[dict, list[str]]:
    """Return the OpenAPI scheme for ``auth`` and the scopes it requires."""
    if isinstance(auth, BasicAuth):
        return {
            "type": "http",
            "scheme": "basic",
            "description": "HTTP Basic authentication exported from collection.",
        }, []
    if isinstance(auth, BearerAuth):
        return {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": "HTTP Bearer authentication exported from collection.",
        }, []
    if isinstance(auth, ApiKeyAuth):
        return {
            "type": "apiKey",
            "in": "query" if auth.apikey.placement == "queryparams" else "header",
            "name": auth.apikey.key or DEFAULT_API_KEY_NAME,
            "description": "API Key authentication exported from collection.",
        }, []
    if isinstance(auth, OAuth2Auth):
        return _oauth2_definition(auth.oauth2)
    if isinstance(auth, UnsupportedAuth):
        return {
            "type": "http",
            "scheme": "basic",
            "description": (
                f'Authentication mode "{auth.mode}" is not natively supported by OpenAPI. '
                "Exported as HTTP Basic placeholder."
            ),
        }, []
    if isinstance(auth, (NoAuth, InheritAuth)):
        raise ValueError(f"auth mode {auth.mode!r} has no security scheme")
    assert_never(auth)


def _oauth2_definition(details: OAuth2Details) -> tuple[dict, list[str]]:
    flow_name, needs_auth_url, needs_token_url = _OAUTH2_FLOWS.get(
        details.grant_type, _OAUTH2_FLOWS["client_credentials"]
    )
    scopes = {scope: "" for scope in re.split(r"\s+", details.scope) if scope}

    flow = {}
    if needs_auth_url:
        flow["authorizationUrl"] = details.authorization_url or details.access_token_url
    if needs_token_url:
        flow["tokenUrl"] = details.access_token_url
    if details.refresh_token_url:
        flow["refreshUrl"] = details.refresh_token_url
    flow["scopes"] = scopes

    return {"type": "oauth2", "flows": {flow_name: flow}}, list(scopes)
