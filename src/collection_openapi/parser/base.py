"""Data models for API collections.

A collection is a tree of folders and requests. Auth and body settings are
closed unions keyed on their ``mode`` so every consumer handles each variant
explicitly. Validation is lenient: malformed fields fall back to empty
defaults instead of failing, so half-edited collections still convert.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    model_validator,
)

REQUEST_ITEM_TYPES = ("http-request", "graphql-request")


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _scalar_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def _records(value: Any) -> list:
    """Keep only mapping-like entries of a list; anything else becomes []."""
    if not isinstance(value, (list, tuple)):
        return []
    return [v for v in value if isinstance(v, (dict, BaseModel))]


def _mapping(value: Any) -> Any:
    return value if isinstance(value, (dict, BaseModel)) else {}


def _mapping_or_none(value: Any) -> Any:
    return value if isinstance(value, (dict, BaseModel)) else None


def _flag(default: bool) -> BeforeValidator:
    def coerce(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        if isinstance(value, str) and value.lower() in ("true", "false"):
            return value.lower() == "true"
        return default

    return BeforeValidator(coerce)


def _tag_of(value: Any, field: str) -> Any:
    if isinstance(value, dict):
        return value.get(field)
    return getattr(value, field, None)


Text = Annotated[str, BeforeValidator(_text)]
Enabled = Annotated[bool, _flag(True)]


class _Model(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class _Details(BaseModel):
    # Unknown keys are kept: they take part in the security dedup key.
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")


# --- Authentication -------------------------------------------------------


class NoAuth(_Model):
    """Explicitly no authentication."""

    mode: Literal["none"] = "none"


class InheritAuth(_Model):
    """Use the nearest enclosing folder's (or the collection's) auth."""

    mode: Literal["inherit"] = "inherit"

    @model_validator(mode="before")
    @classmethod
    def _normalize_mode(cls, data: Any) -> Any:
        # A missing or empty mode behaves like inherit.
        if isinstance(data, dict):
            return {**data, "mode": "inherit"}
        return data


class BasicDetails(_Details):
    username: Text = ""
    password: Text = ""


class BasicAuth(_Model):
    mode: Literal["basic"] = "basic"
    basic: Annotated[BasicDetails, BeforeValidator(_mapping)] = BasicDetails()


class BearerDetails(_Details):
    token: Text = ""


class BearerAuth(_Model):
    mode: Literal["bearer"] = "bearer"
    bearer: Annotated[BearerDetails, BeforeValidator(_mapping)] = BearerDetails()


class ApiKeyDetails(_Details):
    key: Text = ""
    value: Text = ""
    placement: Text = "header"  # header / queryparams


class ApiKeyAuth(_Model):
    mode: Literal["apikey"] = "apikey"
    apikey: Annotated[ApiKeyDetails, BeforeValidator(_mapping)] = ApiKeyDetails()


class OAuth2Details(_Details):
    grant_type: Text = Field("client_credentials", alias="grantType")
    access_token_url: Text = Field("", alias="accessTokenUrl")
    authorization_url: Text = Field("", alias="authorizationUrl")
    refresh_token_url: Text = Field("", alias="refreshTokenUrl")
    scope: Text = ""


class OAuth2Auth(_Model):
    mode: Literal["oauth2"] = "oauth2"
    oauth2: Annotated[OAuth2Details, BeforeValidator(_mapping)] = OAuth2Details()


class UnsupportedAuth(_Model):
    """Any auth mode OpenAPI has no native scheme for (digest, awsv4, ...)."""

    mode: Text = ""
    details: dict[str, Any] = {}

    @model_validator(mode="before")
    @classmethod
    def _collect_details(cls, data: Any) -> Any:
        if isinstance(data, dict) and "details" not in data:
            details = data.get(data.get("mode")) if isinstance(data.get("mode"), str) else None
            return {"mode": data.get("mode"), "details": details if isinstance(details, dict) else {}}
        return data


_AUTH_MODES = ("none", "inherit", "basic", "bearer", "apikey", "oauth2")


def _auth_tag(value: Any) -> str:
    mode = _tag_of(value, "mode")
    if not mode:
        return "inherit"
    return mode if mode in _AUTH_MODES else "unsupported"


AuthConfig = Annotated[
    Union[
        Annotated[NoAuth, Tag("none")],
        Annotated[InheritAuth, Tag("inherit")],
        Annotated[BasicAuth, Tag("basic")],
        Annotated[BearerAuth, Tag("bearer")],
        Annotated[ApiKeyAuth, Tag("apikey")],
        Annotated[OAuth2Auth, Tag("oauth2")],
        Annotated[UnsupportedAuth, Tag("unsupported")],
    ],
    Discriminator(_auth_tag),
]

OptionalAuth = Annotated[AuthConfig | None, BeforeValidator(_mapping_or_none)]


# --- Bodies ---------------------------------------------------------------


class NoBody(_Model):
    """No request body. Unknown body modes also land here."""

    mode: Text = "none"


class JsonBody(_Model):
    mode: Literal["json"] = "json"
    raw: Text = Field("", alias="json")


class TextBody(_Model):
    mode: Literal["text"] = "text"
    text: Text = ""


class XmlBody(_Model):
    mode: Literal["xml"] = "xml"
    xml: Text = ""


class SparqlBody(_Model):
    mode: Literal["sparql"] = "sparql"
    sparql: Text = ""


class GraphqlDetails(_Model):
    query: Text = ""
    variables: Text = ""


class GraphqlBody(_Model):
    mode: Literal["graphql"] = "graphql"
    graphql: Annotated[GraphqlDetails, BeforeValidator(_mapping)] = GraphqlDetails()


class FormField(_Model):
    name: Text = ""
    value: Text = ""
    type: Text = "text"  # text / file (multipart only)
    enabled: Enabled = True


FormFields = Annotated[tuple[FormField, ...], BeforeValidator(_records)]


class FormUrlEncodedBody(_Model):
    mode: Literal["formUrlEncoded"] = "formUrlEncoded"
    fields: FormFields = Field((), alias="formUrlEncoded")


class MultipartFormBody(_Model):
    mode: Literal["multipartForm"] = "multipartForm"
    fields: FormFields = Field((), alias="multipartForm")


class FileBody(_Model):
    mode: Literal["file"] = "file"


_BODY_MODES = ("json", "text", "xml", "sparql", "graphql", "formUrlEncoded", "multipartForm", "file")


def _body_tag(value: Any) -> str:
    mode = _tag_of(value, "mode")
    return mode if mode in _BODY_MODES else "none"


BodySpec = Annotated[
    Union[
        Annotated[NoBody, Tag("none")],
        Annotated[JsonBody, Tag("json")],
        Annotated[TextBody, Tag("text")],
        Annotated[XmlBody, Tag("xml")],
        Annotated[SparqlBody, Tag("sparql")],
        Annotated[GraphqlBody, Tag("graphql")],
        Annotated[FormUrlEncodedBody, Tag("formUrlEncoded")],
        Annotated[MultipartFormBody, Tag("multipartForm")],
        Annotated[FileBody, Tag("file")],
    ],
    Discriminator(_body_tag),
]


# --- Requests, folders, collection ----------------------------------------


class Header(_Model):
    name: Text = ""
    value: Text = ""
    enabled: Enabled = True


class Param(_Model):
    """A request parameter declared in the collection."""

    name: Text = ""
    value: Text = ""
    type: Text = "query"  # path / query
    enabled: Enabled = True
    description: Text = ""


class RequestSpec(_Model):
    method: Text = "GET"
    url: Text = ""
    headers: Annotated[tuple[Header, ...], BeforeValidator(_records)] = ()
    params: Annotated[tuple[Param, ...], BeforeValidator(_records)] = ()
    auth: OptionalAuth = None
    body: Annotated[BodySpec, BeforeValidator(_mapping)] = NoBody()
    docs: Text = ""


class Request(_Model):
    """An HTTP or GraphQL request item."""

    type: Text = "http-request"
    name: Text = ""
    request: Annotated[RequestSpec | None, BeforeValidator(_mapping_or_none)] = None


class UnsupportedItem(_Model):
    """Websocket, gRPC and other request kinds with no OpenAPI rendition."""

    type: Text = ""
    name: Text = ""


class FolderRequest(_Model):
    auth: OptionalAuth = None


class FolderRoot(_Model):
    request: Annotated[FolderRequest, BeforeValidator(_mapping)] = FolderRequest()
    docs: Text = ""


class Folder(_Model):
    type: Literal["folder"] = "folder"
    name: Text = ""
    items: Annotated[tuple["Item", ...], BeforeValidator(_records)] = ()
    root: Annotated[FolderRoot, BeforeValidator(_mapping)] = FolderRoot()


def _item_tag(value: Any) -> str:
    item_type = _tag_of(value, "type")
    if item_type == "folder":
        return "folder"
    if item_type in REQUEST_ITEM_TYPES:
        return "request"
    return "unsupported"


Item = Annotated[
    Union[
        Annotated[Folder, Tag("folder")],
        Annotated[Request, Tag("request")],
        Annotated[UnsupportedItem, Tag("unsupported")],
    ],
    Discriminator(_item_tag),
]

Folder.model_rebuild()


class Variable(_Model):
    name: Text = ""
    value: Annotated[str, BeforeValidator(_scalar_text)] = ""
    enabled: Enabled = True
    secret: Annotated[bool, _flag(False)] = False


class Environment(_Model):
    name: Text = ""
    variables: Annotated[tuple[Variable, ...], BeforeValidator(_records)] = ()


class Collection(_Model):
    """Root of a collection: top-level items, environments and defaults."""

    name: Text = ""
    items: Annotated[tuple[Item, ...], BeforeValidator(_records)] = ()
    environments: Annotated[tuple[Environment, ...], BeforeValidator(_records)] = ()
    root: Annotated[FolderRoot, BeforeValidator(_mapping)] = FolderRoot()

    def find_environment(self, name: str) -> Environment | None:
        for env in self.environments:
            if env.name == name:
                return env
        return None
