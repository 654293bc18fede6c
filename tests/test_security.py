from pydantic import TypeAdapter

from collection_openapi.openapi.security import SecuritySchemeRegistry, get_effective_auth
from collection_openapi.parser.base import AuthConfig, NoAuth

_auth = TypeAdapter(AuthConfig).validate_python


class TestGetEffectiveAuth:
    def test_inherit_uses_parent(self):
        parent = _auth({"mode": "bearer", "bearer": {"token": "t"}})
        assert get_effective_auth(_auth({"mode": "inherit"}), parent) is parent

    def test_missing_uses_parent(self):
        parent = NoAuth()
        assert get_effective_auth(None, parent) is parent

    def test_own_auth_wins(self):
        own = _auth({"mode": "basic"})
        assert get_effective_auth(own, NoAuth()) is own


class TestSecuritySchemeRegistry:
    def test_none_and_missing_register_nothing(self):
        registry = SecuritySchemeRegistry()
        assert registry.register(NoAuth()) is None
        assert registry.register(None) is None
        assert registry.register(_auth({"mode": "inherit"}), None) is None
        assert registry.schemes == {}

    def test_inherit_registers_parent(self):
        registry = SecuritySchemeRegistry()
        result = registry.register(_auth({"mode": "inherit"}), _auth({"mode": "bearer", "bearer": {"token": "t"}}))
        assert result.scheme_name == "auth_1"
        assert registry.schemes["auth_1"]["scheme"] == "bearer"

    def test_identical_configs_are_deduplicated(self):
        registry = SecuritySchemeRegistry()
        first = registry.register(_auth({"mode": "basic", "basic": {"username": "u", "password": "p"}}))
        second = registry.register(_auth({"mode": "basic", "basic": {"password": "p", "username": "u"}}))
        assert first.scheme_name == second.scheme_name == "auth_1"
        assert second.requirement == {"auth_1": []}
        assert list(registry.schemes) == ["auth_1"]

    def test_different_configs_get_sequential_names(self):
        registry = SecuritySchemeRegistry()
        registry.register(_auth({"mode": "basic", "basic": {"username": "a"}}))
        result = registry.register(_auth({"mode": "basic", "basic": {"username": "b"}}))
        assert result.scheme_name == "auth_2"

    def test_bearer(self):
        registry = SecuritySchemeRegistry()
        registry.register(_auth({"mode": "bearer", "bearer": {"token": "t"}}))
        scheme = registry.schemes["auth_1"]
        assert scheme["type"] == "http"
        assert scheme["scheme"] == "bearer"
        assert scheme["bearerFormat"] == "JWT"

    def test_apikey_in_query(self):
        registry = SecuritySchemeRegistry()
        registry.register(_auth({"mode": "apikey", "apikey": {"key": "api_key", "value": "v", "placement": "queryparams"}}))
        scheme = registry.schemes["auth_1"]
        assert scheme["type"] == "apiKey"
        assert scheme["in"] == "query"
        assert scheme["name"] == "api_key"

    def test_apikey_defaults(self):
        registry = SecuritySchemeRegistry()
        registry.register(_auth({"mode": "apikey", "apikey": {}}))
        scheme = registry.schemes["auth_1"]
        assert scheme["in"] == "header"
        assert scheme["name"] == "X-API-Key"

    def test_oauth2_authorization_code(self):
        registry = SecuritySchemeRegistry()
        result = registry.register(_auth({
            "mode": "oauth2",
            "oauth2": {
                "grantType": "authorization_code",
                "accessTokenUrl": "https://id.example.com/token",
                "authorizationUrl": "https://id.example.com/authorize",
                "refreshTokenUrl": "https://id.example.com/refresh",
                "scope": "read  write",
            },
        }))
        assert result.requirement == {"auth_1": ["read", "write"]}
        assert registry.schemes["auth_1"] == {
            "type": "oauth2",
            "flows": {
                "authorizationCode": {
                    "authorizationUrl": "https://id.example.com/authorize",
                    "tokenUrl": "https://id.example.com/token",
                    "refreshUrl": "https://id.example.com/refresh",
                    "scopes": {"read": "", "write": ""},
                }
            },
        }

    def test_oauth2_implicit_falls_back_to_token_url(self):
        registry = SecuritySchemeRegistry()
        registry.register(_auth({"mode": "oauth2", "oauth2": {"grantType": "implicit", "accessTokenUrl": "https://t"}}))
        assert registry.schemes["auth_1"]["flows"] == {"implicit": {"authorizationUrl": "https://t", "scopes": {}}}

    def test_oauth2_password(self):
        registry = SecuritySchemeRegistry()
        registry.register(_auth({"mode": "oauth2", "oauth2": {"grantType": "password", "accessTokenUrl": "https://t"}}))
        assert registry.schemes["auth_1"]["flows"] == {"password": {"tokenUrl": "https://t", "scopes": {}}}

    def test_oauth2_unknown_grant_defaults_to_client_credentials(self):
        registry = SecuritySchemeRegistry()
        registry.register(_auth({"mode": "oauth2", "oauth2": {"grantType": "device_code", "accessTokenUrl": "https://t"}}))
        assert registry.schemes["auth_1"]["flows"] == {"clientCredentials": {"tokenUrl": "https://t", "scopes": {}}}

    def test_oauth2_extra_fields_take_part_in_dedup(self):
        registry = SecuritySchemeRegistry()
        registry.register(_auth({"mode": "oauth2", "oauth2": {"clientId": "a"}}))
        registry.register(_auth({"mode": "oauth2", "oauth2": {"clientId": "b"}}))
        assert list(registry.schemes) == ["auth_1", "auth_2"]

    def test_unsupported_mode_is_basic_placeholder(self):
        registry = SecuritySchemeRegistry()
        result = registry.register(_auth({"mode": "awsv4", "awsv4": {"region": "eu"}}))
        assert result is not None
        scheme = registry.schemes["auth_1"]
        assert scheme["scheme"] == "basic"
        assert '"awsv4"' in scheme["description"]
