from collection_openapi.openapi.servers import ServerRegistry


class TestServerRegistry:
    def test_plain_host(self):
        registry = ServerRegistry()
        assert registry.register("https", "api.example.com") == {"url": "https://api.example.com"}

    def test_host_variables_get_defaults(self):
        registry = ServerRegistry({"host": "api.example.com"})
        server = registry.register("https", "{host}:{port}", ["host", "port"])
        assert server == {
            "url": "https://{host}:{port}",
            "variables": {
                "host": {"default": "api.example.com"},
                "port": {"default": ""},
            },
        }

    def test_same_key_returns_same_object(self):
        registry = ServerRegistry()
        first = registry.register("https", "h")
        second = registry.register("https", "h")
        assert first is second
        assert registry.servers == [first]

    def test_scheme_is_part_of_key(self):
        registry = ServerRegistry()
        registry.register("https", "h")
        registry.register("http", "h")
        assert [s["url"] for s in registry.servers] == ["https://h", "http://h"]

    def test_blank_host_is_ignored(self):
        registry = ServerRegistry()
        assert registry.register("https", "") is None
        assert registry.register("https", "   ") is None
        assert registry.servers == []
