"""Tests for ClientRegistry."""
from services.client_registry import ClientRegistry


class TestClientRegistry:

    def test_name_available_when_empty(self):
        registry = ClientRegistry()
        assert registry.is_name_available("alice")

    def test_register_and_lookup(self):
        registry = ClientRegistry()
        registry.register("c1", "alice")
        assert registry.get_name_by_connection_id("c1") == "alice"
        assert not registry.is_name_available("alice")
        assert "c1" in registry
        assert len(registry) == 1

    def test_lookup_unknown_returns_none(self):
        registry = ClientRegistry()
        assert registry.get_name_by_connection_id("nobody") is None

    def test_names_are_case_sensitive(self):
        registry = ClientRegistry()
        registry.register("c1", "alice")
        assert registry.is_name_available("Alice")

    def test_rebinding_overwrites_previous_name(self):
        registry = ClientRegistry()
        registry.register("c1", "alice")
        registry.register("c1", "alicia")
        assert registry.get_name_by_connection_id("c1") == "alicia"
        assert registry.is_name_available("alice")
        assert len(registry) == 1

    def test_exclude_ignores_own_binding(self):
        registry = ClientRegistry()
        registry.register("c1", "alice")
        assert registry.is_name_available("alice", exclude="c1")
        assert not registry.is_name_available("alice", exclude="c2")

    def test_remove_frees_name(self):
        registry = ClientRegistry()
        registry.register("c1", "alice")
        registry.remove("c1")
        assert registry.get_name_by_connection_id("c1") is None
        assert registry.is_name_available("alice")

    def test_remove_unknown_is_noop(self):
        registry = ClientRegistry()
        registry.remove("ghost")
        assert len(registry) == 0
