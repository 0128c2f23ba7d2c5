"""Test listener registry and matching."""

import re

from bianco.events.registry import ListenerRegistry, pattern_key


def noop(*args):
    pass


def other(*args):
    pass


class TestAddRemove:
    """Test registry mutation."""

    def test_add_exact_name(self):
        registry = ListenerRegistry()
        assert registry.add("test", noop) is True
        assert registry.has("test", noop)
        assert "test" in registry.by_name

    def test_add_same_listener_twice_is_noop(self):
        registry = ListenerRegistry()
        registry.add("test", noop)
        assert registry.add("test", noop) is False
        assert len(registry) == 1

    def test_add_pattern_keyed_by_source_and_flags(self):
        registry = ListenerRegistry()
        pattern = re.compile(r"^item-")
        registry.add(pattern, noop)
        key = pattern_key(pattern)
        assert key in registry.by_pattern
        assert registry.patterns[key] is pattern

    def test_equal_patterns_share_an_entry(self):
        registry = ListenerRegistry()
        registry.add(re.compile(r"^item-"), noop)
        registry.add(re.compile(r"^item-"), other)
        assert len(registry.by_pattern) == 1
        assert len(registry) == 2

    def test_different_flags_are_different_entries(self):
        registry = ListenerRegistry()
        registry.add(re.compile(r"^item-"), noop)
        registry.add(re.compile(r"^item-", re.IGNORECASE), noop)
        assert len(registry.by_pattern) == 2

    def test_remove_single_listener_keeps_others(self):
        registry = ListenerRegistry()
        registry.add("test", noop)
        registry.add("test", other)
        assert registry.remove("test", noop) == 1
        assert registry.has("test", other)
        assert not registry.has("test", noop)

    def test_remove_last_listener_drops_key(self):
        registry = ListenerRegistry()
        registry.add("test", noop)
        registry.remove("test", noop)
        assert "test" not in registry.by_name

    def test_remove_last_pattern_listener_drops_side_table(self):
        registry = ListenerRegistry()
        registry.add(re.compile("a"), noop)
        registry.remove(re.compile("a"), noop)
        assert registry.by_pattern == {}
        assert registry.patterns == {}

    def test_remove_whole_key(self):
        registry = ListenerRegistry()
        registry.add("test", noop)
        registry.add("test", other)
        registry.add("keep", noop)
        assert registry.remove("test") == 2
        assert registry.events() == ["keep"]

    def test_remove_all_resets_both_maps(self):
        registry = ListenerRegistry()
        registry.add("a", noop)
        registry.add("*", noop)
        registry.add(re.compile("b"), other)
        assert registry.remove("*") == 3
        assert not registry
        assert registry.patterns == {}

    def test_remove_unknown_is_noop(self):
        registry = ListenerRegistry()
        assert registry.remove("nothing") == 0
        assert registry.remove("nothing", noop) == 0
        registry.add("test", noop)
        assert registry.remove("test", other) == 0
        assert registry.remove("*") == 1
        assert registry.remove("*") == 0

    def test_remove_wildcard_listener_only(self):
        registry = ListenerRegistry()
        registry.add("*", noop)
        registry.add("a", noop)
        registry.remove("*", noop)
        assert registry.events() == ["a"]


class TestMatch:
    """Test matching of triggers against subscriptions."""

    def test_exact_before_pattern(self):
        registry = ListenerRegistry()
        registry.add(re.compile(r"^item-"), other)
        registry.add("item-42", noop)
        assert registry.match("item-42") == (noop, other)

    def test_pattern_uses_search(self):
        registry = ListenerRegistry()
        registry.add(re.compile(r"open"), noop)
        assert registry.match("modal-open") == (noop,)
        assert registry.match("close") == ()

    def test_listener_in_both_buckets_returned_once(self):
        registry = ListenerRegistry()
        registry.add("item-1", noop)
        registry.add(re.compile(r"^item-"), noop)
        assert registry.match("item-1") == (noop,)

    def test_pattern_trigger_resolves_exact_names(self):
        registry = ListenerRegistry()
        registry.add("item-1", noop)
        registry.add("item-2", other)
        registry.add("thing", lambda: None)
        assert registry.match(re.compile(r"^item-")) == (noop, other)

    def test_pattern_trigger_ignores_wildcard_bucket(self):
        registry = ListenerRegistry()
        registry.add("*", noop)
        assert registry.match(re.compile(r".*")) == ()

    def test_wildcard_trigger_matches_only_wildcard_bucket(self):
        registry = ListenerRegistry()
        registry.add("*", noop)
        registry.add(re.compile(r".*"), other)
        assert registry.match("*") == (noop,)

    def test_wildcard_bucket(self):
        registry = ListenerRegistry()
        assert registry.wildcard() == ()
        registry.add("*", noop)
        assert registry.wildcard() == (noop,)

    def test_match_unknown_event_is_empty(self):
        registry = ListenerRegistry()
        assert registry.match("pooop") == ()

    def test_insertion_order_within_bucket(self):
        registry = ListenerRegistry()
        listeners = [lambda: None for _ in range(5)]
        for listener in listeners:
            registry.add("test", listener)
        assert registry.match("test") == tuple(listeners)

    def test_bound_methods_compare_equal(self):
        class Handler:
            def handle(self):
                pass

        handler = Handler()
        registry = ListenerRegistry()
        registry.add("test", handler.handle)
        assert registry.add("test", handler.handle) is False
        registry.remove("test", handler.handle)
        assert not registry


class TestIntrospection:
    """Test registry iteration and listing."""

    def test_iterates_pairs_names_first(self):
        registry = ListenerRegistry()
        pattern = re.compile("x")
        registry.add(pattern, other)
        registry.add("a", noop)
        assert list(registry) == [("a", noop), (pattern, other)]

    def test_events_lists_names_and_patterns(self):
        registry = ListenerRegistry()
        pattern = re.compile("x")
        registry.add("a", noop)
        registry.add(pattern, noop)
        assert registry.events() == ["a", pattern]
