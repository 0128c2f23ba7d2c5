"""Property-based tests using hypothesis."""

import re
from unittest.mock import MagicMock

from hypothesis import given
from hypothesis import strategies as st

from bianco import Observable

event_names = st.text(alphabet="abcdefghij-", min_size=1, max_size=12).filter(lambda s: s != "*")


class TestPropertyBased:
    """Property-based tests for bus invariants."""

    @given(event_names, st.integers(min_value=1, max_value=10))
    def test_duplicate_registration_dispatches_once(self, event, registrations):
        """Property: registering the same listener N times gives one call per trigger."""
        observer = Observable()
        fake = MagicMock()
        for _ in range(registrations):
            observer.on(event, fake)

        observer.trigger(event)

        assert fake.call_count == 1

    @given(event_names, st.integers(min_value=1, max_value=20))
    def test_once_fires_exactly_once(self, event, triggers):
        """Property: one() delivers exactly once however many triggers follow."""
        observer = Observable()
        fake = MagicMock()
        observer.one(event, fake)

        for _ in range(triggers):
            observer.trigger(event)

        assert fake.call_count == 1

    @given(event_names, st.integers(min_value=1, max_value=20))
    def test_on_plus_one_counts(self, event, triggers):
        """Property: on + one with the same function gives 1 + N calls."""
        observer = Observable()
        fake = MagicMock()
        observer.on(event, fake)
        observer.one(event, fake)

        for _ in range(triggers):
            observer.trigger(event)

        assert fake.call_count == triggers + 1

    @given(st.lists(st.integers(), min_size=1, max_size=50))
    def test_dispatch_order_follows_insertion(self, ids):
        """Property: listeners run in subscription order."""
        observer = Observable()
        received = []
        listeners = [lambda i=i: received.append(i) for i in ids]
        for listener in listeners:
            observer.on("ordered", listener)

        observer.trigger("ordered")

        assert received == ids

    @given(st.lists(event_names, min_size=1, max_size=20, unique=True))
    def test_off_all_silences_everything(self, events):
        """Property: off('*') leaves no subscription behind."""
        observer = Observable()
        fake = MagicMock()
        for event in events:
            observer.on(event, fake)
            observer.on(re.compile(re.escape(event)), fake)

        observer.off("*")
        for event in events:
            observer.trigger(event)

        assert fake.call_count == 0
        assert observer.events() == []

    @given(st.lists(event_names, min_size=1, max_size=10, unique=True), st.text(alphabet="xyz", min_size=1))
    def test_child_cleanup_leaves_parent_subscriptions(self, events, prefix):
        """Property: child cleanup removes exactly the child's keys from the parent."""
        parent = Observable()
        own = MagicMock()
        for event in events:
            parent.on(event, own)

        child = parent.observe(type("Child", (), {})(), prefix)
        for event in events:
            child.on(event, MagicMock())

        child.cleanup()

        assert parent.events() == events
