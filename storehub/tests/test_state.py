from __future__ import annotations

import pytest

from storehub.client.state import StateStore, ViewState


def test_commit_notifies_with_new_snapshot():
    store = StateStore()
    seen = []
    store.subscribe(seen.append)

    store.commit(loading=True, query="cafe")

    assert len(seen) == 1
    assert seen[0].loading is True
    assert seen[0].query == "cafe"
    assert seen[0] is store.state


def test_snapshots_are_immutable():
    store = StateStore()
    before = store.state
    store.commit(ratings={"1": 4})

    assert before.rating_for("1") == 0
    assert store.state.rating_for("1") == 4
    with pytest.raises(TypeError):
        store.state.ratings["1"] = 5  # type: ignore[index]


def test_unsubscribe_stops_notifications():
    store = StateStore()
    seen = []
    unsubscribe = store.subscribe(seen.append)
    store.commit(loading=True)
    unsubscribe()
    store.commit(loading=False)
    assert len(seen) == 1


def test_failing_listener_does_not_block_others():
    store = StateStore()
    seen = []

    def broken(state):
        raise RuntimeError("render failed")

    store.subscribe(broken)
    store.subscribe(seen.append)
    store.commit(notice="hello")

    assert seen[0].notice == "hello"


def test_saving_membership():
    state = ViewState(saving=frozenset({"1"}))
    assert state.is_saving("1")
    assert not state.is_saving("2")
