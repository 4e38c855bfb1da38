"""
Observable view state.

Controllers never mutate state in place. Each change goes through
``StateStore.commit`` which swaps in a new immutable ``ViewState`` and then
notifies subscribers with that snapshot, so a subscriber never sees half of
an update.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Callable, Mapping

from ..stores.models import Store

logger = logging.getLogger(__name__)

Listener = Callable[["ViewState"], None]


@dataclass(frozen=True)
class ViewState:
    query: str = ""
    stores: tuple[Store, ...] = ()
    loading: bool = False
    # store id -> the user's last known rating, possibly not yet confirmed
    ratings: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    # store ids with a rating submission in flight
    saving: frozenset[str] = frozenset()
    notice: str | None = None

    def rating_for(self, store_id: str) -> int:
        """Return the user's rating for a store, 0 when unrated."""
        return self.ratings.get(store_id, 0)

    def is_saving(self, store_id: str) -> bool:
        return store_id in self.saving


class StateStore:
    def __init__(self, initial: ViewState | None = None) -> None:
        self._state = initial or ViewState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> ViewState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def commit(self, **changes: Any) -> ViewState:
        if "ratings" in changes:
            changes["ratings"] = MappingProxyType(dict(changes["ratings"]))
        if "stores" in changes:
            changes["stores"] = tuple(changes["stores"])
        if "saving" in changes:
            changes["saving"] = frozenset(changes["saving"])

        self._state = replace(self._state, **changes)
        snapshot = self._state
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.warning("State listener %r failed", listener, exc_info=True)
        return snapshot
