"""
Debounced store search.

Every edit restarts a quiet-period timer; only when it fires is a fetch
dispatched. Each dispatch takes the next generation number and a response is
applied only if its generation is still the newest one. Requests already on
the wire are never cancelled, their results are simply dropped once stale.
"""
from __future__ import annotations

import asyncio
import logging

from .config import DEFAULT_CLIENT_CONFIG
from .errors import GatewayError
from .gateway import StoreGateway
from .state import StateStore

logger = logging.getLogger(__name__)


class SearchController:
    def __init__(
        self,
        gateway: StoreGateway,
        store: StateStore,
        delay: float = DEFAULT_CLIENT_CONFIG.search_debounce_seconds,
    ) -> None:
        self._gateway = gateway
        self._store = store
        self._delay = delay
        self._query = store.state.query
        self._timer: asyncio.TimerHandle | None = None
        self._generation = 0
        self._pending: set[asyncio.Task] = set()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def armed(self) -> bool:
        return self._timer is not None

    def on_query_changed(self, text: str) -> None:
        """Record new search text and restart the quiet-period timer."""
        self.cancel()
        self._query = text
        self._store.commit(query=text)
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._delay, self.on_timer_fires)

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def on_timer_fires(self) -> asyncio.Task:
        self._timer = None
        return self._dispatch()

    def refresh(self) -> asyncio.Task:
        """Fetch the current query right away, skipping the quiet period."""
        self.cancel()
        return self._dispatch()

    def _dispatch(self) -> asyncio.Task:
        self._generation += 1
        generation = self._generation
        self._store.commit(loading=True)

        task = asyncio.get_running_loop().create_task(self._fetch(generation, self._query))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _fetch(self, generation: int, query: str) -> None:
        try:
            stores = await self._gateway.fetch_stores(query)
        except GatewayError as exc:
            logger.warning("Error fetching stores for %r: %s", query, exc.message or exc)
            if generation == self._generation:
                self._store.commit(loading=False)
            return
        except Exception:
            logger.warning("Unexpected error fetching stores for %r", query, exc_info=True)
            if generation == self._generation:
                self._store.commit(loading=False)
            return

        if generation != self._generation:
            logger.debug("Dropping stale results for %r (generation %d < %d)", query, generation, self._generation)
            return
        self._store.commit(stores=stores, loading=False)

    async def drain(self) -> None:
        """Wait until every dispatched fetch has settled."""
        while self._pending:
            await asyncio.gather(*list(self._pending))
