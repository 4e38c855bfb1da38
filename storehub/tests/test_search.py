from __future__ import annotations

import asyncio

from storehub.client.errors import NetworkError
from storehub.client.search import SearchController
from storehub.client.state import StateStore
from storehub.stores.models import Store

DELAY = 0.02

CAFE = Store(id="1", name="Sunrise Cafe", address="123 Main St", avg_rating=4.5)
BOOKS = Store(id="2", name="Book Nook", address="456 Oak Ave", avg_rating=3.8)


class _FakeGateway:
    """Each query answers when the test resolves or fails its future."""

    def __init__(self):
        self.calls: list[str] = []
        self.replies: dict[str, asyncio.Future] = {}

    def expect(self, query: str) -> asyncio.Future:
        fut = asyncio.get_running_loop().create_future()
        self.replies[query] = fut
        return fut

    async def fetch_stores(self, search: str) -> list[Store]:
        self.calls.append(search)
        if search not in self.replies:
            self.expect(search)
        return await self.replies[search]


def _setup():
    gateway = _FakeGateway()
    state = StateStore()
    return gateway, state, SearchController(gateway, state, delay=DELAY)


def test_rapid_edits_dispatch_one_fetch_for_last_text():
    async def run():
        gateway, state, controller = _setup()
        controller.on_query_changed("a")
        controller.on_query_changed("ab")
        await asyncio.sleep(0)
        controller.on_query_changed("abc")
        assert controller.armed
        assert gateway.calls == []

        await asyncio.sleep(DELAY * 5)
        assert gateway.calls == ["abc"]
        assert state.state.loading is True

        gateway.replies["abc"].set_result([CAFE])
        await controller.drain()
        return state.state, controller.generation

    final, generation = asyncio.run(run())
    assert final.stores == (CAFE,)
    assert final.loading is False
    assert final.query == "abc"
    assert generation == 1


def test_late_response_for_older_query_is_dropped():
    async def run():
        gateway, state, controller = _setup()
        x_reply = gateway.expect("x")
        y_reply = gateway.expect("y")

        controller.on_query_changed("x")
        task_x = controller.refresh()
        await asyncio.sleep(0)
        controller.on_query_changed("y")
        task_y = controller.refresh()
        await asyncio.sleep(0)
        assert gateway.calls == ["x", "y"]

        y_reply.set_result([BOOKS])
        await task_y
        after_y = state.state

        x_reply.set_result([CAFE])
        await task_x
        return after_y, state.state

    after_y, final = asyncio.run(run())
    assert after_y.stores == (BOOKS,)
    assert final.stores == (BOOKS,)
    assert final.loading is False


def test_stale_failure_keeps_loading_for_newer_fetch():
    async def run():
        gateway, state, controller = _setup()
        x_reply = gateway.expect("x")
        y_reply = gateway.expect("y")

        controller.on_query_changed("x")
        task_x = controller.refresh()
        await asyncio.sleep(0)
        controller.on_query_changed("y")
        task_y = controller.refresh()
        await asyncio.sleep(0)

        x_reply.set_exception(NetworkError("timed out"))
        await task_x
        loading_after_stale_failure = state.state.loading

        y_reply.set_result([BOOKS])
        await task_y
        return loading_after_stale_failure, state.state

    loading_after_stale_failure, final = asyncio.run(run())
    assert loading_after_stale_failure is True
    assert final.loading is False
    assert final.stores == (BOOKS,)


def test_failed_fetch_keeps_visible_list():
    async def run():
        gateway, state, controller = _setup()
        gateway.expect("").set_result([CAFE, BOOKS])
        await controller.refresh()

        gateway.expect("zzz").set_exception(NetworkError("connection reset"))
        controller.on_query_changed("zzz")
        await asyncio.sleep(DELAY * 5)
        await controller.drain()
        return gateway.calls, state.state

    calls, final = asyncio.run(run())
    assert calls == ["", "zzz"]
    assert final.stores == (CAFE, BOOKS)
    assert final.loading is False


def test_edit_while_fetching_rearms_and_supersedes():
    async def run():
        gateway, state, controller = _setup()
        first = gateway.expect("sun")
        gateway.expect("sunset").set_result([BOOKS])

        controller.on_query_changed("sun")
        await asyncio.sleep(DELAY * 5)
        assert gateway.calls == ["sun"]

        controller.on_query_changed("sunset")
        assert controller.armed
        await asyncio.sleep(DELAY * 5)
        await asyncio.sleep(0)

        first.set_result([CAFE])
        await controller.drain()
        return gateway.calls, state.state, controller.generation

    calls, final, generation = asyncio.run(run())
    assert calls == ["sun", "sunset"]
    assert final.stores == (BOOKS,)
    assert generation == 2


def test_cancel_disarms_timer():
    async def run():
        gateway, state, controller = _setup()
        controller.on_query_changed("cafe")
        controller.cancel()
        await asyncio.sleep(DELAY * 5)
        return gateway.calls, controller.armed, state.state.loading

    calls, armed, loading = asyncio.run(run())
    assert calls == []
    assert armed is False
    assert loading is False


def test_unexpected_gateway_error_clears_loading_and_keeps_list():
    async def run():
        gateway, state, controller = _setup()
        gateway.expect("").set_result([CAFE])
        await controller.refresh()

        gateway.expect("slow").set_exception(TimeoutError())
        controller.on_query_changed("slow")
        await controller.refresh()
        return state.state

    final = asyncio.run(run())
    assert final.loading is False
    assert final.stores == (CAFE,)
