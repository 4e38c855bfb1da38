from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, TypeVar

from pydantic import BaseModel

from ..stores.models import Store, User
from .errors import GatewayError
from .gateway import StoreGateway

logger = logging.getLogger(__name__)

Row = TypeVar("Row", bound=BaseModel)


@dataclass(frozen=True)
class AdminOverview:
    users: list[User] = field(default_factory=list)
    stores: list[Store] = field(default_factory=list)

    @property
    def total_users(self) -> int:
        return len(self.users)

    @property
    def total_stores(self) -> int:
        return len(self.stores)

    @property
    def total_ratings(self) -> int:
        return sum(s.rating_count for s in self.stores)


async def load_admin_overview(gateway: StoreGateway) -> AdminOverview:
    """
    Fetch the user and store tables side by side.

    A failing read is logged and leaves its table empty; the other table is
    still returned.
    """
    users, stores = await asyncio.gather(
        gateway.fetch_users(),
        gateway.fetch_all_stores(),
        return_exceptions=True,
    )
    return AdminOverview(users=_table("users", users), stores=_table("stores", stores))


def _table(label: str, result: Any) -> list:
    if isinstance(result, GatewayError):
        logger.warning("Failed to fetch %s: %s", label, result.message or result)
        return []
    if isinstance(result, Exception):
        logger.warning("Unexpected error fetching %s", label, exc_info=result)
        return []
    if isinstance(result, BaseException):
        raise result
    return result


def filter_rows(rows: Iterable[Row], text: str) -> list[Row]:
    """Keep rows where any field value contains ``text``, ignoring case."""
    needle = text.lower()
    return [
        row for row in rows
        if any(
            needle in str(value).lower()
            for value in row.model_dump().values()
            if value is not None
        )
    ]
