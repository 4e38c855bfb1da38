"""
Optimistic rating submission.

A click shows the new rating at once, before the API confirms it. While the
request is out, the store sits in ``ViewState.saving`` and further clicks on
that store are ignored. If the submission fails or is cancelled, the previous
value is restored; failures also surface a message as ``ViewState.notice``.
"""
from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Mapping

from .errors import GatewayError, NotAuthenticated
from .gateway import StoreGateway
from .session import Session
from .state import StateStore

logger = logging.getLogger(__name__)

LOGIN_REQUIRED_NOTICE = "Please login to rate stores!"
GENERIC_FAILURE_NOTICE = "Failed to submit rating. Please try again."
RATING_VALUES = range(1, 6)


def _is_rating_value(value: object) -> bool:
    # bool is an int subclass and 3.0 == 3, so range containment alone is too loose
    return isinstance(value, int) and not isinstance(value, bool) and value in RATING_VALUES


class RatingOutcome(str, Enum):
    confirmed = "confirmed"
    rolled_back = "rolled_back"
    ignored = "ignored"


class RatingController:
    def __init__(self, gateway: StoreGateway, store: StateStore, session: Session) -> None:
        self._gateway = gateway
        self._store = store
        self._session = session

    def seed(self, ratings: Mapping[str, int]) -> None:
        """Load ratings the user already gave, e.g. after login."""
        merged = dict(self._store.state.ratings)
        merged.update({k: v for k, v in ratings.items() if _is_rating_value(v)})
        self._store.commit(ratings=merged)

    def dismiss_notice(self) -> None:
        self._store.commit(notice=None)

    def _roll_back(self, store_id: str, previous: int, notice: str | None) -> None:
        ratings = dict(self._store.state.ratings)
        if previous:
            ratings[store_id] = previous
        else:
            ratings.pop(store_id, None)
        if notice is None:
            self._store.commit(ratings=ratings)
        else:
            self._store.commit(ratings=ratings, notice=notice)

    async def submit_rating(self, store_id: str, value: int) -> RatingOutcome:
        if not self._session.is_authenticated:
            self._store.commit(notice=LOGIN_REQUIRED_NOTICE)
            raise NotAuthenticated(LOGIN_REQUIRED_NOTICE)
        if not _is_rating_value(value):
            raise ValueError(f"rating must be an integer between 1 and 5, got {value!r}")
        user = self._session.user

        state = self._store.state
        if state.is_saving(store_id):
            logger.debug("Rating for store %s already in flight; ignoring %d", store_id, value)
            return RatingOutcome.ignored

        previous = state.rating_for(store_id)
        self._store.commit(
            saving=state.saving | {store_id},
            ratings={**state.ratings, store_id: value},
        )

        try:
            await self._gateway.submit_rating(store_id, user.id, value)
        except GatewayError as exc:
            logger.warning("Failed to submit rating %d for store %s: %s", value, store_id, exc.message or exc)
            self._roll_back(store_id, previous, exc.message or GENERIC_FAILURE_NOTICE)
            return RatingOutcome.rolled_back
        except asyncio.CancelledError:
            logger.debug("Rating submission for store %s cancelled; restoring %d", store_id, previous)
            self._roll_back(store_id, previous, None)
            raise
        except Exception:
            logger.warning("Unexpected error submitting rating for store %s", store_id, exc_info=True)
            self._roll_back(store_id, previous, GENERIC_FAILURE_NOTICE)
            return RatingOutcome.rolled_back
        finally:
            self._store.commit(saving=self._store.state.saving - {store_id})

        return RatingOutcome.confirmed
