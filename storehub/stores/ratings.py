from __future__ import annotations

import time
from typing import Any

# (user_id, store_id) -> rating record; a user's newer rating replaces the older one
_ratings: dict[tuple[str, str], dict[str, Any]] = {}


def record_rating(store_id: str, user_id: str, rating: int) -> None:
    _ratings[(user_id, store_id)] = {
        "store_id": store_id,
        "user_id": user_id,
        "rating": rating,
        "timestamp": time.time(),
    }


def ratings_for_store(store_id: str) -> list[int]:
    return [r["rating"] for r in _ratings.values() if r["store_id"] == store_id]


def average_rating(store_id: str) -> float | None:
    values = ratings_for_store(store_id)
    if not values:
        return None
    return round(sum(values) / len(values), 2)


def clear_ratings() -> None:
    _ratings.clear()
