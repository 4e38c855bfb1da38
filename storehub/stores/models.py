from __future__ import annotations

import math

from pydantic import BaseModel, Field, field_validator


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class User(BaseModel):
    id: str
    name: str
    email: str = ""
    address: str = ""
    role: str = "user"


class Store(BaseModel):
    id: str
    name: str
    address: str
    avg_rating: float | None = None
    rating_count: int = 0

    @field_validator("avg_rating", mode="before")
    @classmethod
    def _parse_avg_rating(cls, value: object) -> float | None:
        """Averages arrive as numbers, numeric strings or nothing at all."""
        if value is None or value == "":
            return None
        try:
            parsed = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
        return None if math.isnan(parsed) else parsed


class RatingRequest(BaseModel):
    store_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)


class RatingAck(BaseModel):
    status: str
    store_id: str
    rating: int
    avg_rating: float | None = None
