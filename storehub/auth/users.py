from __future__ import annotations

from typing import Any

import bcrypt

_users: dict[str, dict[str, Any]] = {}


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _public(username: str, record: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": record["id"],
        "username": username,
        "name": record["name"],
        "email": record["email"],
        "address": record["address"],
        "role": record["role"],
    }


def _seed_users() -> None:
    """Pre-seed demo users on import."""
    _users["user"] = {
        "id": "1",
        "name": "Demo User",
        "email": "user@example.com",
        "address": "12 Lake View Rd",
        "password_hash": _hash_password("user123"),
        "role": "user",
    }
    _users["owner"] = {
        "id": "2",
        "name": "Store Owner",
        "email": "owner@example.com",
        "address": "123 Main St",
        "password_hash": _hash_password("owner123"),
        "role": "owner",
    }
    _users["admin"] = {
        "id": "3",
        "name": "System Admin",
        "email": "admin@example.com",
        "address": "1 Admin Plaza",
        "password_hash": _hash_password("admin123"),
        "role": "admin",
    }


def authenticate(username: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns the public user record or ``None``."""
    record = _users.get(username)
    if record and _verify_password(password, record["password_hash"]):
        return _public(username, record)
    return None


def list_users() -> list[dict[str, Any]]:
    """Return every user without password hashes."""
    return [_public(username, record) for username, record in _users.items()]


_seed_users()
