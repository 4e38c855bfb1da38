from __future__ import annotations

from fastapi import HTTPException, Request


def _session_user(request: Request) -> dict:
    user = request.session.get("user")
    if not user:
        raise HTTPException(status_code=401, detail="Please login to continue")
    return user


def require_user(request: Request) -> dict:
    """Raise 401 if no user is logged in."""
    return _session_user(request)


def require_admin(request: Request) -> dict:
    """Raise 401 if not logged in, 403 if the user is not an admin."""
    user = _session_user(request)
    if user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


def require_same_user(user: dict, user_id: str) -> None:
    """Raise 403 when a request acts on behalf of another account."""
    if str(user.get("id")) != str(user_id):
        raise HTTPException(status_code=403, detail="You can only rate stores as yourself")
