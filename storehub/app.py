from __future__ import annotations

import logging
import os

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from .auth.dependencies import require_admin, require_same_user, require_user
from .auth.users import authenticate, list_users
from .stores.data_store import get_dataframe, search_stores, store_exists
from .stores.models import LoginRequest, RatingAck, RatingRequest, Store, User
from .stores.ratings import average_rating, ratings_for_store, record_rating

logger = logging.getLogger(__name__)

app = FastAPI(title="Store Rate Hub API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "store-rate-hub-secret-change-in-production"),
)


# ── Error bodies ─────────────────────────────────────────────────────────


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ())[1:]) or "request"
        problems.append(f"{field}: {err.get('msg', 'invalid value')}")
    return JSONResponse(status_code=422, content={"error": "; ".join(problems)})


def _store_out(row: dict) -> Store:
    store_id = str(row["id"])
    return Store(
        id=store_id,
        name=row["name"],
        address=row["address"],
        avg_rating=average_rating(store_id),
        rating_count=len(ratings_for_store(store_id)),
    )


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/stores/get", response_model=list[Store])
def stores_search(search: str = "") -> list[Store]:
    return [_store_out(row) for row in search_stores(search)]


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── User endpoints ───────────────────────────────────────────────────────


@app.post("/ratings", response_model=RatingAck)
def submit_rating(body: RatingRequest, user: dict = Depends(require_user)) -> RatingAck:
    require_same_user(user, body.user_id)
    if not store_exists(body.store_id):
        raise HTTPException(status_code=404, detail="Store not found")

    record_rating(body.store_id, body.user_id, body.rating)
    logger.info("Rating recorded: store=%s user=%s rating=%d", body.store_id, body.user_id, body.rating)
    return RatingAck(
        status="recorded",
        store_id=body.store_id,
        rating=body.rating,
        avg_rating=average_rating(body.store_id),
    )


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/auth/all", response_model=list[User])
def all_users(user: dict = Depends(require_admin)) -> list[User]:
    return [User(**u) for u in list_users()]


@app.get("/stores/all", response_model=list[Store])
def all_stores(user: dict = Depends(require_admin)) -> list[Store]:
    rows = get_dataframe()[["id", "name", "address"]].to_dict(orient="records")
    return [_store_out(row) for row in rows]
