from __future__ import annotations

import abc
import logging
from typing import Any

import httpx
from pydantic import ValidationError as ModelValidationError

from ..stores.models import RatingAck, Store, User
from .config import DEFAULT_CLIENT_CONFIG, ClientConfig
from .errors import NetworkError, ServerError, ValidationError

logger = logging.getLogger(__name__)


class StoreGateway(abc.ABC):
    """Network boundary consumed by the search and rating controllers."""

    @abc.abstractmethod
    async def fetch_stores(self, search: str) -> list[Store]:
        ...

    @abc.abstractmethod
    async def submit_rating(self, store_id: str, user_id: str, value: int) -> RatingAck:
        ...

    @abc.abstractmethod
    async def fetch_users(self) -> list[User]:
        ...

    @abc.abstractmethod
    async def fetch_all_stores(self) -> list[Store]:
        ...


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        message = body.get("error") or body.get("detail")
        if message:
            return str(message)
    return ""


class HttpStoreGateway(StoreGateway):
    """
    ``StoreGateway`` over the Store Rate HTTP API.

    The underlying ``httpx.AsyncClient`` keeps the session cookie returned by
    ``login``, so rating submissions and admin reads run as that user.
    """

    def __init__(
        self,
        config: ClientConfig = DEFAULT_CLIENT_CONFIG,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(base_url=config.base_url, timeout=config.timeout)

    async def __aenter__(self) -> HttpStoreGateway:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise NetworkError(str(exc) or exc.__class__.__name__) from exc

        if response.status_code >= 500:
            raise ServerError(_error_message(response), status_code=response.status_code)
        if response.status_code >= 400:
            raise ValidationError(_error_message(response), status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise ServerError("Response body is not valid JSON", status_code=response.status_code) from exc

    @staticmethod
    def _parse(model: type, payload: Any) -> Any:
        try:
            if isinstance(payload, list):
                return [model.model_validate(item) for item in payload]
            return model.model_validate(payload)
        except ModelValidationError as exc:
            raise ServerError(f"Unexpected {model.__name__} payload: {exc}") from exc

    async def login(self, username: str, password: str) -> User:
        payload = await self._request("POST", "/auth/login", json={"username": username, "password": password})
        user = self._parse(User, payload.get("user") if isinstance(payload, dict) else None)
        logger.info("Logged in as %s (%s)", user.name, user.role)
        return user

    async def logout(self) -> None:
        await self._request("POST", "/auth/logout")

    async def fetch_stores(self, search: str) -> list[Store]:
        payload = await self._request("GET", "/stores/get", params={"search": search})
        if not isinstance(payload, list):
            raise ServerError("Expected a list of stores")
        return self._parse(Store, payload)

    async def submit_rating(self, store_id: str, user_id: str, value: int) -> RatingAck:
        payload = await self._request(
            "POST",
            "/ratings",
            json={"store_id": store_id, "user_id": user_id, "rating": value},
        )
        return self._parse(RatingAck, payload)

    async def fetch_users(self) -> list[User]:
        payload = await self._request("GET", "/auth/all")
        if not isinstance(payload, list):
            raise ServerError("Expected a list of users")
        return self._parse(User, payload)

    async def fetch_all_stores(self) -> list[Store]:
        payload = await self._request("GET", "/stores/all")
        if not isinstance(payload, list):
            raise ServerError("Expected a list of stores")
        return self._parse(Store, payload)
