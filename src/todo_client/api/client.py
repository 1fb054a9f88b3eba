# src/todo_client/api/client.py

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ApiError(RuntimeError):
    """A remote call failed (transport error, non-2xx status or unusable body)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(ApiError):
    """The server answered 2xx but the body is not what the contract promises."""


def _detail(response: httpx.Response) -> str:
    # FastAPI-style {"detail": "..."} when available, raw text otherwise.
    try:
        body = response.json()
    except ValueError:
        return response.text.strip()[:200]
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return response.text.strip()[:200]


def friendly_api_error_message(err: Exception) -> str:
    if isinstance(err, MalformedResponseError):
        return "The server sent an unexpected response."
    if isinstance(err, ApiError):
        code = err.status_code
        if code is None:
            return "Cannot reach the server. Check your connection and TODO_API_BASE_URL."
        if code == 401:
            return "Your session is no longer valid. Log in again."
        if code == 404:
            return "Not found on the server."
        if code >= 500:
            return f"Server error ({code}). Try again later."
        return str(err)
    return str(err).strip() or "Unexpected error."


class TodoApiClient:
    """
    Thin async wrapper over the todo backend.

    - One shared httpx.AsyncClient (base_url/timeout configured by the caller).
    - Authenticated endpoints take the bearer token explicitly; this class keeps no session state.
    - No retries: a failed call surfaces immediately as ApiError.
    """

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    async def aclose(self) -> None:
        await self._http.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        headers = {"Authorization": f"Bearer {token}"} if token else None

        try:
            response = await self._http.request(method, path, json=json, params=params, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.debug("API %s %s -> %s", method, path, status)
            raise ApiError(
                f"{method} {path} failed with {status}: {_detail(e.response)}",
                status_code=status,
            ) from e
        except httpx.RequestError as e:
            logger.warning("API %s %s transport error: %s", method, path, e.__class__.__name__)
            raise ApiError(f"{method} {path} failed: {e.__class__.__name__}") from e

        logger.debug("API %s %s -> %s", method, path, response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"{method} {path} returned a non-JSON body",
                status_code=response.status_code,
            ) from e

    # ---- auth ----

    async def login(self, email: str, password: str) -> Any:
        return await self.request("POST", "/login", json={"email": email, "password": password})

    async def login_google(self, id_token: str) -> Any:
        return await self.request("POST", "/login/google", json={"token": id_token})

    async def register(self, email: str, password: str) -> Any:
        return await self.request("POST", "/register", json={"email": email, "password": password})

    # ---- profile ----

    async def get_me(self, token: str) -> Any:
        return await self.request("GET", "/users/me", token=token)

    async def update_profile(self, token: str, fields: dict[str, Any]) -> Any:
        return await self.request("PUT", "/users/profile", token=token, json=fields)

    # ---- todos ----

    async def list_todos(self, token: str, *, skip: int, limit: int) -> Any:
        return await self.request("GET", "/todos/", token=token, params={"skip": skip, "limit": limit})

    async def create_todo(self, token: str, *, title: str, description: str | None) -> Any:
        body: dict[str, Any] = {"title": title}
        if description is not None:
            body["description"] = description
        return await self.request("POST", "/todos/", token=token, json=body)

    async def update_todo(self, token: str, todo_id: int, fields: dict[str, Any]) -> Any:
        return await self.request("PUT", f"/todos/{todo_id}", token=token, json=fields)

    async def delete_todo(self, token: str, todo_id: int) -> Any:
        return await self.request("DELETE", f"/todos/{todo_id}", token=token)
