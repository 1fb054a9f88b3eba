# src/todo_client/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage and the identity provider swappable and makes testing easier.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

TokenListener = Callable[[str], Awaitable[None]]
# Called with the new bearer token whenever a session goes from "no token" to "token".


class TokenStorage(Protocol):
    """
    Durable key-value storage for the bearer token.

    Every call is awaited by the session, so a write is committed before
    the session treats a login as durable.
    """

    async def get(self, key: str) -> str | None: ...
    async def set(self, key: str, value: str) -> None: ...
    async def remove(self, key: str) -> None: ...


class IdentityProvider(Protocol):
    """
    Federated identity source (Google sign-in).

    Returns an ID token for the backend exchange, or None if the user
    cancelled or the provider yielded nothing.
    """

    async def sign_in(self) -> str | None: ...
