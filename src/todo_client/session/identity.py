# src/todo_client/session/identity.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class ConsoleIdentityProvider:
    """
    Google sign-in for a terminal session.

    A console has no embedded browser, so the user signs in with Google
    elsewhere (any OAuth client configured with TODO_GOOGLE_CLIENT_ID) and
    pastes the resulting ID token here. Empty input counts as "cancelled".
    """

    def __init__(
        self,
        client_id: str | None,
        scopes: list[str],
        *,
        prompt: Callable[[str], str] = input,
        emit: Callable[[str], None] = print,
    ) -> None:
        self._client_id = client_id
        self._scopes = list(scopes)
        self._prompt = prompt
        self._emit = emit

    async def sign_in(self) -> str | None:
        if not self._client_id:
            logger.error("Google sign-in is not configured: set TODO_GOOGLE_CLIENT_ID")
            return None

        self._emit(
            "Sign in with Google using client id "
            f"{self._client_id} (scopes: {' '.join(self._scopes)}) and paste the ID token."
        )
        raw = await asyncio.to_thread(self._prompt, "Google ID token: ")
        token = (raw or "").strip()
        return token or None
