# src/todo_client/session/manager.py

"""
Session manager: who is logged in, and with which bearer token.

Lifecycle:
- restore_session() is called once at startup (loads the stored token, fetches the profile),
- login / login_with_google store the token durably first, then adopt it in memory,
- any profile-fetch failure is treated as an invalid session and forces a logout.

Key invariants:
- user is never set while token is None,
- is_loaded flips to True once the startup restore attempt finishes (success or failure),
- token listeners fire only on a "no token" -> "token" transition.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from ..api.client import ApiError, MalformedResponseError, TodoApiClient
from ..core.errors import SessionRequiredError
from ..core.ports import IdentityProvider, TokenListener, TokenStorage
from .models import User, profile_payload

logger = logging.getLogger(__name__)

AUTH_TOKEN_KEY = "authToken"

# Status codes the backend uses for "wrong credentials / not allowed".
_REJECTION_CODES = {400, 401, 403}


class SessionManager:
    def __init__(
        self,
        api: TodoApiClient,
        storage: TokenStorage,
        identity: IdentityProvider | None = None,
    ) -> None:
        self._api = api
        self._storage = storage
        self._identity = identity

        self._token: str | None = None
        self._user: User | None = None
        self._registered_user: User | None = None
        self._loaded = False

        self._listeners: list[TokenListener] = []
        self._pending: set[asyncio.Task[None]] = set()

    # ---- state ----

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def registered_user(self) -> User | None:
        """Profile returned by the last successful register() (not a login)."""
        return self._registered_user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def require_token(self) -> str:
        if not self._token:
            raise SessionRequiredError()
        return self._token

    # ---- token listeners ----

    def add_token_listener(self, listener: TokenListener) -> None:
        self._listeners.append(listener)

    async def wait_for_listeners(self) -> None:
        """Wait until every scheduled token notification has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def _notify(self, listener: TokenListener, token: str) -> None:
        try:
            await listener(token)
        except Exception:
            logger.exception("Token listener %r failed", listener)

    def _set_token(self, token: str | None) -> None:
        previous = self._token
        self._token = token
        if token != previous:
            # A profile always belongs to the token it was fetched with.
            self._user = None

        if previous is None and token is not None:
            for listener in list(self._listeners):
                task = asyncio.create_task(self._notify(listener, token))
                self._pending.add(task)
                task.add_done_callback(self._pending.discard)

    # ---- lifecycle ----

    async def restore_session(self) -> None:
        try:
            stored = await self._storage.get(AUTH_TOKEN_KEY)
        except Exception:
            logger.exception("Failed to read stored token; starting logged out")
            stored = None

        if not stored:
            logger.info("No stored session.")
            self._loaded = True
            return

        logger.info("Restoring stored session...")
        self._set_token(stored)
        await self.fetch_profile(stored)

    async def fetch_profile(self, token: str) -> User | None:
        """
        Load the profile for `token`.

        Any failure means the token is unusable: the session is dropped.
        The result is ignored if the session moved to another token meanwhile.
        """
        try:
            data = await self._api.get_me(token)
            user = User.from_api(data)
        except Exception as e:
            if self._token == token:
                logger.warning("Failed to fetch user profile, logging out: %s", e)
                await self.logout()
            else:
                logger.info("Profile fetch for a stale token failed: %s", e)
            return None
        finally:
            self._loaded = True

        if self._token != token:
            logger.info("Session changed during profile fetch; ignoring result")
            return None

        self._user = user
        logger.info("Logged in as %s (id=%s)", user.email, user.id)
        return user

    # ---- auth ----

    def _log_auth_failure(self, what: str, err: Exception) -> None:
        if isinstance(err, ApiError) and err.status_code in _REJECTION_CODES:
            logger.info("%s rejected (%s)", what, err.status_code)
        elif isinstance(err, ApiError):
            logger.warning("%s failed: %s", what, err)
        else:
            logger.exception("%s crashed", what)

    async def _adopt_token(self, data: Any, *, source: str) -> bool:
        access_token = data.get("access_token") if isinstance(data, dict) else None
        if not isinstance(access_token, str) or not access_token:
            logger.warning("%s response has no access_token", source)
            return False

        # Durable first: a login only counts once the next start can see it.
        try:
            await self._storage.set(AUTH_TOKEN_KEY, access_token)
        except Exception:
            logger.exception("Failed to persist token after %s", source)
            return False

        self._set_token(access_token)
        await self.fetch_profile(access_token)
        return True

    async def login(self, email: str, password: str) -> bool:
        try:
            data = await self._api.login(email, password)
        except Exception as e:
            self._log_auth_failure("Login", e)
            return False
        return await self._adopt_token(data, source="login")

    async def register(self, email: str, password: str) -> bool:
        """Create an account. Does not log in; call login() afterwards."""
        try:
            data = await self._api.register(email, password)
            info = data.get("info") if isinstance(data, dict) else None
            user = User.from_api(info)
        except ApiError as e:
            if e.status_code == 400:
                logger.info("Email already registered: %s", email)
            else:
                logger.warning("Registration failed: %s", e)
            return False
        except ValueError as e:
            logger.warning("Invalid registration response: %s", e)
            return False
        except Exception:
            logger.exception("Registration crashed")
            return False

        self._registered_user = user
        logger.info("Registered %s (id=%s)", user.email, user.id)
        return True

    async def login_with_google(self) -> bool:
        if self._identity is None:
            logger.error("Google login requested but no identity provider is configured")
            return False

        try:
            id_token = await self._identity.sign_in()
        except Exception:
            logger.exception("Google sign-in failed")
            return False

        if not id_token:
            logger.error("No ID token received from Google")
            return False

        try:
            data = await self._api.login_google(id_token)
        except Exception as e:
            self._log_auth_failure("Google login", e)
            return False
        return await self._adopt_token(data, source="Google login")

    async def logout(self) -> None:
        was_active = self._token is not None
        self._user = None
        self._token = None
        await self._storage.remove(AUTH_TOKEN_KEY)
        if was_active:
            logger.info("Logged out.")

    # ---- profile ----

    async def update_profile(self, fields: Mapping[str, Any]) -> User:
        token = self.require_token()
        payload = profile_payload(fields)

        try:
            data = await self._api.update_profile(token, payload)
        except ApiError as e:
            logger.error("Error updating profile: %s", e)
            raise

        try:
            user = User.from_api(data)
        except ValueError as e:
            raise MalformedResponseError(f"Invalid profile in response: {e}") from e

        if self._token == token:
            self._user = user
        return user
