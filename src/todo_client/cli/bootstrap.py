# src/todo_client/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the HTTP client, session and task store into AppState.
"""

from __future__ import annotations

import logging

import httpx

from ..api.client import TodoApiClient
from ..config import get_settings
from ..core.ports import IdentityProvider, TokenStorage
from ..core.state import AppState
from ..session.identity import ConsoleIdentityProvider
from ..session.manager import SessionManager
from ..session.token_storage import FileTokenStorage
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.token_store_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    http: httpx.AsyncClient | None = None,
    storage: TokenStorage | None = None,
    identity: IdentityProvider | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Every collaborator is injectable (tests pass an httpx client on a MockTransport,
    an in-memory storage and a scripted identity provider).
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if http is None:
        http = httpx.AsyncClient(base_url=settings.api_base_url, timeout=settings.http_timeout)
    if storage is None:
        storage = FileTokenStorage(settings.token_store_path)
    if identity is None:
        identity = ConsoleIdentityProvider(settings.google_client_id, settings.google_scopes)

    api = TodoApiClient(http)
    session = SessionManager(api, storage, identity)
    tasks = TaskStore(api, session, page_size=settings.tasks_page_size)

    logger.debug("State wired (api=%s)", settings.api_base_url)
    return AppState(settings=settings, api=api, session=session, tasks=tasks)
