# src/todo_client/session/token_storage.py

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _load_json(path: Path) -> dict[str, Any]:
    raw = path.read_text("utf-8")
    val = json.loads(raw)
    if isinstance(val, dict):
        return val
    raise ValueError("Expected JSON object")


def _atomic_write_json(path: Path, data: dict[str, Any]) -> None:
    tmp = path.with_suffix(".tmp")
    tmp.write_text(json.dumps(data, ensure_ascii=False), "utf-8")
    os.replace(tmp, path)
    try:
        os.chmod(path, 0o600)
    except OSError:
        # Best-effort: not critical on Windows or restricted FS.
        logger.debug("chmod 600 failed for %s", path)


class FileTokenStorage:
    """
    Key-value token storage backed by a small JSON file.

    The file holds the bearer token, so it lives under the gitignored data dir
    and is kept private (0600). Writes are atomic (tmp file + os.replace), so a
    crash mid-write never leaves a truncated file behind.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def _read_all(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            return _load_json(self._path)
        except (OSError, ValueError) as e:
            # A corrupt file is the same as no stored session.
            logger.warning("Ignoring unreadable token store %s: %r", self._path, e)
            return {}

    async def get(self, key: str) -> str | None:
        val = self._read_all().get(key)
        return val if isinstance(val, str) and val else None

    async def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        _atomic_write_json(self._path, data)
        logger.debug("Token store updated: %s (key=%s)", self._path, key)

    async def remove(self, key: str) -> None:
        data = self._read_all()
        if key not in data:
            return
        del data[key]
        if data:
            _atomic_write_json(self._path, data)
        else:
            self._path.unlink(missing_ok=True)
        logger.debug("Token store key removed: %s (key=%s)", self._path, key)
