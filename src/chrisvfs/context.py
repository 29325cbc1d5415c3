"""Persistent session context: CUBE URL, user, token and working directory."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from chrisvfs.paths import ROOT, resolve_path

logger = logging.getLogger(__name__)


class ChrisContext:
    """Session state kept between command invocations.

    Stored as JSON. A missing or unreadable file is an empty context.
    """

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path) if path else None
        self.url: str | None = None
        self.username: str | None = None
        self.token: str | None = None
        self._cwd: str | None = None
        self._loaded = False

    @property
    def path(self) -> Path | None:
        return self._path

    def load(self) -> ChrisContext:
        """Load the context from disk (once)."""
        if self._loaded or not self._path:
            return self
        self._loaded = True
        if not self._path.exists():
            return self
        try:
            data = json.loads(self._path.read_text())
        except Exception as e:
            logger.warning(f"Failed to load context: {e}")
            return self
        if isinstance(data, dict):
            self.url = data.get("url") or None
            self.username = data.get("username") or None
            self.token = data.get("token") or None
            self._cwd = data.get("cwd") or None
        return self

    def save(self) -> None:
        """Write the context to disk."""
        if not self._path:
            return
        payload = {
            "url": self.url,
            "username": self.username,
            "token": self.token,
            "cwd": self._cwd,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, indent=2))
        except Exception as e:
            logger.warning(f"Failed to save context: {e}")

    @property
    def home(self) -> str:
        """The user's home folder, or the root when nobody is logged in."""
        return f"/home/{self.username}" if self.username else ROOT

    @property
    def cwd(self) -> str:
        """Current virtual working directory."""
        return self._cwd or self.home

    def resolve(self, path: str) -> str:
        """Resolve ``path`` against the current working directory."""
        return resolve_path(path, self.cwd)

    def set_cwd(self, path: str) -> None:
        """Store an already resolved absolute path as the working directory."""
        self._cwd = path.rstrip("/") or ROOT
        self.save()

    def set_session(self, url: str, username: str, token: str) -> None:
        """Record a successful login. The working directory moves to home."""
        self.url = url
        self.username = username
        self.token = token
        self._cwd = None
        self.save()

    def clear_session(self) -> None:
        """Forget the token and working directory (keeps the URL)."""
        self.username = None
        self.token = None
        self._cwd = None
        self.save()
