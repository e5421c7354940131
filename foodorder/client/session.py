"""
Client-side session: the logged-in profile cached in a local JSON file.

The server issues no tokens; the profile returned by login/register is
kept locally and reused until logout.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_SESSION_FILE = Path.home() / ".foodorder" / "session.json"


class ClientSession:
    """Cached user profile, persisted across client restarts."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else DEFAULT_SESSION_FILE
        self._user: Optional[dict[str, Any]] = self._load()

    def _load(self) -> Optional[dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning(f"Ignoring unreadable session file {self.path}")
            return None

    @property
    def user(self) -> Optional[dict[str, Any]]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def is_owner(self) -> bool:
        return bool(self._user) and self._user.get("role") == "owner"

    def login(self, user: dict[str, Any]) -> None:
        self._user = dict(user)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._user), encoding="utf-8")
        logger.debug(f"Session saved for {user.get('email')}")

    def logout(self) -> None:
        self._user = None
        if self.path.exists():
            self.path.unlink()
