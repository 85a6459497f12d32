"""
Auth token store.

Persists the bearer token and signed-in user in a small JSON key-value file and
serves as the SessionAccessor for the invoker.
"""

import json
import logging
import os
import threading
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from pydantic import ValidationError

from edgecall.invoker.models.session import Session

logger = logging.getLogger("edgecall.session_store")

AUTH_KEY = "auth"
USER_KEY = "user"
EXPIRES_AT_KEY = "expires_at"


class SessionAccessor(Protocol):
    async def get_session(self) -> Optional[Session]: ...


class AuthStatus(str, Enum):
    IDLE = "idle"
    SIGN_IN = "signIn"
    SIGN_OUT = "signOut"


class AuthTokenStore:
    """
    File-backed auth state.

    Reads may run concurrently from many invocations; writes replace the whole
    file atomically.
    """

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()
        self.auth: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None
        self.expires_at: Optional[datetime] = None
        self.status = AuthStatus.IDLE
        self.is_loading = True
        self._lock = threading.Lock()

    async def get_session(self) -> Optional[Session]:
        """Current session, or None when signed out or expired."""
        if not self.auth:
            return None
        try:
            session = Session(access_token=self.auth, expires_at=self.expires_at)
        except ValidationError:
            return None
        if session.is_expired():
            logger.info("Stored session has expired")
            return None
        return session

    def sign_in(
        self, auth: str, user: Dict[str, Any], expires_at: Optional[datetime] = None
    ) -> None:
        self._write(
            {
                AUTH_KEY: auth,
                USER_KEY: user,
                EXPIRES_AT_KEY: expires_at.isoformat() if expires_at else None,
            }
        )
        self.auth = auth
        self.user = user
        self.expires_at = expires_at
        self.status = AuthStatus.SIGN_IN
        self.is_loading = False
        logger.info("Signed in", extra={"user_id": user.get("id")})

    def sign_out(self) -> None:
        with self._lock:
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass
        self.auth = None
        self.user = None
        self.expires_at = None
        self.status = AuthStatus.SIGN_OUT
        self.is_loading = False
        logger.info("Signed out")

    def hydrate(self) -> AuthStatus:
        """Restore state from disk. Unreadable files leave the store signed out."""
        self.is_loading = True
        try:
            data = self._read()
            auth = data.get(AUTH_KEY)
            user = data.get(USER_KEY)
            expires_at = data.get(EXPIRES_AT_KEY)
            if auth and user:
                self.auth = auth
                self.user = user
                self.expires_at = datetime.fromisoformat(expires_at) if expires_at else None
                self.status = AuthStatus.SIGN_IN
            else:
                self._clear_memory()
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.error(f"Error hydrating auth: {e}")
            self._clear_memory()
        self.is_loading = False
        return self.status

    def set_user(self, user: Dict[str, Any]) -> None:
        self.user = user
        data = self._read() if self.path.exists() else {}
        data[USER_KEY] = user
        self._write(data)

    def _clear_memory(self) -> None:
        self.auth = None
        self.user = None
        self.expires_at = None
        self.status = AuthStatus.SIGN_OUT

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Auth store {self.path} does not hold an object")
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
