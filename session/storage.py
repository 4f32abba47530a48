"""File persistence for the dashboard session"""

import json
import logging
import os
import platform
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from settings import SESSION_FILE
from .models import SessionState, SESSION_STATE_VERSION

logger = logging.getLogger(__name__)


class SessionStorage:
    """Session file storage with restrictive file permissions"""

    def __init__(self, session_file: Optional[str] = None):
        self.session_path = Path(session_file if session_file else SESSION_FILE).expanduser()
        self._ensure_secure_directory()

    def _ensure_secure_directory(self):
        """Create parent directory with secure permissions"""
        parent_dir = self.session_path.parent
        if not parent_dir.exists():
            parent_dir.mkdir(parents=True, exist_ok=True)
            # Set directory permissions to 700 on Unix-like systems
            if platform.system() != "Windows":
                os.chmod(parent_dir, 0o700)

    def save(self, state: SessionState):
        """Write the session state to disk"""
        self._ensure_secure_directory()
        self.session_path.write_text(json.dumps(state.model_dump(), indent=2))

        if platform.system() != "Windows":
            os.chmod(self.session_path, 0o600)

        logger.debug(f"Saved session to {self.session_path}")

    def load(self) -> Optional[SessionState]:
        """Load the session from disk

        Returns:
            The stored state, or None if the file is missing or unreadable
        """
        if not self.session_path.exists():
            return None

        try:
            data = json.loads(self.session_path.read_text())
        except (json.JSONDecodeError, IOError) as e:
            logger.error(f"Failed to load session from {self.session_path}: {e}")
            return None

        if not isinstance(data, dict):
            logger.error(f"Ignoring malformed session file {self.session_path}")
            return None

        data = self._migrate(data)
        try:
            return SessionState.model_validate(data)
        except ValidationError as e:
            logger.error(f"Ignoring invalid session file {self.session_path}: {e}")
            return None

    def clear(self):
        """Remove the stored session"""
        if self.session_path.exists():
            self.session_path.unlink()
            logger.debug(f"Removed session file {self.session_path}")

    @staticmethod
    def _migrate(data: Dict[str, Any]) -> Dict[str, Any]:
        # Version 0 files predate the version key and used camelCase names
        version = data.get("version", 0)
        if version == 0:
            logger.info("Migrating session storage from v0 to v1")
            data = dict(data)
            if "refreshToken" in data and "refresh_token" not in data:
                data["refresh_token"] = data.pop("refreshToken")
            if "isAuthenticated" in data and "is_authenticated" not in data:
                data["is_authenticated"] = data.pop("isAuthenticated")
            data["version"] = SESSION_STATE_VERSION
        return data

    @property
    def session_file(self) -> Path:
        """Get the session file path"""
        return self.session_path
