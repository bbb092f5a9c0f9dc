"""Settings Manager - Handles backend URL, timeouts and admin credentials."""

import logging
import os
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

DEFAULT_API_URL = "http://localhost:8080/api"
DEFAULT_TIMEOUT_SECONDS = 10.0

logger = logging.getLogger(__name__)


class SettingsManager:
    """
    Manages application configuration.

    Reads values from a .env file in the project root; variables already
    present in the process environment take precedence.
    """

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            project_root: Path to project root where .env is located.
                         If None, searches upward from current file.
        """
        if project_root is None:
            current = Path(__file__).resolve()
            project_root = current.parent.parent.parent.parent

        env_path = project_root / ".env"
        load_dotenv(dotenv_path=env_path)

        self._project_root = project_root

    def get_api_base_url(self) -> str:
        """Get the REST API root, without a trailing slash."""
        url = _clean(os.getenv("CHINESE_LEARN_API_URL"))
        return (url or DEFAULT_API_URL).rstrip("/")

    def get_request_timeout(self) -> float:
        """Get the per-request timeout in seconds (positive number)."""
        raw = _clean(os.getenv("CHINESE_LEARN_TIMEOUT"))
        if raw is None:
            return DEFAULT_TIMEOUT_SECONDS
        try:
            value = float(raw)
        except ValueError:
            logger.warning("Ignoring invalid CHINESE_LEARN_TIMEOUT=%r", raw)
            return DEFAULT_TIMEOUT_SECONDS
        return value if value > 0 else DEFAULT_TIMEOUT_SECONDS

    def get_admin_credentials(self) -> Optional[Tuple[str, str]]:
        """Get the admin (username, password) pair, or None if not configured."""
        username = _clean(os.getenv("CHINESE_LEARN_ADMIN_USERNAME"))
        password = _clean(os.getenv("CHINESE_LEARN_ADMIN_PASSWORD"))
        if not username or not password:
            return None
        return username, password

    def get_log_level(self) -> str:
        level = _clean(os.getenv("CHINESE_LEARN_LOG_LEVEL"))
        return level.upper() if level else "INFO"

    def reload_env(self) -> None:
        """Reload environment variables from .env file."""
        env_path = self._project_root / ".env"
        load_dotenv(dotenv_path=env_path, override=True)


def _clean(value: Optional[str]) -> Optional[str]:
    return value.strip() if value and value.strip() else None
