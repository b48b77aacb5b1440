"""Configuration management for the Brandfolder client.

Values are resolved from environment variables first, then from the user
config file (``~/.config/pybrandfolder/config``), then from built-in
defaults. A ``.env`` file in the working directory is loaded on import.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values, load_dotenv, set_key

from .utils import DEFAULT_API_URL, DEFAULT_PER_PAGE, DEFAULT_REQUEST_LIMIT

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = "pybrandfolder"
CONFIG_FILE_NAME = "config"

API_KEY_VAR = "BRANDFOLDER_API_KEY"
API_URL_VAR = "BRANDFOLDER_API_URL"
BRANDFOLDER_ID_VAR = "BRANDFOLDER_ID"
COLLECTION_ID_VAR = "BRANDFOLDER_COLLECTION_ID"
PER_PAGE_VAR = "BRANDFOLDER_PER_PAGE"
REQUEST_LIMIT_VAR = "BRANDFOLDER_REQUEST_LIMIT"


def _parse_positive_int(value: Optional[str], name: str, default: int) -> int:
    """Parse a positive integer setting, falling back to the default."""
    if value is None or value == "":
        return default
    try:
        parsed = int(value)
    except ValueError:
        logger.warning(f"Invalid {name} value '{value}', using default {default}")
        return default
    if parsed < 1:
        logger.warning(f"{name} must be positive, got {parsed}, using default {default}")
        return default
    return parsed


class Config:
    """Resolves client settings from the environment and the config file."""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize configuration.

        Args:
            config_dir: Directory holding the config file
                (default: ~/.config/pybrandfolder)
        """
        self.config_dir = config_dir or Path.home() / ".config" / CONFIG_DIR_NAME
        self.config_file = self.config_dir / CONFIG_FILE_NAME

    def _file_values(self) -> dict[str, Optional[str]]:
        if not self.config_file.exists():
            return {}
        return dict(dotenv_values(self.config_file))

    def _get(self, name: str) -> Optional[str]:
        value = os.environ.get(name)
        if value:
            return value
        return self._file_values().get(name) or None

    def _save(self, name: str, value: str) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_file.touch(mode=0o600, exist_ok=True)
        set_key(str(self.config_file), name, value, quote_mode="never")
        logger.debug(f"Saved {name} to {self.config_file}")

    @property
    def api_key(self) -> Optional[str]:
        return self._get(API_KEY_VAR)

    @property
    def api_url(self) -> str:
        return (self._get(API_URL_VAR) or DEFAULT_API_URL).rstrip("/")

    @property
    def per_page(self) -> int:
        return _parse_positive_int(self._get(PER_PAGE_VAR), PER_PAGE_VAR, DEFAULT_PER_PAGE)

    @property
    def request_limit(self) -> int:
        return _parse_positive_int(
            self._get(REQUEST_LIMIT_VAR), REQUEST_LIMIT_VAR, DEFAULT_REQUEST_LIMIT
        )

    def is_configured(self) -> bool:
        """Check whether an API key is available."""
        return bool(self.api_key)

    def get_config_path(self) -> Path:
        """Get the path of the user config file."""
        return self.config_file

    def save_api_key(self, api_key: str) -> None:
        """Store the API key in the user config file."""
        self._save(API_KEY_VAR, api_key)

    def get_default_brandfolder(self) -> Optional[str]:
        """Get the brandfolder used when a call does not name one."""
        return self._get(BRANDFOLDER_ID_VAR)

    def save_default_brandfolder(self, brandfolder_id: str) -> None:
        """Store the default brandfolder ID in the user config file."""
        self._save(BRANDFOLDER_ID_VAR, brandfolder_id)

    def get_default_collection(self) -> Optional[str]:
        """Get the collection used when a call does not name one."""
        return self._get(COLLECTION_ID_VAR)


load_dotenv()

config = Config()
