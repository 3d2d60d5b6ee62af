import os
import sys
from pathlib import Path
from typing import Dict, Any, List, Mapping, Optional
from urllib.parse import urlparse

from wishlistwizard.core.logging import log
from wishlistwizard.core.errors import NoWishlistUrlError
from wishlistwizard.core.constants import (
    DEFAULT_USER_AGENT,
    MAC_CHROME_PATH,
    WISHLIST_URL_PREFIX,
)
from wishlistwizard.utils.file_io import safe_read_json


class ConfigManager:
    """Global configuration: defaults, an optional JSON file, then environment overrides."""

    APP_NAME = "wishlistwizard"
    CONFIG_DIR = Path.home() / f".{APP_NAME}"
    CONFIG_FILE = CONFIG_DIR / "config.json"

    DEFAULT_CONFIG = {
        "user_agent": DEFAULT_USER_AGENT,
        "chrome_path": None,
        "output_dir": None,
        "search_enabled": True,
    }

    @classmethod
    def load_config(cls, env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        """Load configuration and resolve headless mode from the environment."""
        config = cls.DEFAULT_CONFIG.copy()
        file_config = safe_read_json(cls.CONFIG_FILE, default={})
        if isinstance(file_config, dict):
            config.update(file_config)
        else:
            log(f"Ignoring {cls.CONFIG_FILE.name}: expected a JSON object.", level="warning")

        config["headless"] = cls.resolve_headless(env)
        if not config.get("chrome_path"):
            config["chrome_path"] = cls.resolve_chrome_path()
        return config

    @staticmethod
    def resolve_headless(env: Optional[Mapping[str, str]] = None) -> bool:
        env = os.environ if env is None else env
        return env.get("CI") == "true" or env.get("HEADLESS") == "true"

    @staticmethod
    def resolve_chrome_path(platform: Optional[str] = None) -> Optional[str]:
        """Prefer the system Chrome on macOS; None means Playwright's bundled Chromium."""
        platform = platform or sys.platform
        if platform == "darwin" and Path(MAC_CHROME_PATH).exists():
            return MAC_CHROME_PATH
        return None

    @staticmethod
    def validate_wishlist_url(url: str) -> str:
        """Accept only public Amazon.com wishlist URLs."""
        url = url.strip()
        parsed = urlparse(url)
        if parsed.scheme != "https" or not parsed.netloc:
            raise ValueError(f"Invalid URL: '{url}' - Must be an https URL.")
        if not url.startswith(WISHLIST_URL_PREFIX):
            raise ValueError(f"Invalid URL: '{url}' - Must start with {WISHLIST_URL_PREFIX}")
        return url

    @classmethod
    def parse_wishlist_urls(cls, raw: str) -> List[str]:
        """Split comma-separated input into valid wishlist URLs.

        Invalid entries are dropped with a warning. Raises NoWishlistUrlError
        when nothing usable remains.
        """
        urls = []
        for candidate in (raw or "").split(","):
            candidate = candidate.strip()
            if not candidate:
                continue
            try:
                urls.append(cls.validate_wishlist_url(candidate))
            except ValueError as e:
                log(str(e), level="warning")

        if not urls:
            raise NoWishlistUrlError("You must provide at least one valid Amazon wishlist URL.")
        return urls
