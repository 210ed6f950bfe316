# bookstore_contracts/config.py
"""
Runtime settings read from the environment.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "https://demoqa.com"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 10.0
    rate_limit: float = 5.0
    max_concurrent: int = 4
    results_dir: str = "results"
    live: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            base_url=os.environ.get("BOOKSTORE_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            timeout=float(os.environ.get("BOOKSTORE_TIMEOUT", 10)),
            rate_limit=float(os.environ.get("BOOKSTORE_RATE_LIMIT", 5)),
            max_concurrent=int(os.environ.get("BOOKSTORE_MAX_CONCURRENT", 4)),
            results_dir=os.environ.get("BOOKSTORE_RESULTS_DIR", "results"),
            live=_env_flag("BOOKSTORE_LIVE"),
            log_level=os.environ.get("BOOKSTORE_LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure root logging once for a test session"""
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
