"""
Application configuration and logging setup.

Configuration is read from environment variables, with a local .env file
loaded first when present.
"""

import logging
import os
import sys
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


DEFAULT_MEDIA_BUCKET = "player-media"
DEFAULT_TIMEOUT = 30.0
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Settings:
    """
    Connection settings for the hosted database and storage service.

    Attributes:
        supabase_url: Project base URL, e.g. https://xyz.supabase.co.
        anon_key: Public API key used for table reads and writes.
        service_role_key: Privileged key used for storage uploads.
        media_bucket: Storage bucket holding player media.
        request_timeout: Seconds before an HTTP request is abandoned.
        log_level: Root logging level name.
    """

    supabase_url: str = ""
    anon_key: str = ""
    service_role_key: Optional[str] = None
    media_bucket: str = DEFAULT_MEDIA_BUCKET
    request_timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.supabase_url = self.supabase_url.rstrip("/")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")

    @property
    def is_configured(self) -> bool:
        """Check if a backend is available; without one the app uses sample data."""
        return bool(self.supabase_url and self.anon_key)

    @property
    def rest_url(self) -> str:
        return f"{self.supabase_url}/rest/v1"

    @property
    def storage_url(self) -> str:
        return f"{self.supabase_url}/storage/v1"


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Build Settings from the environment.

    Args:
        env_file: Optional path of a .env file. Variables already set in the
            environment take precedence over the file.
    """
    load_dotenv(env_file)

    timeout = os.getenv("REQUEST_TIMEOUT")
    return Settings(
        supabase_url=os.getenv("SUPABASE_URL", ""),
        anon_key=os.getenv("SUPABASE_ANON_KEY", ""),
        service_role_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY") or None,
        media_bucket=os.getenv("MEDIA_BUCKET", DEFAULT_MEDIA_BUCKET),
        request_timeout=float(timeout) if timeout else DEFAULT_TIMEOUT,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def setup_logging(level: str = "INFO") -> None:
    """Send pitchnote log records to stdout at the given level."""
    logger = logging.getLogger("pitchnote")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    has_console = any(
        isinstance(h, logging.StreamHandler) and h.stream == sys.stdout
        for h in logger.handlers
    )
    if not has_console:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
