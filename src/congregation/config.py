"""Configuration and environment handling for congregation-kit."""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


class Config:
    """Central configuration object."""

    def __init__(self):
        # Load .env file if it exists
        env_path = Path(__file__).parent.parent.parent / ".env"
        if env_path.exists():
            load_dotenv(env_path)

        # Upstream instance and credentials
        self.instance_url: Optional[str] = os.getenv("CONGREGATION_INSTANCE_URL")
        self.access_token: Optional[str] = os.getenv("CONGREGATION_ACCESS_TOKEN")

        # Apex REST routing
        self.api_prefix: str = os.getenv("CONGREGATION_API_PREFIX", "/services/apexrest")

        # Pagination
        self.page_size: int = int(os.getenv("CONGREGATION_PAGE_SIZE", "50"))

        # Transport
        self.timeout_s: float = float(os.getenv("CONGREGATION_TIMEOUT_S", "30"))
        self.max_retries: int = int(os.getenv("CONGREGATION_MAX_RETRIES", "3"))

        # Logging
        self.log_level: str = os.getenv("CONGREGATION_LOG_LEVEL", "INFO")


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a stream handler to the package logger.

    Args:
        level: Log level name; defaults to config.log_level

    Returns:
        The configured "congregation" logger
    """
    logger = logging.getLogger("congregation")
    logger.setLevel((level or config.log_level).upper())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(handler)
    return logger


# Global config instance
config = Config()
