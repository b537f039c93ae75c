"""Configuration from environment."""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from unity_style_checker.config import StyleConfig, load_config

logger = logging.getLogger(__name__)

load_dotenv()


def get_host() -> str:
    return os.environ.get("HOST", "0.0.0.0").strip()


def get_port() -> int:
    try:
        return int(os.environ.get("PORT", "8000"))
    except ValueError:
        logger.warning("PORT is not a number; using 8000")
        return 8000


def get_config_path() -> Optional[Path]:
    """Path of the JSON checker configuration (STYLE_CHECKER_CONFIG), if set."""
    value = os.environ.get("STYLE_CHECKER_CONFIG", "").strip()
    return Path(value) if value else None


def get_style_config() -> StyleConfig:
    """Checker configuration for the service. Raises ConfigError if the configured file is invalid."""
    return load_config(get_config_path())
