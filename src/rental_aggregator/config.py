"""Configuration loader for the rental aggregator."""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .utils.http import DEFAULT_USER_AGENT

MIN_POLITENESS_DELAY = 0.2

DEFAULT_CONFIG: Dict[str, Any] = {
    "scraper": {
        "user_agent": DEFAULT_USER_AGENT,
        "accept_language": "nl-NL,nl;q=0.9,en;q=0.8",
        "index_timeout": 30,
        "detail_timeout": 15,
        "politeness_delay": 0.25,
        "max_listings": 15,
        "index_retries": 2,
    },
    "extraction": {
        "price_min": 400,
        "price_max": 3500,
        "date_fallback_days": 14,
    },
    "agencies": {
        "enabled": [],  # empty = all registered agencies
    },
    "notifications": {
        "enabled": False,
        "recipients": [],
    },
    "schedule": {
        "refresh_interval_minutes": 10,
    },
}


def load_config(config_path: Optional[str] = "./config/config.yaml") -> Dict[str, Any]:
    """
    Load configuration from YAML file and environment variables.

    Values from the file are merged over DEFAULT_CONFIG. With
    ``config_path=None`` the defaults are used as-is.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Dictionary containing merged configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid
    """
    # Load environment variables from .env file
    load_dotenv()

    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is not None:
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {config_path}\n"
                f"Copy config/config.example.yaml to config/config.yaml and customize it."
            )

        with open(config_file, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Configuration root must be a mapping: {config_path}")
        config = merge_config(config, loaded)

    user_agent = get_env("SCRAPER_USER_AGENT")
    if user_agent:
        config["scraper"]["user_agent"] = user_agent

    validate_config(config)
    return config


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def validate_config(config: Dict[str, Any]) -> None:
    """Validate configuration structure."""
    required_sections = ["scraper", "extraction", "agencies", "notifications"]
    for section in required_sections:
        if not isinstance(config.get(section), dict):
            raise ValueError(f"Missing required config section: {section}")

    extraction = config["extraction"]
    if extraction["price_min"] < 0 or extraction["price_max"] < extraction["price_min"]:
        raise ValueError(
            f"Invalid price band: {extraction['price_min']}-{extraction['price_max']}"
        )
    if extraction["date_fallback_days"] < 0:
        raise ValueError("date_fallback_days must be >= 0")

    scraper = config["scraper"]
    delay = scraper["politeness_delay"]
    # 0 is allowed for tests and local fixtures
    if delay != 0 and delay < MIN_POLITENESS_DELAY:
        raise ValueError(f"politeness_delay must be at least {MIN_POLITENESS_DELAY}s, got {delay}")
    if scraper["max_listings"] < 1:
        raise ValueError("max_listings must be at least 1")
    for key in ("index_timeout", "detail_timeout"):
        if scraper[key] <= 0:
            raise ValueError(f"{key} must be positive")

    enabled = config["agencies"].get("enabled") or []
    if not isinstance(enabled, list):
        raise ValueError("agencies.enabled must be a list of adapter names")

    recipients = config["notifications"].get("recipients") or []
    if config["notifications"].get("enabled") and not recipients:
        raise ValueError("Notifications enabled but no recipients configured")


def get_env(key: str, default: str = None, required: bool = False) -> str:
    """
    Get environment variable with optional default and required check.

    Args:
        key: Environment variable name
        default: Default value if not set
        required: If True, raise error when not set

    Returns:
        Environment variable value

    Raises:
        ValueError: If required and not set
    """
    value = os.getenv(key, default)
    if required and not value:
        raise ValueError(f"Required environment variable not set: {key}")
    return value
