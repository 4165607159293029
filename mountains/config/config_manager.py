# mountains/config/config_manager.py
'''
config_manager.py - Configuration management for mountains
'''
from importlib.resources import files
import logging
import os
from pathlib import Path
from typing import Any, Optional, Tuple

import toml
from dotenv import find_dotenv, load_dotenv
from rich.console import Console


console = Console()

logger = logging.getLogger(__name__)

TURSO_URL_ENV = "TURSO_DATABASE_URL"
TURSO_TOKEN_ENV = "TURSO_AUTH_TOKEN"
DEFAULT_SYNC_INTERVAL = 240


def _resolve_base_dir() -> Path:
    env_home = os.getenv("MOUNTAINS_HOME", "").strip()
    if env_home:
        return Path(env_home).expanduser()
    return Path.home() / ".mountains"


BASE_DIR = _resolve_base_dir()
USER_CONFIG = BASE_DIR / "config.toml"

# the shipped defaults, read from package resources
DEFAULT_CONFIG = files("mountains.config") \
    .joinpath("config.toml") \
    .read_text(encoding="utf-8")


def load_config() -> dict:
    """
    Load the user configuration from USER_CONFIG file.
    - If the config directory or file does not exist, create them with defaults.
    - Returns a dict parsed from TOML; on error, logs and returns empty dict.
    """
    try:
        BASE_DIR.mkdir(parents=True, exist_ok=True)
        if not USER_CONFIG.exists():
            try:
                USER_CONFIG.write_text(DEFAULT_CONFIG, encoding="utf-8")
            except OSError as e:
                logger.error(
                    f"Failed to write default config to {USER_CONFIG}: {e}", exc_info=True)
        try:
            text = USER_CONFIG.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(
                f"Failed to read config file {USER_CONFIG}: {e}", exc_info=True)
            return {}
        try:
            return toml.loads(text)
        except toml.TomlDecodeError as e:
            logger.error(
                f"Failed to parse TOML from {USER_CONFIG}: {e}", exc_info=True)
            return {}
    except Exception as e:
        logger.error(f"Unexpected error in load_config: {e}", exc_info=True)
        return {}


def save_config(doc: dict) -> bool:
    """
    Save the given config dict to USER_CONFIG in TOML format.
    - On error, logs and returns False; otherwise returns True.
    """
    try:
        BASE_DIR.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(
            f"Failed to ensure config directory {BASE_DIR}: {e}", exc_info=True)
    try:
        toml_str = toml.dumps(doc)
    except Exception as e:
        logger.error(f"Failed to serialize config to TOML: {e}", exc_info=True)
        return False
    try:
        USER_CONFIG.write_text(toml_str, encoding="utf-8")
        return True
    except OSError as e:
        logger.error(
            f"Failed to write config to {USER_CONFIG}: {e}", exc_info=True)
        return False


def get_config_value(section: str, key: str, default=None) -> Any:
    """
    Return value for [section][key] in config, or default if missing.
    """
    try:
        config = load_config()
        return config.get(section, {}).get(key, default)
    except Exception as e:
        logger.error(
            f"Error getting config value for [{section}][{key}]: {e}", exc_info=True)
        return default


def set_config_value(section: str, key: str, value: Any) -> bool:
    """
    Set config[section][key] = value and persist.
    Returns True if saved successfully, False otherwise.
    """
    config = load_config()
    sec = config.get(section, {}) or {}
    sec[key] = value
    config[section] = sec
    success = save_config(config)
    if not success:
        logger.error(
            f"Failed to save config after setting [{section}][{key}]")
    return success


def load_env() -> None:
    """
    Pull remote credentials from a .env file if one exists, first in the
    working directory, then in BASE_DIR. Variables already set in the real
    environment always win.
    """
    load_dotenv(find_dotenv(usecwd=True), override=False)
    env_file = BASE_DIR / ".env"
    if env_file.exists():
        load_dotenv(env_file, override=False)


def get_remote_credentials() -> Optional[Tuple[str, str]]:
    """
    Return (url, token) for the remote replica, or None when either is missing.
    """
    url = os.getenv(TURSO_URL_ENV, "").strip()
    token = os.getenv(TURSO_TOKEN_ENV, "").strip()
    if not url or not token:
        return None
    return url, token


def get_sync_interval() -> int:
    """
    Seconds between periodic syncs. Falls back to the default on bad values.
    """
    val = get_config_value("sync", "interval_seconds", DEFAULT_SYNC_INTERVAL)
    try:
        interval = int(val)
    except (TypeError, ValueError):
        logger.warning(
            f"sync.interval_seconds is not an integer: {val!r}. Using {DEFAULT_SYNC_INTERVAL}.")
        return DEFAULT_SYNC_INTERVAL
    return interval if interval > 0 else DEFAULT_SYNC_INTERVAL


def get_log_level() -> str:
    return str(get_config_value("logging", "level", "INFO")).upper()


def is_markdown_backup_enabled() -> bool:
    return bool(get_config_value("backup", "markdown", True))
