"""
Runtime configuration for sniview.

The config file lives in the per-user config location:
  macOS:   ~/Library/Application Support/sniview/config.ini
  Windows: %APPDATA%\\sniview\\config.ini
  Linux:   ~/.config/sniview/config.ini

    [appliance]
    base_url = http://192.168.1.1:7000
    stream_path = /api/logs/stream
    request_timeout = 10

    [state]
    dir = ~/.config/sniview/state
    max_lines = 1000
"""

import configparser
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from sniview.core.exceptions import ConfigurationError
from sniview.core.limits import MAX_STORED_LINES

__all__ = ["AppConfig", "load_config", "user_app_dir", "APP_NAME", "BASE_URL_ENV"]

logger = logging.getLogger(__name__)

APP_NAME = "sniview"
BASE_URL_ENV = "SNIVIEW_BASE_URL"

DEFAULT_BASE_URL = "http://127.0.0.1:7000"
DEFAULT_STREAM_PATH = "/api/logs/stream"
DEFAULT_TIMEOUT = 10.0


@dataclass
class AppConfig:
    config_path: Path
    base_url: str
    stream_path: str
    state_dir: Path
    max_lines: int = MAX_STORED_LINES
    request_timeout: float = DEFAULT_TIMEOUT

    @property
    def stream_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.stream_path.lstrip('/')}"


def user_app_dir(app_name: str = APP_NAME) -> Path:
    """Per-user directory for config and state."""
    if sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    elif os.name == "nt":
        base = Path(os.environ.get("APPDATA", str(Path.home())))
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config")))
    return base / app_name


def _positive_int(raw: str, key: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}", config_key=key)
    if value <= 0:
        raise ConfigurationError(f"{key} must be positive, got {value}", config_key=key)
    return value


def _positive_float(raw: str, key: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}", config_key=key)
    if value <= 0:
        raise ConfigurationError(f"{key} must be positive, got {value}", config_key=key)
    return value


def load_config(
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    create: bool = True,
) -> AppConfig:
    """
    Load config.ini, creating it with defaults when absent.

    An unreadable file falls back to defaults. ``SNIVIEW_BASE_URL``
    overrides the configured appliance address.

    Args:
        config_path: Explicit config file (default: per-user location)
        env: Environment to read overrides from (default: os.environ)
        create: Write the defaults back when the file does not exist

    Raises:
        ConfigurationError: If a value is present but invalid
    """
    env = os.environ if env is None else env
    cfg_path = Path(config_path).expanduser() if config_path else user_app_dir() / "config.ini"

    cp = configparser.ConfigParser()
    existed = cfg_path.exists()
    if existed:
        try:
            cp.read(cfg_path, encoding="utf-8")
        except (configparser.Error, OSError, UnicodeDecodeError) as e:
            logger.warning("Ignoring unreadable config %s: %s", cfg_path, e)
            cp = configparser.ConfigParser()

    if "appliance" not in cp:
        cp["appliance"] = {}
    if "state" not in cp:
        cp["state"] = {}

    appliance = cp["appliance"]
    state = cp["state"]

    base_url = env.get(BASE_URL_ENV) or appliance.get("base_url", "").strip() or DEFAULT_BASE_URL
    stream_path = appliance.get("stream_path", "").strip() or DEFAULT_STREAM_PATH

    raw_timeout = appliance.get("request_timeout", "").strip()
    timeout = _positive_float(raw_timeout, "request_timeout") if raw_timeout else DEFAULT_TIMEOUT

    raw_dir = state.get("dir", "").strip()
    state_dir = Path(raw_dir).expanduser() if raw_dir else cfg_path.parent / "state"

    raw_max = state.get("max_lines", "").strip()
    max_lines = _positive_int(raw_max, "max_lines") if raw_max else MAX_STORED_LINES

    if create and not existed:
        appliance.setdefault("base_url", DEFAULT_BASE_URL)
        appliance.setdefault("stream_path", DEFAULT_STREAM_PATH)
        state.setdefault("max_lines", str(MAX_STORED_LINES))
        try:
            cfg_path.parent.mkdir(parents=True, exist_ok=True)
            with open(cfg_path, "w", encoding="utf-8", newline="\n") as f:
                cp.write(f)
        except OSError as e:
            logger.warning("Could not write default config %s: %s", cfg_path, e)

    return AppConfig(
        config_path=cfg_path,
        base_url=base_url,
        stream_path=stream_path,
        state_dir=state_dir,
        max_lines=max_lines,
        request_timeout=timeout,
    )
