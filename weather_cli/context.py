"""
Application context: built once at startup, passed to every handler.

Holds the ConfigStore and the process-level options read from the
environment (and `.env`, loaded by the CLI before this runs).

Environment:
    WEATHER_CONFIG_FILE  - path of the settings JSON file
    WEATHER_LOG_DIR      - directory for rotating log files
    WEATHER_GRPC_TARGET  - host:port of the mock gRPC server
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from weather_cli.config_store import ConfigStore

logger = logging.getLogger(__name__)

APP_NAME = "weather-cli"
CONFIG_FILE_NAME = "config.json"

CONFIG_FILE_ENV_VAR = "WEATHER_CONFIG_FILE"
LOG_DIR_ENV_VAR = "WEATHER_LOG_DIR"
GRPC_TARGET_ENV_VAR = "WEATHER_GRPC_TARGET"


def _platform_config_dir() -> Path:
    home = Path.home()
    if sys.platform == "win32":
        return Path(os.getenv("APPDATA") or home / "AppData" / "Roaming")
    if sys.platform == "darwin":
        return home / "Library" / "Application Support"
    return Path(os.getenv("XDG_CONFIG_HOME") or home / ".config")


def _platform_data_dir() -> Path:
    home = Path.home()
    if sys.platform == "win32":
        return Path(os.getenv("LOCALAPPDATA") or home / "AppData" / "Local")
    if sys.platform == "darwin":
        return home / "Library" / "Application Support"
    return Path(os.getenv("XDG_DATA_HOME") or home / ".local" / "share")


def resolve_config_file() -> Path:
    """$WEATHER_CONFIG_FILE, else <config dir>/weather-cli/config.json."""
    override = os.getenv(CONFIG_FILE_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return _platform_config_dir() / APP_NAME / CONFIG_FILE_NAME


def resolve_log_dir() -> Path:
    """$WEATHER_LOG_DIR, else <data dir>/weather-cli/logs."""
    override = os.getenv(LOG_DIR_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return _platform_data_dir() / APP_NAME / "logs"


@dataclass
class AppContext:
    """Everything a command needs: the config store plus provider options."""
    config: ConfigStore
    grpc_target: Optional[str] = None
    # Forwarded to every backend, e.g. an httpx `transport` for the HTTP ones
    provider_options: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "AppContext":
        config_file = resolve_config_file()
        logger.debug(f"[AppContext] Config file: {config_file}")
        return cls(
            config=ConfigStore.open(config_file),
            grpc_target=os.getenv(GRPC_TARGET_ENV_VAR),
        )

    def fetch_options(self) -> Dict[str, Any]:
        """Extra keyword arguments forwarded to providers.fetch_weather()."""
        options = dict(self.provider_options)
        if self.grpc_target:
            options.setdefault("target", self.grpc_target)
        return options


__all__ = [
    "AppContext",
    "resolve_config_file",
    "resolve_log_dir",
    "APP_NAME",
]
