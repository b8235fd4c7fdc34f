"""Configuration persistence: load and save user preferences."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from paper_network.models import (
    CONFIG_APP_NAME,
    DEFAULT_FALLBACK_TITLE,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    GraphPolicy,
)
from paper_network.themes import THEME_NAMES

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"
MAX_REQUEST_TIMEOUT_SECONDS = 300


@dataclass(slots=True)
class UserConfig:
    """User preferences. Selection state is never persisted."""

    data_source: str = ""  # Base URL or directory; empty = current directory
    fallback_title: str = DEFAULT_FALLBACK_TITLE
    allow_recenter_on_node_click: bool = True
    request_timeout_seconds: int = DEFAULT_REQUEST_TIMEOUT_SECONDS
    theme_name: str = "monokai"
    version: int = 1
    config_defaulted: bool = False  # Runtime only: the file on disk was unusable

    def graph_policy(self) -> GraphPolicy:
        return GraphPolicy(
            fallback_title=self.fallback_title,
            allow_recenter_on_node_click=self.allow_recenter_on_node_click,
        )


def get_config_path() -> Path:
    """Get the path to the configuration file.

    Uses platformdirs for cross-platform config directory:
    - Linux: ~/.config/paper-network/config.json
    - macOS: ~/Library/Application Support/paper-network/config.json
    - Windows: %APPDATA%/paper-network/config.json
    """
    config_dir = Path(user_config_dir(CONFIG_APP_NAME))
    return config_dir / CONFIG_FILENAME


def _config_to_dict(config: UserConfig) -> dict[str, Any]:
    """Serialize UserConfig to a JSON-compatible dictionary."""
    return {
        "version": config.version,
        "data_source": config.data_source,
        "fallback_title": config.fallback_title,
        "allow_recenter_on_node_click": config.allow_recenter_on_node_click,
        "request_timeout_seconds": _coerce_request_timeout(config.request_timeout_seconds),
        "theme_name": config.theme_name,
    }


def _safe_get(data: dict, key: str, default: Any, expected_type: type) -> Any:
    """Safely get a value from dict with type validation.

    Returns the default if key is missing or value has wrong type.
    """
    value = data.get(key, default)
    if not isinstance(value, expected_type):
        return default
    return value


def _coerce_request_timeout(value: Any) -> int:
    """Validate and clamp the document request timeout."""
    if isinstance(value, bool) or not isinstance(value, int):
        return DEFAULT_REQUEST_TIMEOUT_SECONDS
    return max(1, min(value, MAX_REQUEST_TIMEOUT_SECONDS))


def _parse_theme_name(value: Any) -> str:
    if isinstance(value, str) and value in THEME_NAMES:
        return value
    if value is not None:
        logger.warning("Unknown theme %r, using 'monokai'", value)
    return "monokai"


def _dict_to_config(data: dict[str, Any]) -> UserConfig:
    """Deserialize a dictionary to UserConfig with type validation."""
    fallback_title = _safe_get(data, "fallback_title", DEFAULT_FALLBACK_TITLE, str)
    return UserConfig(
        data_source=_safe_get(data, "data_source", "", str),
        fallback_title=fallback_title or DEFAULT_FALLBACK_TITLE,
        allow_recenter_on_node_click=_safe_get(data, "allow_recenter_on_node_click", True, bool),
        request_timeout_seconds=_coerce_request_timeout(data.get("request_timeout_seconds")),
        theme_name=_parse_theme_name(data.get("theme_name")),
        version=_safe_get(data, "version", 1, int),
    )


def load_config() -> UserConfig:
    """Load configuration from disk.

    Returns default config if file doesn't exist or is corrupted.
    Logs specific errors to help diagnose config issues.
    """
    config_path = get_config_path()

    if not config_path.exists():
        return UserConfig()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")
        return _dict_to_config(data)
    except json.JSONDecodeError as e:
        logger.warning("Config file has invalid JSON, using defaults: %s", e)
    except UnicodeDecodeError as e:
        logger.warning("Config file is not valid UTF-8, using defaults: %s", e)
    except (KeyError, TypeError) as e:
        logger.warning("Config file has invalid structure, using defaults: %s", e)
    except OSError as e:
        logger.warning("Could not read config file, using defaults: %s", e)
    return UserConfig(config_defaulted=True)


def save_config(config: UserConfig) -> bool:
    """Save configuration to disk atomically.

    Uses write-to-tempfile + os.replace() to prevent partial writes
    on crash/interrupt from corrupting the config file.

    Creates the config directory if it doesn't exist.
    Returns True on success, False on failure.
    """
    config_path = get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = _config_to_dict(config)
        json_str = json.dumps(data, indent=2, ensure_ascii=False)
        fd, tmp_path = tempfile.mkstemp(dir=config_path.parent, suffix=".tmp", prefix=".config-")
        closed = False
        try:
            os.write(fd, json_str.encode("utf-8"))
            os.close(fd)
            closed = True
            os.replace(tmp_path, config_path)
        except BaseException:
            if not closed:
                os.close(fd)
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
        return True
    except OSError as e:
        logger.error("Failed to save config: %s", e)
        return False


__all__ = [
    "CONFIG_APP_NAME",
    "CONFIG_FILENAME",
    "UserConfig",
    "get_config_path",
    "load_config",
    "save_config",
]
