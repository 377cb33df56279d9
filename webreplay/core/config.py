from pathlib import Path
from typing import Dict, Any, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from webreplay.core.logging import log
from webreplay.core.constants import (
    DEFAULT_SELECTOR_TIMEOUT_MS,
    DEFAULT_NAVIGATION_TIMEOUT_MS,
    MAX_ACTION_GAP_MS,
    SELECTION_HOLD_MS,
    OPERATOR_WAIT_MS
)
from webreplay.utils.file_io import safe_read_json, safe_write_json

class ReplaySettings(BaseModel):
    """Timing and output knobs consumed by the replay engine."""
    model_config = ConfigDict(extra="ignore")

    selector_timeout_ms: int = Field(default=DEFAULT_SELECTOR_TIMEOUT_MS, ge=0)
    navigation_timeout_ms: int = Field(default=DEFAULT_NAVIGATION_TIMEOUT_MS, ge=0)
    max_action_gap_ms: int = Field(default=MAX_ACTION_GAP_MS, ge=0)
    selection_hold_ms: int = Field(default=SELECTION_HOLD_MS, ge=0)
    screenshot_dir: Path = Path(".")

class ConfigManager:
    """Manages global configuration for WebReplay."""

    APP_NAME = "webreplay"
    CONFIG_DIR = Path.home() / f".{APP_NAME}"
    CONFIG_FILE = CONFIG_DIR / "config.json"

    DEFAULT_CONFIG = {
        "headless": False,
        "selector_timeout_ms": DEFAULT_SELECTOR_TIMEOUT_MS,
        "navigation_timeout_ms": DEFAULT_NAVIGATION_TIMEOUT_MS,
        "max_action_gap_ms": MAX_ACTION_GAP_MS,
        "selection_hold_ms": SELECTION_HOLD_MS,
        "operator_wait_ms": OPERATOR_WAIT_MS,
        "screenshot_dir": ".",
        "recordings_dir": "recordings"
    }

    @classmethod
    def ensure_config_dir(cls):
        cls.CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)

    @classmethod
    def load_config(cls) -> Dict[str, Any]:
        """Load global configuration layered over the defaults."""
        config = cls.DEFAULT_CONFIG.copy()
        file_config = safe_read_json(cls.CONFIG_FILE, default={})
        if not isinstance(file_config, dict):
            log(f"Ignoring {cls.CONFIG_FILE.name}: expected a JSON object", level="warning")
            file_config = {}
        config.update(file_config)
        return config

    @classmethod
    def save_config(cls, config: Dict[str, Any]) -> bool:
        cls.ensure_config_dir()
        return safe_write_json(cls.CONFIG_FILE, config)

    @classmethod
    def set_value(cls, key: str, value: str) -> Dict[str, Any]:
        """Update a single known key, coercing the string to the default's type."""
        if key not in cls.DEFAULT_CONFIG:
            raise KeyError(f"Unknown configuration key: '{key}'")

        default = cls.DEFAULT_CONFIG[key]
        if isinstance(default, bool):
            lowered = value.strip().lower()
            if lowered not in ("true", "false", "1", "0", "yes", "no"):
                raise ValueError(f"'{key}' expects a boolean, got '{value}'")
            coerced: Any = lowered in ("true", "1", "yes")
        elif isinstance(default, int):
            try:
                coerced = int(value)
            except ValueError:
                raise ValueError(f"'{key}' expects an integer, got '{value}'")
            if coerced < 0:
                raise ValueError(f"'{key}' must not be negative, got {coerced}")
        else:
            coerced = value

        config = cls.load_config()
        config[key] = coerced
        cls.replay_settings(config)
        cls.save_config(config)
        return config

    @classmethod
    def replay_settings(cls, config: Optional[Dict[str, Any]] = None) -> ReplaySettings:
        """Build ReplaySettings, reporting bad config values as a single ValueError."""
        if config is None:
            config = cls.load_config()
        try:
            return ReplaySettings.model_validate(config)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ValueError(f"Invalid configuration in {cls.CONFIG_FILE}: {problems}") from None

    @staticmethod
    def validate_url(url: str) -> str:
        """URL validation using urllib.parse."""
        try:
            parsed = urlparse(url)
        except ValueError as e:
            raise ValueError(f"URL parsing failed: {e}")
        if not (parsed.scheme in ("http", "https") and parsed.netloc):
            raise ValueError(f"Invalid URL: '{url}' - Must be http/https with a valid domain.")
        return url
