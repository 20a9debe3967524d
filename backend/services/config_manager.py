"""
Configuration Manager - Handle diff viewer settings persistence
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from models.diff import ViewOptions
from .line_encoder import tab_replacement_for

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manage configuration persistence"""

    _instance = None
    _config_file = None

    def __init__(self):
        try:
            # Environment variable first, then ~/.review_diff
            config_dir = os.environ.get("REVIEW_DIFF_CONFIG_DIR")
            if not config_dir:
                config_dir = os.path.expanduser("~/.review_diff")

            config_path = Path(config_dir)
            try:
                config_path.mkdir(parents=True, exist_ok=True)
                self._config_file = config_path / "config.json"
            except OSError as e:
                logger.warning(f"[ConfigManager] Cannot write to {config_dir}: {e}")
                self._config_file = None

            # Unwritable home: fall back to the temp directory
            if not self._config_file:
                tmp_dir = Path(tempfile.gettempdir()) / "review_diff"
                tmp_dir.mkdir(parents=True, exist_ok=True)
                self._config_file = tmp_dir / "config.json"
                logger.info(f"[ConfigManager] Using temporary config path: {self._config_file}")

        except OSError as e:
            logger.error(f"[ConfigManager] Cannot prepare a config directory: {e}")
            self._config_file = Path(tempfile.gettempdir()) / "review_diff_config_fallback.json"

        self._config = self._load_config()

    @classmethod
    def get_instance(cls) -> "ConfigManager":
        """Get singleton instance"""
        if cls._instance is None:
            cls._instance = ConfigManager()
        return cls._instance

    @classmethod
    def reset_instance(cls):
        """Forget the singleton so the next access re-reads the environment"""
        cls._instance = None

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from file, layered over the defaults"""
        config = self._default_config()
        if not self._config_file.exists():
            return config

        try:
            with open(self._config_file) as f:
                stored = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"[ConfigManager] Error loading config: {e}")
            return config

        for key, value in stored.items():
            if isinstance(value, dict) and isinstance(config.get(key), dict):
                config[key] = {**config[key], **value}
            else:
                config[key] = value
        return config

    def _default_config(self) -> dict[str, Any]:
        """Get default configuration"""
        return {
            "diff": {
                "executable": "diff",
                "baseArgs": "",
                "ignoreWhitespaceArgs": "-w",
                "timeoutSeconds": 30,
            },
            "view": {
                "contextLines": 50,
                "omitThreshold": 100,
                "maxLineLength": None,
                "spacesPerTab": None,
                "unifiedView": False,
                "baseOnLeft": True,
            },
            "encoders": {},  # extension -> "module:factory"
            "server": {"host": "0.0.0.0", "port": 8000},
        }

    def get_config(self) -> dict[str, Any]:
        """Get current configuration"""
        # Reload config from file to ensure we have the latest
        self._config = self._load_config()
        return self._config.copy()

    def save_config(self, config: dict[str, Any]):
        """Save configuration to file"""
        self._config.update(config)
        self._config_file.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(self._config_file, "w") as f:
                json.dump(self._config, f, indent=2)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}")

    def get(self, key: str, default=None):
        """Get specific config value"""
        return self._config.get(key, default)

    def set(self, key: str, value: Any):
        """Set specific config value"""
        self._config[key] = value
        self.save_config(self._config)

    def view_options(
        self,
        unified_view: bool | None = None,
        base_on_left: bool | None = None,
        omit_unchanged_lines: bool = True,
    ) -> ViewOptions:
        """Build rendering options from config, with request overrides"""
        view = self._config.get("view", {})
        return ViewOptions(
            unified_view=view.get("unifiedView", False) if unified_view is None else unified_view,
            base_on_left=view.get("baseOnLeft", True) if base_on_left is None else base_on_left,
            omit_unchanged_lines=omit_unchanged_lines,
            context_lines=view.get("contextLines", 50),
            omit_threshold=view.get("omitThreshold", 100),
            max_line_length=view.get("maxLineLength"),
            tab_replacement=tab_replacement_for(view.get("spacesPerTab")),
        )
