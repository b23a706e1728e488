import logging
import os
import re
from pathlib import Path

import yaml

from checkgate.schema.system_config_schema import SystemConfig

logger = logging.getLogger("ConfigManager")

ENV_VAR_PATTERN = re.compile(r"\$\{(\w+)(?::-([^\}]*))?\}")


class ConfigManager:

    @staticmethod
    def load_yaml_file(path: str) -> dict:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def parse_env_var_with_default(value: str) -> bool | int | float | str | None:
        match = ENV_VAR_PATTERN.fullmatch(value.strip())  # ${VAR_NAME:-default} or ${VAR_NAME}
        if not match:
            return value

        var_name = match.group(1)
        default_value = match.group(2)

        resolved_value = os.getenv(var_name) or default_value
        if resolved_value is not None:
            return ConfigManager._parse_value_by_type(resolved_value)
        return None

    @staticmethod
    def resolve_env_vars(raw):
        """Recursively expand ${VAR:-default} placeholders in a loaded YAML tree"""
        if isinstance(raw, dict):
            return {key: ConfigManager.resolve_env_vars(value) for key, value in raw.items()}
        if isinstance(raw, list):
            return [ConfigManager.resolve_env_vars(value) for value in raw]
        if isinstance(raw, str):
            return ConfigManager.parse_env_var_with_default(raw)
        return raw

    @staticmethod
    def load_system_config(path: str | None) -> SystemConfig:
        if not path or not Path(path).exists():
            logger.info(f"[CONFIG] No system config at {path!r}, using defaults")
            return SystemConfig()

        raw_config = ConfigManager.resolve_env_vars(ConfigManager.load_yaml_file(path))
        return SystemConfig(**raw_config)

    @staticmethod
    def _parse_value_by_type(value: str) -> bool | int | float | str:
        if value.lower() in ["true", "false"]:
            return value.lower() == "true"
        if ConfigManager._is_int(value):
            return int(value)
        if ConfigManager._is_float(value):
            return float(value)
        return value

    @staticmethod
    def _is_int(value: str) -> bool:
        try:
            int(value)
            return True
        except ValueError:
            return False

    @staticmethod
    def _is_float(value: str) -> bool:
        try:
            float(value)
            return True
        except ValueError:
            return False
