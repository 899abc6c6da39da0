"""YAML configuration merged over defaults, then environment overrides."""

import copy
import logging
import os

import yaml

from loglines.emitter import EmitterConfig
from loglines.levels import LOG_LEVELS, is_level

logger = logging.getLogger(__name__)


def _parse_bool(val: str | None, default: bool) -> bool:
    if val is None:
        return default
    return val.strip().lower() in ("true", "1", "yes")


class Config:
    """Settings for the emitter, the pretty printer and the log generator."""

    DEFAULTS = {
        "logger": {
            "min_level": "trace",
            "include_timestamp": True,
        },
        "pretty": {
            "color": True,
            "chunk_size": 65536,
        },
        "generator": {
            "namespace": "my-app.test-logs",
            "interval": 1.0,
            "context_keys": 10,
            "count": None,
        },
    }

    def __init__(self, config_path=None, environ=None):
        self._config = copy.deepcopy(self.DEFAULTS)

        if config_path is not None:
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    user_config = yaml.safe_load(f)

                if user_config and isinstance(user_config, dict):
                    self._config = self._deep_merge(self._config, user_config)
            except FileNotFoundError:
                logger.info("Config file %s not found, using defaults", config_path)
            except yaml.YAMLError:
                logger.warning("Invalid YAML in %s, using defaults", config_path)

        self._restore_bad_sections(config_path)
        self._apply_environ(os.environ if environ is None else environ)
        self._check_min_level()

    @staticmethod
    def _deep_merge(base, override):
        """Recursively merge override dict into base dict."""
        result = copy.deepcopy(base)
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = Config._deep_merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)
        return result

    def _restore_bad_sections(self, config_path):
        for name, default in self.DEFAULTS.items():
            if not isinstance(self._config.get(name), dict):
                logger.warning(
                    "Section %r in %s is not a mapping, using defaults", name, config_path
                )
                self._config[name] = copy.deepcopy(default)

    def _apply_environ(self, environ):
        min_level = environ.get("LOG_MIN_LEVEL")
        if min_level:
            self._config["logger"]["min_level"] = min_level.strip().lower()

        self._config["logger"]["include_timestamp"] = _parse_bool(
            environ.get("LOG_INCLUDE_TIMESTAMP"),
            self._config["logger"]["include_timestamp"],
        )

        # https://no-color.org: any non-empty value turns color off
        if environ.get("NO_COLOR"):
            self._config["pretty"]["color"] = False

    def _check_min_level(self):
        min_level = self._config["logger"]["min_level"]
        if not is_level(min_level):
            logger.warning(
                "Unknown min_level %r (expected one of %s), all levels will be logged",
                min_level,
                ", ".join(LOG_LEVELS),
            )

    def emitter_config(self) -> EmitterConfig:
        section = self._config["logger"]
        return EmitterConfig(
            min_level=section["min_level"],
            include_timestamp=bool(section["include_timestamp"]),
        )

    def __getitem__(self, key):
        return self._config[key]
