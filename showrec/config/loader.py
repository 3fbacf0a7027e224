"""YAML configuration loader with environment variable overrides.

Configuration is loaded in layers (later layers override earlier):

  1. config/config.yaml  — static defaults checked into the repo
  2. .env file           — local developer overrides (not committed)
  3. Environment vars    — set at deploy time

The ``recommendation`` section is not environment-driven; it only comes
from YAML and is turned into a :class:`RecommendationConfig` by callers.
"""

from __future__ import annotations

from pathlib import Path

import yaml

from showrec.config.settings import Settings


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.  A missing file yields
              an empty base configuration.
        settings: Pre-built settings; a fresh ``Settings()`` is read from
                  the environment when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "env": settings.app_env,
        },
        "api": {
            "base_url": settings.api_base_url,
            "timeout": settings.http_timeout,
        },
        "storage": {
            "recommendations_db_path": settings.recommendations_db_path,
        },
        "model": {
            "learned_enabled": settings.learned_model_enabled,
            "seed": settings.learned_model_seed,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
