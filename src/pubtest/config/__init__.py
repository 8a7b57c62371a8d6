"""Configuration: JSON file + environment overrides."""

from pubtest.config.config_manager import get_config, load_config, reset_config, set_config

__all__ = [
    "load_config",
    "get_config",
    "set_config",
    "reset_config",
]
