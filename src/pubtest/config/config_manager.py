"""Config manager: load JSON, apply env overrides, validate into PubtestConfig."""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path

from pubtest.core.models.config import PubtestConfig

_log = logging.getLogger(__name__)

# Environment variable → (field, type).
_ENV_OVERRIDES: dict[str, tuple[str, type]] = {
    "PUBTEST_DEFAULT_TIMEOUT": ("default_timeout_seconds", float),
    "PUBTEST_REQUIRE_VALUE": ("require_value", bool),
    "PUBTEST_RESOURCE_DIR": ("resource_dir_name", str),
    "PUBTEST_LOG_LEVEL": ("log_level", str),
    "PUBTEST_LOG_DIR": ("log_dir", str),
}

_lock = threading.Lock()
_current: PubtestConfig | None = None


def _coerce(value: str, target_type: type) -> object:
    """Coerce a string env-var value to the expected Python type."""
    if target_type is bool:
        return value.strip().lower() in ("1", "true", "yes")
    return target_type(value)


def load_config(config_path: Path | str | None = None) -> PubtestConfig:
    """Load, override, and validate the pubtest configuration.

    Args:
        config_path: Path to a JSON config file.  When *None*, falls back to
            the ``PUBTEST_CONFIG_FILE`` env-var, and then to built-in
            defaults.

    Returns:
        A fully-validated :class:`PubtestConfig` instance.

    Raises:
        FileNotFoundError: If an explicitly named config file does not exist.
    """
    path = _resolve_config_path(config_path)
    raw: dict[str, object] = {}
    if path is not None:
        _log.info("Loading config from %s", path)
        raw = json.loads(path.read_text(encoding="utf-8"))

    for env_key, (field, typ) in _ENV_OVERRIDES.items():
        env_val = os.environ.get(env_key)
        if env_val is not None:
            raw[field] = _coerce(env_val, typ)
            _log.debug("Env override: %s → %s = %r", env_key, field, env_val)

    return PubtestConfig(**raw)


def get_config() -> PubtestConfig:
    """Return the process-wide config, loading it on first use."""
    global _current
    with _lock:
        if _current is None:
            _current = load_config()
        return _current


def set_config(config: PubtestConfig) -> None:
    """Replace the process-wide config (e.g. from a test fixture)."""
    global _current
    with _lock:
        _current = config


def reset_config() -> None:
    """Forget the cached config so the next :func:`get_config` reloads it."""
    global _current
    with _lock:
        _current = None


def _resolve_config_path(config_path: Path | str | None) -> Path | None:
    if config_path is not None:
        p = Path(config_path)
    else:
        env = os.environ.get("PUBTEST_CONFIG_FILE")
        if not env:
            return None
        p = Path(env)
    if not p.is_file():
        raise FileNotFoundError(
            f"Config file not found: {p}\n"
            "Point PUBTEST_CONFIG_FILE at a valid JSON file or unset it."
        )
    return p
