"""Process-wide engine bootstrap.

The rendering subsystem is initialised exactly once before any report is
parsed or rendered. Loaders call :func:`ensure_initialized` before their first
parse; the orchestrator reads settings through :func:`get_engine_config`.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import logging
import os
from pathlib import Path
from threading import RLock
from typing import Any

from .config import EngineConfig, load_engine_config
from .converters import ConverterRegistry, get_converter_registry


__all__ = [
    "CONFIG_ENV_VAR",
    "configure_engine",
    "engine_context",
    "ensure_initialized",
    "get_engine_config",
    "is_initialized",
    "reset_engine",
]

CONFIG_ENV_VAR = "REPORTRUNNER_CONFIG"

logger = logging.getLogger(__name__)

_ENGINE_CONFIG: EngineConfig | None = None
_LOCK: RLock = RLock()


def _resolve_config_path(path: str | Path | None) -> Path | None:
    if path is not None:
        return Path(path).expanduser()
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return None


def configure_engine(path: str | Path | None = None, **overrides: Any) -> EngineConfig:
    """(Re)initialise the engine from ``path`` or ``$REPORTRUNNER_CONFIG``."""
    global _ENGINE_CONFIG
    config_path = _resolve_config_path(path)
    config = load_engine_config(config_path, **overrides)
    registry: ConverterRegistry = get_converter_registry()
    with _LOCK:
        _ENGINE_CONFIG = config
    logger.debug(
        "engine initialised (config=%s, converters=%d)",
        config_path or "<defaults>",
        len(list(registry)),
    )
    return config


def ensure_initialized() -> EngineConfig:
    """Initialise the engine once; later calls return the active configuration."""
    with _LOCK:
        if _ENGINE_CONFIG is None:
            return configure_engine()
        return _ENGINE_CONFIG


def is_initialized() -> bool:
    with _LOCK:
        return _ENGINE_CONFIG is not None


def get_engine_config() -> EngineConfig:
    """Return the active engine configuration, booting the engine if needed."""
    return ensure_initialized()


def reset_engine() -> None:
    """Forget the active configuration so the next use boots again."""
    global _ENGINE_CONFIG
    with _LOCK:
        _ENGINE_CONFIG = None


@contextmanager
def engine_context(path: str | Path | None = None, **overrides: Any) -> Iterator[EngineConfig]:
    """Temporarily replace the engine configuration."""
    global _ENGINE_CONFIG
    with _LOCK:
        previous = _ENGINE_CONFIG
    current = configure_engine(path, **overrides)
    try:
        yield current
    finally:
        with _LOCK:
            _ENGINE_CONFIG = previous
