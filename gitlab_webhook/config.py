"""Application configuration.

Two layers live here:

* ``Settings`` -- process settings loaded from environment variables
  (log level, renderer, default config path, shutdown drain timeout).
* ``ConfigStore`` -- the JSON config file holding the repository rules.
  It is loaded once at startup and can be hot-reloaded on SIGHUP; a reload
  builds a fresh ``ServerConfig`` snapshot and swaps it in with a single
  reference assignment, so concurrent requests always see a complete
  snapshot (old or new, never a mix).
"""

from __future__ import annotations

import asyncio
import signal
from pathlib import Path

import structlog
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from gitlab_webhook.schemas.config import ServerConfig

logger = structlog.get_logger()


class Settings(BaseSettings):
    """Application settings with environment variable loading and sensible defaults."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = "gitlab-webhook"
    log_level: str = "INFO"
    json_logs: bool = False
    config_path: str = "config.json"
    drain_timeout: float = 10.0


settings = Settings()


class ConfigError(Exception):
    """Raised when the config file cannot be read or decoded."""


def load_config(path: str | Path) -> ServerConfig:
    """Read and decode the config file at *path*.

    Raises:
        ConfigError: if the file is unreadable or does not decode into a
            ``ServerConfig``. There is no partial or fallback config.
    """
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc

    try:
        return ServerConfig.model_validate_json(raw)
    except ValidationError as exc:
        raise ConfigError(f"cannot decode config file {path}: {exc}") from exc


class ConfigStore:
    """Holder of the active ``ServerConfig`` snapshot."""

    def __init__(self, path: str | Path, config: ServerConfig) -> None:
        self._path = Path(path)
        self._config = config

    @classmethod
    def from_path(cls, path: str | Path) -> ConfigStore:
        """Load *path* and return a store for it; errors propagate (fatal at startup)."""
        return cls(path, load_config(path))

    @property
    def path(self) -> Path:
        return self._path

    @property
    def current(self) -> ServerConfig:
        return self._config

    def reload(self) -> ServerConfig | None:
        """Replace the active snapshot with a fresh load of the same file.

        A broken file is logged and the previous snapshot stays active.
        Returns the new snapshot, or ``None`` when the reload failed.
        """
        try:
            config = load_config(self._path)
        except ConfigError:
            logger.exception("config_reload_failed", path=str(self._path))
            return None

        self._config = config
        logger.info(
            "config_reloaded",
            path=str(self._path),
            repositories=len(config.repositories),
        )
        return config


def install_reload_handler(store: ConfigStore, loop: asyncio.AbstractEventLoop) -> bool:
    """Reload *store* whenever the process receives SIGHUP.

    Returns ``False`` on platforms without SIGHUP.
    """
    if not hasattr(signal, "SIGHUP"):
        return False
    loop.add_signal_handler(signal.SIGHUP, store.reload)
    return True


def remove_reload_handler(loop: asyncio.AbstractEventLoop) -> None:
    if hasattr(signal, "SIGHUP"):
        loop.remove_signal_handler(signal.SIGHUP)
