"""Settings read from the process environment and optional .env files."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from functools import lru_cache
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

DEFAULT_CONFIG_PATH = "/configs/.env"

_log = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    """Raised when an existing configuration file cannot be loaded."""


def _env(name: Optional[str] = None):
    metadata = {"env": name} if name else {}
    return field(default="", metadata=metadata)


def _read_environ(cls, environ: Optional[Mapping[str, str]]):
    source = os.environ if environ is None else environ
    values = {
        f.name: source.get(f.metadata.get("env", f.name.upper()), "")
        for f in fields(cls)
    }
    return cls(**values)


@dataclass(frozen=True)
class ApiSettings:
    """Settings used by the HTTP API."""

    product_code: str = _env()
    module_name: str = _env()
    build: str = _env()
    release: str = _env()
    port: str = _env()

    db_host: str = _env()
    db_port: str = _env()
    db_database: str = _env()
    db_fedauth: str = _env()

    app_insights_key: str = _env()
    app_insights_role: str = _env()
    app_insights_send_live_metrics: str = _env()

    redis_host: str = _env("RedisHost")
    redis_port: str = _env("RedisPort")
    redis_key: str = _env("RedisKey")

    aad_sp_authority: str = _env()
    aad_sp_tenant_id: str = _env()
    aad_sp_client_id: str = _env()
    aad_sp_client_secret: str = _env()
    aad_sp_client_scope: str = _env()

    azure_account_name: str = _env()
    azure_account_key: str = _env()
    azure_blob_container: str = _env()
    azure_mail_blob_container: str = _env()

    user_profile_base_url: str = _env()

    path_prefix: str = _env()

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "ApiSettings":
        """Build settings from a mapping; unset variables become empty strings."""
        return _read_environ(cls, environ)


@dataclass(frozen=True)
class ListenerSettings:
    """Settings used by the message listener."""

    product_code: str = _env()
    module_name: str = _env()
    build: str = _env()
    release: str = _env()
    port: str = _env()

    aad_sp_authority: str = _env()
    aad_sp_tenant_id: str = _env()
    aad_sp_client_id: str = _env()
    aad_sp_client_secret: str = _env()
    aad_sp_client_scope: str = _env()

    app_insights_key: str = _env()

    azure_account_name: str = _env()
    azure_account_key: str = _env()
    azure_mail_blob_container: str = _env()

    sb_host: str = _env()
    sb_topic: str = _env()
    sb_subscription: str = _env()
    sb_receiver_timeout_in_sec: str = _env()
    sb_receiver_batch_size: str = _env()
    sb_queue: str = _env()

    email_from: str = _env()

    temp_path: str = _env()

    api_1: str = _env()
    api_2: str = _env()

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "ListenerSettings":
        """Build settings from a mapping; unset variables become empty strings."""
        return _read_environ(cls, environ)


def load_dotenv_files(config_path: "str | os.PathLike[str]" = DEFAULT_CONFIG_PATH) -> Optional[Path]:
    """Load variables from ``config_path`` if it exists, else from ./.env.

    Variables already present in the environment are kept. Returns the file
    that was loaded, or None when no file was found.
    """
    path = Path(config_path)
    if path.exists():
        _log.debug("Loading config from %s", path)
        try:
            with path.open(encoding="utf-8") as stream:
                load_dotenv(stream=stream, override=False)
        except OSError as exc:
            raise ConfigError(f"Error loading .env file from {path}") from exc
        return path

    _log.debug("Loading config from default location .")
    default = Path.cwd() / ".env"
    if default.is_file():
        try:
            with default.open(encoding="utf-8") as stream:
                load_dotenv(stream=stream, override=False)
        except OSError as exc:
            _log.debug("Error loading .env from default location: %s", exc)
            return None
        return default
    _log.debug("No .env found in default location")
    return None


@lru_cache(maxsize=None)
def api_settings() -> ApiSettings:
    """Return the process-wide API settings, loading them on first use."""
    _log.debug("No settings instance, creating one")
    load_dotenv_files()
    return ApiSettings.from_environ()


@lru_cache(maxsize=None)
def listener_settings() -> ListenerSettings:
    """Return the process-wide listener settings, loading them on first use."""
    _log.debug("No settings instance, creating one")
    load_dotenv_files()
    return ListenerSettings.from_environ()