"""Settings loaded from environment variables."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """All configuration is driven by ``JUNIPER_*`` environment variables."""

    # Device connection overrides. Numbers stay strings here; validate_options
    # converts them and names the field when they are malformed.
    host: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    port: Optional[str] = None
    timeout: Optional[str] = None

    # Bastion / proxy
    bastion_host: Optional[str] = None
    bastion_user: Optional[str] = None
    bastion_port: Optional[str] = None
    bastion_password: Optional[str] = None
    proxy_command: Optional[str] = None

    # HTTP service
    api_key: str = ""
    simulated: bool = False

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    model_config = SettingsConfigDict(
        env_prefix="JUNIPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    def connection_overrides(self) -> dict[str, Any]:
        """Connection options that are actually set in the environment."""
        return {
            key: value
            for key, value in self.model_dump(include=CONNECTION_KEYS).items()
            if value is not None
        }


CONNECTION_KEYS = frozenset(
    {
        "host",
        "user",
        "password",
        "port",
        "timeout",
        "bastion_host",
        "bastion_user",
        "bastion_port",
        "bastion_password",
        "proxy_command",
    }
)


def merge_environment(
    options: Mapping[str, Any], cfg: Settings | None = None,
) -> dict[str, Any]:
    """Fill options missing from *options* with environment values.

    Explicitly supplied options always win; a key passed as ``None`` counts
    as missing.
    """
    cfg = cfg or Settings()
    merged = dict(options)
    for key, value in cfg.connection_overrides().items():
        if merged.get(key) is None:
            merged[key] = value
    return merged


# Singleton – import this from anywhere
settings = Settings()
