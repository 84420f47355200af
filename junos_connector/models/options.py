"""Connection options and their validation."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    field_validator,
    model_validator,
)

from junos_connector.constants import DEFAULT_SSH_PORT, MAX_PORT, MIN_PORT
from junos_connector.errors import ConfigurationError


class ConnectionOptions(BaseModel):
    """Normalised, immutable connection configuration for one device."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    host: str = Field(min_length=1)
    user: str = Field(min_length=1)
    port: int = Field(default=DEFAULT_SSH_PORT, ge=MIN_PORT, le=MAX_PORT)
    password: Optional[SecretStr] = None
    key_files: Optional[list[str]] = None
    keys_only: bool = False
    timeout: float = Field(default=30, gt=0)
    keepalive: bool = True
    keepalive_interval: int = Field(default=60, gt=0)

    bastion_host: Optional[str] = None
    bastion_user: Optional[str] = None
    bastion_port: int = Field(default=DEFAULT_SSH_PORT, ge=MIN_PORT, le=MAX_PORT)
    bastion_password: Optional[SecretStr] = None
    proxy_command: Optional[str] = None

    simulated: bool = Field(
        default=False, validation_alias=AliasChoices("simulated", "mock"),
    )
    fact_detection: bool = True
    disable_complete_on_space: bool = False
    skip_connect: bool = False

    @field_validator("key_files", mode="before")
    @classmethod
    def _wrap_single_key(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("port", "bastion_port", mode="before")
    @classmethod
    def _reject_bool_port(cls, value: Any) -> Any:
        # bool is an int subclass; True would otherwise become port 1
        if isinstance(value, bool):
            raise ValueError("must be an integer between 1 and 65535")
        return value

    @model_validator(mode="after")
    def _check_proxy_exclusive(self) -> "ConnectionOptions":
        if self.bastion_host and self.proxy_command:
            raise ValueError("Cannot specify both bastion_host and proxy_command")
        return self

    # ── derived values ────────────────────────────────────────────────

    @property
    def effective_bastion_user(self) -> str:
        return self.bastion_user or self.user

    @property
    def effective_bastion_password(self) -> Optional[SecretStr]:
        return self.bastion_password or self.password

    def safe_dump(self) -> dict[str, Any]:
        """Options without credentials, for logging."""
        return self.model_dump(
            exclude={"password", "bastion_password", "proxy_command"},
        )


# Fields checked before the numeric ranges, matching the order the errors are
# reported in.
_REQUIRED = ("host", "user")
_RANGE_MESSAGES = {
    "port": "must be an integer between 1 and 65535",
    "bastion_port": "must be an integer between 1 and 65535",
    "timeout": "must be a positive number",
    "keepalive_interval": "must be a positive integer",
}


def validate_options(raw: Mapping[str, Any]) -> ConnectionOptions:
    """Validate a raw option map into ``ConnectionOptions``.

    Raises ``ConfigurationError`` naming the first offending field:
    required fields first, then numeric ranges, then the bastion/proxy
    exclusion.
    """
    for name in _REQUIRED:
        value = raw.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ConfigurationError(name, f"{name.capitalize()} is required")

    try:
        return ConnectionOptions.model_validate(dict(raw))
    except ValidationError as exc:
        raise _to_configuration_error(exc, raw) from exc


def _to_configuration_error(
    exc: ValidationError, raw: Mapping[str, Any],
) -> ConfigurationError:
    errors = exc.errors()
    # Model-level errors carry an empty location
    field_errors = [e for e in errors if e["loc"]]
    if not field_errors:
        message = errors[0]["msg"].removeprefix("Value error, ")
        return ConfigurationError("bastion_host", message)

    first = field_errors[0]
    field = str(first["loc"][0])
    if field in _RANGE_MESSAGES:
        return ConfigurationError(
            field, f"Invalid {field}: {raw.get(field)!r} ({_RANGE_MESSAGES[field]})",
        )
    return ConfigurationError(field, first["msg"])
