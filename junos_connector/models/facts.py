"""Device identification records."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from junos_connector.constants import PLATFORM_FAMILY, PLATFORM_NAME, PLATFORM_TITLE


class DeviceFacts(BaseModel):
    """Version and architecture parsed from one ``show version`` run."""

    model_config = ConfigDict(frozen=True)

    version: Optional[str] = None
    architecture: Optional[str] = None

    @classmethod
    def unknown(cls) -> "DeviceFacts":
        return cls()

    @property
    def known(self) -> bool:
        return self.version is not None or self.architecture is not None


class PlatformInfo(BaseModel):
    """Platform description handed to the host framework."""

    model_config = ConfigDict(frozen=True)

    name: str = PLATFORM_NAME
    title: str = PLATFORM_TITLE
    family: str = PLATFORM_FAMILY
    release: str
    arch: str = "unknown"
