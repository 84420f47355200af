"""Command-related data structures."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CommandResult(BaseModel):
    """Outcome of one command: 0 means success, 1 means failure."""

    model_config = ConfigDict(frozen=True)

    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0

    @property
    def failed(self) -> bool:
        return self.exit_code != 0
