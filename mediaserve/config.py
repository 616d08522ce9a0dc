from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .domain.paths import canonical_root

__all__ = ["DEFAULT_PORT", "ServerConfig"]

DEFAULT_PORT = 32767


class ServerConfig(BaseModel):
    """Validated startup parameters, handed to the app factory.

    Frozen: requests only ever read it.
    """

    model_config = ConfigDict(frozen=True)

    root_dir: Path = Field(default=Path("."), validate_default=True)
    host: str = "0.0.0.0"
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    log_level: str = "INFO"

    @field_validator("root_dir")
    @classmethod
    def _canonical_root(cls, v: Path) -> Path:
        # ValueError surfaces as a pydantic ValidationError
        return canonical_root(v)

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper()

    @classmethod
    def from_env(cls, **overrides: object) -> ServerConfig:
        """Build from MEDIA_ROOT / HOST / PORT / LOG_LEVEL; explicit overrides win.

        Overrides set to None are ignored so CLI defaults can pass through.
        """
        values: dict[str, object] = {}
        for field, var in (
            ("root_dir", "MEDIA_ROOT"),
            ("host", "HOST"),
            ("port", "PORT"),
            ("log_level", "LOG_LEVEL"),
        ):
            raw = os.getenv(var)
            if raw is not None and raw != "":
                values[field] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
