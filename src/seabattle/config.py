"""Validated settings for one game session."""

from __future__ import annotations

import ipaddress
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class SessionMode(Enum):
    SERVER = "server"
    CLIENT = "client"


class SessionConfig(BaseModel):
    """Where to meet the peer and how to seed our fleet layout.

    Without a host the process listens and lets the peer shoot first; with one
    it connects and shoots first.
    """

    seed: int
    port: int = Field(ge=1, le=65535)
    host: str | None = None
    log_level: str = "WARNING"

    @field_validator("host")
    @classmethod
    def _host_is_ip_literal(cls, value: str | None) -> str | None:
        if value is not None:
            ipaddress.ip_address(value)
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {value!r}")
        return level

    @property
    def mode(self) -> SessionMode:
        return SessionMode.SERVER if self.host is None else SessionMode.CLIENT

    @property
    def shoots_first(self) -> bool:
        return self.mode is SessionMode.CLIENT
