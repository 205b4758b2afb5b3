# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Pydantic models for pygapis.

Provides validated configuration models for the codec and the API client.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TimestampPrecision(str, Enum):
    """Fractional-second digits emitted when formatting instants."""
    AUTO = "auto"
    MILLISECONDS = "milliseconds"
    MICROSECONDS = "microseconds"


# ============================================================================
# Configuration Models
# ============================================================================


class CodecConfig(BaseModel):
    """Configuration for the wire codec."""

    model_config = ConfigDict(frozen=True)

    timestamp_precision: TimestampPrecision = Field(
        default=TimestampPrecision.AUTO,
        description="auto emits milliseconds unless sub-millisecond digits are present",
    )
    lenient_integers: bool = Field(
        default=True,
        description="Accept unquoted JSON integers for int64 fields on decode",
    )
    assume_utc: bool = Field(
        default=True,
        description="Treat naive datetimes as UTC instead of rejecting them",
    )


DEFAULT_CODEC_CONFIG = CodecConfig()


class ClientConfig(BaseModel):
    """Configuration for ApiClient."""

    model_config = ConfigDict(validate_assignment=True)

    base_url: str = Field(
        default="https://www.googleapis.com/",
        description="Service root; request paths are appended to it",
    )
    timeout_ms: int = Field(default=30000, ge=100, le=300000)
    user_agent: str = "pygapis"
    codec: CodecConfig = Field(default_factory=CodecConfig)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        if not v.endswith("/"):
            v += "/"
        return v

    @property
    def timeout_seconds(self) -> float:
        """Timeout in seconds, as transports expect it."""
        return self.timeout_ms / 1000.0
