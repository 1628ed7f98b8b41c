# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/athena/config/models.py

from typing import Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator


class AthenaConfig(BaseModel):
    """Connection settings for the OneFuse REST endpoint."""

    model_config = ConfigDict(frozen=True)

    scheme: Literal["http", "https"] = "https"
    address: str = Field(min_length=1)
    port: str = Field(min_length=1)
    user: str = Field(min_length=1)
    password: str = Field(min_length=1, repr=False)
    verify_ssl: bool = True
    request_timeout_seconds: float = 30.0   # per HTTP call, not the job budget

    @field_validator("port", mode="before")
    @classmethod
    def _port_as_text(cls, v):
        # YAML reads `port: 443` as an int
        return str(v) if isinstance(v, int) else v

    def base_url(self) -> str:
        return f"{self.scheme}://{self.address}:{self.port}"

    def host_header(self) -> str:
        return f"{self.address}:{self.port}"
