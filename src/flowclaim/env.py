from __future__ import annotations

import os
from typing import Optional
from urllib.parse import urlparse

from eth_account import Account
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .domain.entities import (
    DEFAULT_CFA_ADDRESS,
    DEFAULT_CONTROLLER_ADDRESS,
    DEFAULT_FLOW_RATE,
    DEFAULT_HOST_ADDRESS,
    DEFAULT_TOKEN_ADDRESS,
    FlowConfig,
)
from .domain.errors import ConfigurationError

# Polygon Mumbai, where the default collaborator addresses live.
DEFAULT_CHAIN_ID = 80001


class Settings(BaseModel):
    """Typed client settings built from environment variables."""

    model_config = ConfigDict(frozen=True)

    rpc_url: str
    private_key: str
    chain_id: int = DEFAULT_CHAIN_ID
    gas_limit: Optional[int] = None
    rpc_timeout: float = 10.0
    flow: FlowConfig = FlowConfig()

    @field_validator("rpc_url")
    @classmethod
    def validate_rpc_url(cls, v: str) -> str:
        if not v:
            raise ValueError("RPC URL cannot be empty")
        parsed = urlparse(v)
        if parsed.scheme not in {"http", "https"}:
            raise ValueError("RPC URL must start with http:// or https://")
        if not parsed.netloc:
            raise ValueError("RPC URL must include a host")
        return v

    @field_validator("private_key")
    @classmethod
    def validate_private_key(cls, v: str) -> str:
        """Validate that the private key can build a signing account."""
        if not v:
            raise ValueError("Private key cannot be empty")
        try:
            Account.from_key(v)
        except Exception as e:
            raise ValueError("Invalid private key") from e
        return v

    @field_validator("gas_limit")
    @classmethod
    def validate_gas_limit(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError("Gas limit must be positive")
        return v


def get_settings() -> Settings:
    """Return typed settings instance sourced from env vars."""
    rpc_url = os.environ.get("RPC_URL")
    private_key = os.environ.get("PRIVATE_KEY")
    if not (rpc_url and private_key):
        raise ConfigurationError("RPC_URL and PRIVATE_KEY are required")

    gas_limit = os.environ.get("GAS_LIMIT")
    try:
        return Settings(
            rpc_url=rpc_url,
            private_key=private_key,
            chain_id=int(os.environ.get("CHAIN_ID", str(DEFAULT_CHAIN_ID))),
            gas_limit=int(gas_limit) if gas_limit else None,
            rpc_timeout=float(os.environ.get("RPC_TIMEOUT", "10.0")),
            flow=FlowConfig(
                host_address=os.environ.get("HOST_ADDRESS", DEFAULT_HOST_ADDRESS),
                cfa_address=os.environ.get("CFA_ADDRESS", DEFAULT_CFA_ADDRESS),
                token_address=os.environ.get(
                    "SUPER_TOKEN_ADDRESS", DEFAULT_TOKEN_ADDRESS
                ),
                controller_address=os.environ.get(
                    "MISSION_ADDRESS", DEFAULT_CONTROLLER_ADDRESS
                ),
                flow_rate=int(os.environ.get("FLOW_RATE", str(DEFAULT_FLOW_RATE))),
            ),
        )
    except (ValidationError, ValueError) as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e
