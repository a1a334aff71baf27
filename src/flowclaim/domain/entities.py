"""Domain entities: ClaimOrder, FlowConfig and FlowSpec."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Sequence

from eth_utils import is_address, to_checksum_address
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Constants the mission contract was deployed with on Polygon Mumbai.
DEFAULT_HOST_ADDRESS: Final[str] = "0xEB796bdb90fFA0f28255275e16936D25d3418603"
DEFAULT_CFA_ADDRESS: Final[str] = "0x49e565Ed1bdc17F3d220f72DF0857C26FA83F873"
DEFAULT_CONTROLLER_ADDRESS: Final[str] = "0xf2cef2CF8ddc8b8e0E16d7995A58F8aAf435FF24"
DEFAULT_TOKEN_ADDRESS: Final[str] = "0x934aedA8514B6d3f1Aa8B0B9f7d050907B6d6EAD"

# Price per second for each tile, in token wei.
DEFAULT_FLOW_RATE: Final[int] = 385802469135

INT96_MAX: Final[int] = 2**95 - 1


@dataclass(frozen=True)
class ClaimOrder:
    """
    A request to claim one tile: grid position plus the token that represents it.

    Range is not checked here; the codec rejects orders it cannot encode.
    A well-formed `resource_owner` is stored in checksum form so that
    decoded orders compare equal to the ones that were encoded.
    """

    position: tuple[int, int, int]
    resource_id: int
    resource_owner: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", tuple(self.position))
        if isinstance(self.resource_owner, str) and is_address(self.resource_owner):
            object.__setattr__(
                self, "resource_owner", to_checksum_address(self.resource_owner)
            )

    @property
    def x(self) -> int:
        return self.position[0]

    @property
    def y(self) -> int:
        return self.position[1]

    @property
    def z(self) -> int:
        return self.position[2]


OrderBatch = Sequence[ClaimOrder]


def _checksum(v: str) -> str:
    if not is_address(v):
        raise ValueError(f"invalid address: {v!r}")
    return to_checksum_address(v)


class FlowConfig(BaseModel):
    """Fixed collaborators and price of the payer -> controller flow."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    host_address: str = DEFAULT_HOST_ADDRESS
    cfa_address: str = DEFAULT_CFA_ADDRESS
    token_address: str = DEFAULT_TOKEN_ADDRESS
    controller_address: str = DEFAULT_CONTROLLER_ADDRESS
    flow_rate: int = Field(DEFAULT_FLOW_RATE, gt=0, le=INT96_MAX)

    @field_validator(
        "host_address", "cfa_address", "token_address", "controller_address"
    )
    @classmethod
    def validate_address(cls, v: str) -> str:
        return _checksum(v)


class FlowSpec(BaseModel):
    """Describes one flow call. Built per call, never persisted."""

    model_config = ConfigDict(frozen=True)

    payer: str
    payee: str
    token: str
    flow_rate: int
    user_data: bytes = b""
