"""Data Transfer Objects returned by the flow lifecycle client."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..domain.entities import FlowSpec


class FlowOperation(str, Enum):
    ESTABLISH = "establish"
    AMEND = "amend"
    TERMINATE = "terminate"


class Submission(BaseModel):
    """The call was accepted by the node for inclusion.

    `tx_hash` is None when terminate found no flow to delete and nothing
    was broadcast.
    """

    model_config = ConfigDict(frozen=True)

    operation: FlowOperation
    flow: FlowSpec
    tx_hash: Optional[str] = None

    @property
    def broadcast(self) -> bool:
        return self.tx_hash is not None


class Confirmation(BaseModel):
    """The network included the call in a block."""

    model_config = ConfigDict(frozen=True)

    tx_hash: Optional[str]
    block_number: Optional[int] = None
    gas_used: Optional[int] = None
    succeeded: bool = True
