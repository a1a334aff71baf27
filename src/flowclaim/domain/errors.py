"""Domain-specific exceptions."""

from __future__ import annotations

from typing import Any, Optional

from eth_utils import function_signature_to_4byte_selector

FLOW_DOES_NOT_EXIST_SELECTOR = (
    "0x" + function_signature_to_4byte_selector("CFA_FLOW_DOES_NOT_EXIST()").hex()
)
FLOW_DOES_NOT_EXIST_REASON = "flow does not exist"


class FlowClaimError(Exception):
    """Base class for every error raised by flowclaim."""


class ConfigurationError(FlowClaimError, ValueError):
    """Raised when required settings are missing or malformed."""


class EncodingRangeError(FlowClaimError, ValueError):
    """Raised when a claim order cannot be represented on the wire."""


class PayloadDecodeError(FlowClaimError, ValueError):
    """Raised when a payload is not a valid encoded order batch."""


class CallRejectedError(FlowClaimError):
    """The node or a contract rejected the call.

    `code` and `data` are the JSON-RPC error fields exactly as the node
    returned them.
    """

    def __init__(
        self, message: str, *, code: Optional[int] = None, data: Any = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.data = data

    @property
    def is_flow_absent(self) -> bool:
        """True when the rejection means there is no flow to act on."""
        if FLOW_DOES_NOT_EXIST_REASON in self.message.lower():
            return True
        if isinstance(self.data, str):
            data = self.data.lower()
            return (
                data.startswith(FLOW_DOES_NOT_EXIST_SELECTOR)
                or FLOW_DOES_NOT_EXIST_REASON in data
            )
        return False


class TransportError(FlowClaimError):
    """The outcome of a call is unknown (connectivity failure, timeout)."""
