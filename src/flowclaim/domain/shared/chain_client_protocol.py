"""Protocol interface for chain client implementations.

The lifecycle client only needs to submit signed calls and look up receipts.
Keeping that behind a protocol lets tests drive the lifecycle against an
in-memory fake instead of a node.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol


class ChainClientProtocol(Protocol):
    """A signing identity bound to one network."""

    @property
    def address(self) -> str:
        """Checksummed address every call is signed by."""
        ...

    def send_call(self, to: str, data: bytes) -> str:
        """Sign and submit a call to `to` with `data`, returning the tx hash.

        Raises:
            CallRejectedError: The node refused the call (including reverts
                detected while simulating it).
            TransportError: The node could not be reached or answered garbage.
        """
        ...

    def get_transaction_receipt(self, tx_hash: str) -> Optional[dict[str, Any]]:
        """Return the receipt for `tx_hash`, or None while it is pending."""
        ...
