"""Drives the payer -> controller flow that backs a tile claim.

The flow is binary: it either exists at the configured rate or it does not.
Each operation is exactly one signed `callAgreement` on the host. Nothing
is retried and no flow state is kept between calls.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

from prometheus_client import Counter, Histogram

from ..crypto.order_codec import encode_orders
from ..domain.entities import FlowConfig, FlowSpec, OrderBatch
from ..domain.errors import CallRejectedError, TransportError
from ..domain.shared import ChainClientProtocol
from .dtos import Confirmation, FlowOperation, Submission
from .shared.agreement_calls import (
    encode_call_agreement,
    encode_create_flow,
    encode_delete_flow,
    encode_update_flow,
)

logger = logging.getLogger(__name__)

LIFECYCLE_CALLS = Counter(
    "flowclaim_lifecycle_calls_total",
    "Flow lifecycle calls by operation and outcome",
    ["operation", "outcome"],
)
LIFECYCLE_CALL_SECONDS = Histogram(
    "flowclaim_lifecycle_call_seconds",
    "Time spent submitting a flow lifecycle call",
    ["operation"],
)


def _receipt_int(receipt: dict[str, Any], key: str) -> Optional[int]:
    value = receipt.get(key)
    if value is None:
        return None
    if isinstance(value, int):
        return value
    return int(value, 16)


class FlowLifecycleClient:
    """Establish, amend and terminate the claim flow for one payer.

    `chain` carries the signing identity; the payer is always `chain.address`.
    """

    def __init__(self, config: FlowConfig, chain: ChainClientProtocol) -> None:
        self._config = config
        self._chain = chain

    @property
    def config(self) -> FlowConfig:
        return self._config

    @property
    def payer(self) -> str:
        return self._chain.address

    def _flow_spec(self, user_data: bytes = b"") -> FlowSpec:
        return FlowSpec(
            payer=self.payer,
            payee=self._config.controller_address,
            token=self._config.token_address,
            flow_rate=self._config.flow_rate,
            user_data=user_data,
        )

    def _submit(
        self, operation: FlowOperation, flow: FlowSpec, call_data: bytes
    ) -> str:
        host_call = encode_call_agreement(
            self._config.cfa_address, call_data, flow.user_data
        )
        with LIFECYCLE_CALL_SECONDS.labels(operation=operation.value).time():
            try:
                tx_hash = self._chain.send_call(self._config.host_address, host_call)
            except CallRejectedError:
                LIFECYCLE_CALLS.labels(
                    operation=operation.value, outcome="rejected"
                ).inc()
                raise
            except TransportError:
                LIFECYCLE_CALLS.labels(
                    operation=operation.value, outcome="transport_error"
                ).inc()
                raise
        LIFECYCLE_CALLS.labels(operation=operation.value, outcome="submitted").inc()
        return tx_hash

    def establish(self, orders: OrderBatch) -> Submission:
        """Open the flow at the fixed rate, claiming `orders`.

        Orders are encoded before anything is sent, so an unencodable batch
        (including an empty one) raises EncodingRangeError with no side effects.
        The controller starts honoring the claim once it observes the flow;
        this call does not wait for that.
        """
        orders = list(orders)
        flow = self._flow_spec(encode_orders(orders))
        call_data = encode_create_flow(flow.token, flow.payee, flow.flow_rate)
        tx_hash = self._submit(FlowOperation.ESTABLISH, flow, call_data)
        logger.info(
            "Established flow %s -> %s at %d/s for %d order(s): %s",
            flow.payer,
            flow.payee,
            flow.flow_rate,
            len(orders),
            tx_hash,
        )
        return Submission(operation=FlowOperation.ESTABLISH, flow=flow, tx_hash=tx_hash)

    def amend(self, orders: OrderBatch) -> Submission:
        """Re-issue the claim set on an active flow, keeping the same rate.

        Whether the controller adds `orders` to the current claim or replaces
        it is up to the controller.
        """
        orders = list(orders)
        flow = self._flow_spec(encode_orders(orders))
        call_data = encode_update_flow(flow.token, flow.payee, flow.flow_rate)
        tx_hash = self._submit(FlowOperation.AMEND, flow, call_data)
        logger.info(
            "Amended flow %s -> %s with %d order(s): %s",
            flow.payer,
            flow.payee,
            len(orders),
            tx_hash,
        )
        return Submission(operation=FlowOperation.AMEND, flow=flow, tx_hash=tx_hash)

    def terminate(self) -> Submission:
        """Delete the flow, releasing every claimed tile.

        Safe to call when no flow exists: the network's "flow does not exist"
        rejection is returned as a successful Submission with no tx hash.
        """
        flow = self._flow_spec()
        call_data = encode_delete_flow(flow.token, flow.payer, flow.payee)
        try:
            tx_hash = self._submit(FlowOperation.TERMINATE, flow, call_data)
        except CallRejectedError as e:
            if not e.is_flow_absent:
                raise
            logger.info("No flow %s -> %s to terminate", flow.payer, flow.payee)
            return Submission(operation=FlowOperation.TERMINATE, flow=flow)
        logger.info("Terminated flow %s -> %s: %s", flow.payer, flow.payee, tx_hash)
        return Submission(operation=FlowOperation.TERMINATE, flow=flow, tx_hash=tx_hash)

    def wait_for_confirmation(
        self,
        submission: Submission,
        *,
        timeout: Optional[float] = None,
        poll_interval: float = 1.0,
    ) -> Confirmation:
        """Block until `submission` is mined.

        `timeout=None` waits indefinitely.

        Raises:
            CallRejectedError: The transaction was mined but reverted.
            TransportError: `timeout` elapsed first; the outcome is unknown.
                Also raised for a receipt without a status.
        """
        tx_hash = submission.tx_hash
        if tx_hash is None:
            return Confirmation(tx_hash=None)

        started = time.monotonic()
        while True:
            receipt = self._chain.get_transaction_receipt(tx_hash)
            if receipt is not None:
                break
            if timeout is not None and time.monotonic() - started >= timeout:
                raise TransportError(
                    f"timed out after {timeout}s waiting for {tx_hash}"
                )
            time.sleep(poll_interval)

        try:
            status = _receipt_int(receipt, "status")
            if status is None:
                raise TransportError(f"receipt for {tx_hash} carries no status")
            confirmation = Confirmation(
                tx_hash=tx_hash,
                block_number=_receipt_int(receipt, "blockNumber"),
                gas_used=_receipt_int(receipt, "gasUsed"),
                succeeded=status == 1,
            )
        except (TypeError, ValueError) as e:
            raise TransportError(f"malformed receipt for {tx_hash}") from e
        if not confirmation.succeeded:
            raise CallRejectedError(
                f"{submission.operation.value} transaction {tx_hash} reverted",
                data=receipt,
            )
        return confirmation
