"""Signs calls with a local key and submits them through a JSON-RPC node."""

from __future__ import annotations

import logging
from typing import Any, Optional

from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address

from ...domain.errors import TransportError
from ..timing import log_timing
from .json_rpc_client import JsonRpcClient

logger = logging.getLogger(__name__)


def _quantity(value: Any, field: str) -> int:
    if not isinstance(value, str):
        raise TransportError(f"node returned no {field}")
    try:
        return int(value, 16)
    except ValueError as e:
        raise TransportError(f"node returned a malformed {field}: {value!r}") from e


class SignedChainClient:
    """Implements ChainClientProtocol for one local account.

    Every call is simulated first, so contract reverts are reported as
    `CallRejectedError` before anything is broadcast. Without a fixed
    `gas_limit` the simulation is `eth_estimateGas`; with one it is an
    `eth_call` against the pending block and the limit is used as is.
    """

    def __init__(
        self,
        rpc: JsonRpcClient,
        account: LocalAccount,
        chain_id: int,
        gas_limit: Optional[int] = None,
    ) -> None:
        self._rpc = rpc
        self._account = account
        self._chain_id = chain_id
        self._gas_limit = gas_limit

    @property
    def address(self) -> str:
        return to_checksum_address(self._account.address)

    def _estimate_gas(self, to: str, data_hex: str) -> int:
        call = {"from": self.address, "to": to, "data": data_hex}
        if self._gas_limit is not None:
            self._rpc.request("eth_call", [call, "pending"])
            return self._gas_limit
        estimate = self._rpc.request("eth_estimateGas", [call])
        return _quantity(estimate, "gas estimate")

    @log_timing("send_call")
    def send_call(self, to: str, data: bytes) -> str:
        to = to_checksum_address(to)
        data_hex = "0x" + data.hex()

        gas = self._estimate_gas(to, data_hex)
        gas_price = _quantity(self._rpc.request("eth_gasPrice"), "gas price")
        nonce = _quantity(
            self._rpc.request("eth_getTransactionCount", [self.address, "pending"]),
            "nonce",
        )
        tx = {
            "chainId": self._chain_id,
            "nonce": nonce,
            "gas": gas,
            "gasPrice": gas_price,
            "to": to,
            "value": 0,
            "data": data_hex,
        }
        signed = self._account.sign_transaction(tx)
        raw_hex = signed.raw_transaction.hex()
        if not raw_hex.startswith("0x"):
            raw_hex = "0x" + raw_hex

        tx_hash = self._rpc.request("eth_sendRawTransaction", [raw_hex])
        if not isinstance(tx_hash, str):
            raise TransportError("node returned no transaction hash")
        logger.debug("submitted %s to %s (nonce=%d gas=%d)", tx_hash, to, nonce, gas)
        return tx_hash

    def get_transaction_receipt(self, tx_hash: str) -> Optional[dict[str, Any]]:
        receipt = self._rpc.request("eth_getTransactionReceipt", [tx_hash])
        if receipt is None:
            return None
        if not isinstance(receipt, dict):
            raise TransportError(f"malformed receipt for {tx_hash}: {receipt!r}")
        return receipt
