"""ABI call data for the Superfluid host and Constant Flow Agreement v1.

Flow calls are never sent to the agreement directly: they are wrapped in
`callAgreement` on the host, which fills the `ctx` placeholder and forwards
`userData` to the receiving super app.
"""

from __future__ import annotations

from typing import Final, NamedTuple

from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector, to_checksum_address

CREATE_FLOW_SIGNATURE: Final[str] = "createFlow(address,address,int96,bytes)"
UPDATE_FLOW_SIGNATURE: Final[str] = "updateFlow(address,address,int96,bytes)"
DELETE_FLOW_SIGNATURE: Final[str] = "deleteFlow(address,address,address,bytes)"
CALL_AGREEMENT_SIGNATURE: Final[str] = "callAgreement(address,bytes,bytes)"

CREATE_FLOW_SELECTOR: Final[bytes] = function_signature_to_4byte_selector(
    CREATE_FLOW_SIGNATURE
)
UPDATE_FLOW_SELECTOR: Final[bytes] = function_signature_to_4byte_selector(
    UPDATE_FLOW_SIGNATURE
)
DELETE_FLOW_SELECTOR: Final[bytes] = function_signature_to_4byte_selector(
    DELETE_FLOW_SIGNATURE
)
CALL_AGREEMENT_SELECTOR: Final[bytes] = function_signature_to_4byte_selector(
    CALL_AGREEMENT_SIGNATURE
)

_RATE_CALL_TYPES: Final[list[str]] = ["address", "address", "int96", "bytes"]
_DELETE_CALL_TYPES: Final[list[str]] = ["address", "address", "address", "bytes"]
_CALL_AGREEMENT_TYPES: Final[list[str]] = ["address", "bytes", "bytes"]

# Placeholder for the host-provided context argument.
EMPTY_CTX: Final[bytes] = b""


class AgreementCall(NamedTuple):
    agreement: str
    call_data: bytes
    user_data: bytes


class FlowCall(NamedTuple):
    """Decoded inner CFA call. `flow_rate` is None for deleteFlow."""

    name: str
    token: str
    sender: str | None
    receiver: str
    flow_rate: int | None


def encode_create_flow(token: str, receiver: str, flow_rate: int) -> bytes:
    return CREATE_FLOW_SELECTOR + encode(
        _RATE_CALL_TYPES, [token, receiver, flow_rate, EMPTY_CTX]
    )


def encode_update_flow(token: str, receiver: str, flow_rate: int) -> bytes:
    return UPDATE_FLOW_SELECTOR + encode(
        _RATE_CALL_TYPES, [token, receiver, flow_rate, EMPTY_CTX]
    )


def encode_delete_flow(token: str, sender: str, receiver: str) -> bytes:
    return DELETE_FLOW_SELECTOR + encode(
        _DELETE_CALL_TYPES, [token, sender, receiver, EMPTY_CTX]
    )


def encode_call_agreement(agreement: str, call_data: bytes, user_data: bytes) -> bytes:
    """Host call data: run `call_data` against `agreement`, passing `user_data` along."""
    return CALL_AGREEMENT_SELECTOR + encode(
        _CALL_AGREEMENT_TYPES, [agreement, call_data, user_data]
    )


def decode_call_agreement(data: bytes) -> AgreementCall:
    if data[:4] != CALL_AGREEMENT_SELECTOR:
        raise ValueError("not a callAgreement call")
    agreement, call_data, user_data = decode(_CALL_AGREEMENT_TYPES, data[4:])
    return AgreementCall(to_checksum_address(agreement), call_data, user_data)


def decode_flow_call(call_data: bytes) -> FlowCall:
    selector, body = call_data[:4], call_data[4:]
    if selector in (CREATE_FLOW_SELECTOR, UPDATE_FLOW_SELECTOR):
        token, receiver, flow_rate, _ctx = decode(_RATE_CALL_TYPES, body)
        name = "createFlow" if selector == CREATE_FLOW_SELECTOR else "updateFlow"
        return FlowCall(
            name,
            to_checksum_address(token),
            None,
            to_checksum_address(receiver),
            flow_rate,
        )
    if selector == DELETE_FLOW_SELECTOR:
        token, sender, receiver, _ctx = decode(_DELETE_CALL_TYPES, body)
        return FlowCall(
            "deleteFlow",
            to_checksum_address(token),
            to_checksum_address(sender),
            to_checksum_address(receiver),
            None,
        )
    raise ValueError(f"unknown flow call selector 0x{selector.hex()}")
