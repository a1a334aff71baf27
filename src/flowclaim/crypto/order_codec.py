"""ABI codec for the claim order payload understood by the mission controller.

Wire format: `(int256 x, int256 y, int256 z, uint256 resourceId, address owner)[]`.
A single claim is still sent as a one-element list. The payload carries no
version marker; the codec must match the deployed controller.
"""

from __future__ import annotations

from typing import Final

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError
from eth_utils import is_address, to_checksum_address

from ..domain.entities import ClaimOrder, OrderBatch
from ..domain.errors import EncodingRangeError, PayloadDecodeError

ORDER_TUPLE_ABI_TYPE: Final[str] = "(int256,int256,int256,uint256,address)"
ORDER_BATCH_ABI_TYPE: Final[str] = f"{ORDER_TUPLE_ABI_TYPE}[]"

INT256_MIN: Final[int] = -(2**255)
INT256_MAX: Final[int] = 2**255 - 1
UINT256_MAX: Final[int] = 2**256 - 1


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_order(order: ClaimOrder) -> None:
    """Raise EncodingRangeError if `order` does not fit the wire types."""
    if len(order.position) != 3:
        raise EncodingRangeError(
            f"position must have exactly 3 coordinates, got {len(order.position)}"
        )
    for axis, value in zip("xyz", order.position):
        if not _is_int(value):
            raise EncodingRangeError(f"{axis} must be an integer, got {value!r}")
        if value < INT256_MIN or value > INT256_MAX:
            raise EncodingRangeError(f"{axis}={value} is outside the int256 range")
    if not _is_int(order.resource_id):
        raise EncodingRangeError(
            f"resource_id must be an integer, got {order.resource_id!r}"
        )
    if order.resource_id < 0 or order.resource_id > UINT256_MAX:
        raise EncodingRangeError(
            f"resource_id={order.resource_id} is outside the uint256 range"
        )
    if not isinstance(order.resource_owner, str) or not is_address(
        order.resource_owner
    ):
        raise EncodingRangeError(
            f"resource_owner is not a valid address: {order.resource_owner!r}"
        )


def encode_orders(orders: OrderBatch) -> bytes:
    """Encode `orders` in the given order. Deterministic; validates everything first."""
    orders = list(orders)
    if not orders:
        raise EncodingRangeError("an order batch must contain at least one order")
    for order in orders:
        validate_order(order)

    rows = [
        (order.x, order.y, order.z, order.resource_id, order.resource_owner)
        for order in orders
    ]
    try:
        return encode([ORDER_BATCH_ABI_TYPE], [rows])
    except EncodingError as e:
        raise EncodingRangeError(str(e)) from e


def decode_orders(payload: bytes) -> list[ClaimOrder]:
    """Inverse of `encode_orders`."""
    try:
        (rows,) = decode([ORDER_BATCH_ABI_TYPE], payload)
    except (DecodingError, OverflowError) as e:
        raise PayloadDecodeError(f"not an encoded order batch: {e}") from e
    return [
        ClaimOrder(
            position=(x, y, z),
            resource_id=resource_id,
            resource_owner=to_checksum_address(owner),
        )
        for x, y, z, resource_id, owner in rows
    ]
