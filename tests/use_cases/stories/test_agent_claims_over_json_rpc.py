"""Story: Agent claims and releases tiles through a JSON-RPC node."""

from __future__ import annotations

from eth_utils import function_signature_to_4byte_selector

from flowclaim.application.shared.agreement_calls import (
    decode_call_agreement,
    decode_flow_call,
)
from flowclaim.client.session import open_flow_client
from flowclaim.crypto.order_codec import decode_orders
from flowclaim.domain.entities import ClaimOrder
from flowclaim.env import Settings
from tests.fixtures import RpcFault, ScriptedNode

FLOW_DOES_NOT_EXIST = (
    "0x" + function_signature_to_4byte_selector("CFA_FLOW_DOES_NOT_EXIST()").hex()
)


def _settings(private_key: str) -> Settings:
    return Settings(rpc_url="https://rpc.example.test", private_key=private_key)


def test_agent_claims_and_releases_over_json_rpc(
    payer_private_key: str,
    payer_address: str,
    single_order: ClaimOrder,
) -> None:
    """
    Story: establish then terminate, each a single signed host transaction.
    """
    node = ScriptedNode()
    node.handlers["eth_getTransactionReceipt"] = lambda params: {
        "status": "0x1",
        "blockNumber": "0x10",
        "gasUsed": "0x30d40",
    }
    settings = _settings(payer_private_key)

    with open_flow_client(settings, transport=node.transport()) as client:
        assert client.payer == payer_address

        established = client.establish([single_order])
        confirmation = client.wait_for_confirmation(established, timeout=1)
        terminated = client.terminate()

    assert confirmation.block_number == 16
    assert terminated.tx_hash is not None
    assert len(node.raw_transactions) == 2
    assert all(node.sender_of(raw) == payer_address for raw in node.raw_transactions)

    estimate = [r["params"][0] for r in node.requests if r["method"] == "eth_estimateGas"]
    assert [e["to"] for e in estimate] == [settings.flow.host_address] * 2

    establish_call = decode_call_agreement(bytes.fromhex(estimate[0]["data"][2:]))
    assert decode_orders(establish_call.user_data) == [single_order]
    assert decode_flow_call(establish_call.call_data).name == "createFlow"

    terminate_call = decode_call_agreement(bytes.fromhex(estimate[1]["data"][2:]))
    assert terminate_call.user_data == b""
    assert decode_flow_call(terminate_call.call_data).sender == payer_address


def test_agent_releases_absent_flow_over_json_rpc(payer_private_key: str) -> None:
    """
    Story: the node reverts deleteFlow during simulation; terminate still succeeds.
    """
    node = ScriptedNode()

    def revert(params):
        raise RpcFault(3, "execution reverted", FLOW_DOES_NOT_EXIST)

    node.handlers["eth_estimateGas"] = revert

    with open_flow_client(_settings(payer_private_key), transport=node.transport()) as client:
        first = client.terminate()
        second = client.terminate()

    assert first.tx_hash is None
    assert second.tx_hash is None
    assert node.raw_transactions == []


def test_agent_releases_absent_flow_with_fixed_gas_limit(payer_private_key: str) -> None:
    """
    Story: with GAS_LIMIT configured, the node reverts deleteFlow during
    eth_call; terminate succeeds without broadcasting and confirms at once.
    """
    node = ScriptedNode()

    def revert(params):
        raise RpcFault(3, "execution reverted", FLOW_DOES_NOT_EXIST)

    node.handlers["eth_call"] = revert
    node.handlers["eth_getTransactionReceipt"] = lambda params: {"status": "0x0"}
    settings = Settings(
        rpc_url="https://rpc.example.test",
        private_key=payer_private_key,
        gas_limit=500_000,
    )

    with open_flow_client(settings, transport=node.transport()) as client:
        submission = client.terminate()
        confirmation = client.wait_for_confirmation(submission, timeout=1)

    assert submission.broadcast is False
    assert confirmation.succeeded is True
    assert node.raw_transactions == []
    assert "eth_estimateGas" not in node.methods()
    assert "eth_getTransactionReceipt" not in node.methods()
