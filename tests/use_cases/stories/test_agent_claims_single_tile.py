"""Story: Agent claims one tile by opening a flow to the mission controller."""

from __future__ import annotations

from flowclaim.application.flow_lifecycle import FlowLifecycleClient
from flowclaim.application.shared.agreement_calls import (
    decode_call_agreement,
    decode_flow_call,
)
from flowclaim.crypto.order_codec import decode_orders
from flowclaim.domain.entities import ClaimOrder, FlowConfig
from tests.fixtures import FakeChainClient


def test_agent_claims_single_tile(
    flow_client: FlowLifecycleClient,
    chain: FakeChainClient,
    flow_config: FlowConfig,
) -> None:
    """
    Story: Establish with one order produces exactly that one-tuple payload
    at the fixed rate.
    """
    # Given: one tile at (3, -1, 0)
    order = ClaimOrder(
        position=(3, -1, 0), resource_id=42, resource_owner="0x" + "aa" * 20
    )

    # When: the agent establishes the flow
    submission = flow_client.establish([order])

    # Then: a single host call carries the order and the fixed rate
    assert len(chain.sent) == 1
    _, data = chain.sent[0]
    wrapped = decode_call_agreement(data)
    assert decode_orders(wrapped.user_data) == [order]
    assert decode_flow_call(wrapped.call_data).flow_rate == flow_config.flow_rate
    assert submission.flow.flow_rate == flow_config.flow_rate

    # And: the network now holds an active flow from the agent to the controller
    key = (flow_config.token_address, chain.address, flow_config.controller_address)
    assert chain.flows[key] == flow_config.flow_rate
