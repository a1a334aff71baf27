"""Shared pytest fixtures for flow lifecycle tests."""

from __future__ import annotations

import pytest
from eth_account import Account

from flowclaim.application.flow_lifecycle import FlowLifecycleClient
from flowclaim.domain.entities import ClaimOrder, FlowConfig
from tests.fixtures import FakeChainClient

# Well-known throwaway key; never funded on any network.
PAYER_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
RESOURCE_OWNER = "0x" + "aa" * 20


@pytest.fixture
def payer_private_key() -> str:
    return PAYER_PRIVATE_KEY


@pytest.fixture
def payer_address() -> str:
    return Account.from_key(PAYER_PRIVATE_KEY).address


@pytest.fixture
def flow_config() -> FlowConfig:
    """Default Mumbai deployment."""
    return FlowConfig()


@pytest.fixture
def chain(payer_address: str) -> FakeChainClient:
    return FakeChainClient(payer_address)


@pytest.fixture
def flow_client(flow_config: FlowConfig, chain: FakeChainClient) -> FlowLifecycleClient:
    return FlowLifecycleClient(flow_config, chain)


@pytest.fixture
def single_order() -> ClaimOrder:
    return ClaimOrder(position=(3, -1, 0), resource_id=42, resource_owner=RESOURCE_OWNER)


@pytest.fixture
def order_batch() -> list[ClaimOrder]:
    return [
        ClaimOrder(position=(3, -1, 0), resource_id=42, resource_owner=RESOURCE_OWNER),
        ClaimOrder(position=(-7, 12, 5), resource_id=1, resource_owner=RESOURCE_OWNER),
        ClaimOrder(
            position=(0, 0, -1),
            resource_id=2**200,
            resource_owner="0x" + "12" * 20,
        ),
    ]
