"""Wires settings into a ready-to-use FlowLifecycleClient."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

import httpx
from eth_account import Account

from ..application.flow_lifecycle import FlowLifecycleClient
from ..env import Settings
from ..infrastructure.chain.json_rpc_client import JsonRpcClient
from ..infrastructure.chain.signed_chain_client import SignedChainClient
from ..infrastructure.http.http_client import HttpClient


@contextmanager
def open_flow_client(
    settings: Settings,
    transport: Optional[httpx.BaseTransport] = None,
) -> Iterator[FlowLifecycleClient]:
    """Yield a FlowLifecycleClient signing with `settings.private_key`.

    The underlying HTTP connection is closed on exit.
    """
    http = HttpClient(settings.rpc_url, timeout=settings.rpc_timeout, transport=transport)
    rpc = JsonRpcClient(http)
    try:
        chain = SignedChainClient(
            rpc,
            Account.from_key(settings.private_key),
            chain_id=settings.chain_id,
            gas_limit=settings.gas_limit,
        )
        yield FlowLifecycleClient(settings.flow, chain)
    finally:
        rpc.close()
