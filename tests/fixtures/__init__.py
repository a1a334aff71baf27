"""Test fixtures for in-memory implementations."""

from .fake_chain_client import FakeChainClient
from .rpc_node import RpcFault, ScriptedNode

__all__ = ["FakeChainClient", "RpcFault", "ScriptedNode"]
