"""Shared test fixtures."""

import pytest

from src.chain.rpc_client import RpcError
from tests.helpers import FakeRpc


@pytest.fixture
def fake_rpc() -> FakeRpc:
    return FakeRpc()


@pytest.fixture
def rpc_error() -> RpcError:
    return RpcError("getAccountInfo", "HTTP 503")
