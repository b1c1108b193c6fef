"""Shared fixtures: a scripted chain backend and ABI files on disk."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import pytest

from cookiechain.errors import AbiLoadError, ChainConnectionError, QueryError
from cookiechain.models import ConnectionHandle, ContractHandle, SigningIdentity
from cookiechain.pneuma.abi import ContractAbi
from cookiechain.sigil.keys import derive_secp256k1

# Hardhat / Anvil default account #0
TEST_MNEMONIC = "test test test test test test test test test test test junk"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"

# Substrate dev account //Alice
ALICE_URI = "//Alice"
ALICE_ADDRESS = "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY"


class FakeBackend:
    """In-memory ChainBackend that records the steps it was asked to run."""

    network = "fake"

    def __init__(
        self,
        chain: str = "testnet",
        fail_connect: bool = False,
        query_error: Optional[str] = None,
        value: Any = 3,
    ) -> None:
        self.chain = chain
        self.fail_connect = fail_connect
        self.query_error = query_error
        self.value = value
        self.calls: list[str] = []

    async def connect(self, endpoint: str) -> ConnectionHandle:
        self.calls.append("connect")
        if self.fail_connect:
            raise ChainConnectionError(f"Cannot connect to {endpoint}: refused")
        return ConnectionHandle(endpoint=endpoint, network=self.network, chain=self.chain)

    async def derive_identity(self, secret_phrase: str) -> SigningIdentity:
        self.calls.append("identity")
        return derive_secp256k1(secret_phrase)

    async def bind_contract(
        self, connection: ConnectionHandle, abi: ContractAbi, address: str
    ) -> ContractHandle:
        self.calls.append("contract")
        if not connection.connected:
            raise AbiLoadError("connection closed")
        return ContractHandle(address=address, abi=abi, connection=connection)

    async def query(
        self,
        contract: ContractHandle,
        identity: SigningIdentity,
        message: str,
        args: Any = None,
    ) -> Any:
        self.calls.append("query")
        if contract.abi.resolve(message) is None:
            raise QueryError(f"Contract {contract.address} has no message {message!r}")
        if self.query_error:
            raise QueryError(self.query_error)
        return self.value


@pytest.fixture()
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
def message_abi(tmp_path: Path) -> Path:
    """ABI as a plain message map."""
    path = tmp_path / "cookie_chain.json"
    path.write_text(
        json.dumps({"cookiesCount": {"args": [], "returnType": "u32", "mutates": False}}),
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def ink_abi(tmp_path: Path) -> Path:
    """Trimmed cargo-contract v4 metadata for the cookie contract."""
    path = tmp_path / "cookie_contract.json"
    metadata = {
        "source": {"hash": "0x00", "language": "ink! 4.3.0", "compiler": "rustc 1.72.0"},
        "contract": {"name": "cookie_contract", "version": "0.1.0", "authors": []},
        "version": "4",
        "types": [],
        "storage": {},
        "spec": {
            "constructors": [{"label": "new", "args": [], "selector": "0x9bae9d5e"}],
            "messages": [
                {"label": "register_cookie", "mutates": True, "selector": "0x01000001", "args": []},
                {"label": "get_cookie", "mutates": False, "selector": "0x01000002", "args": []},
                {"label": "get_cookie_count", "mutates": False, "selector": "0x01000003", "args": []},
                {"label": "get_owner", "mutates": False, "selector": "0x01000004", "args": []},
            ],
            "events": [],
        },
    }
    path.write_text(json.dumps(metadata), encoding="utf-8")
    return path


ERC_COOKIE_ABI = [
    {
        "type": "function",
        "name": "cookiesCount",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "cookieOwner",
        "inputs": [{"name": "cookie", "type": "string"}],
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
    },
    {
        "type": "event",
        "name": "CookieRegistered",
        "inputs": [],
        "anonymous": False,
    },
]


@pytest.fixture()
def truffle_abi(tmp_path: Path) -> Path:
    """Truffle build artifact with a deployment on network 5777."""
    path = tmp_path / "Cookiechain.json"
    artifact = {
        "contractName": "Cookiechain",
        "abi": ERC_COOKIE_ABI,
        "networks": {
            "5777": {"address": "0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed"},
        },
    }
    path.write_text(json.dumps(artifact), encoding="utf-8")
    return path
