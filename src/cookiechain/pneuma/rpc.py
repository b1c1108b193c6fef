"""
EVM backend: JSON-RPC over httpx, calldata through eth-abi.

Only ``eth_chainId`` and ``eth_call`` are used, so the account never
signs anything; its address is sent as ``from`` on the dry run.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

import httpx
from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError
from eth_hash.auto import keccak

from ..config import DEFAULT_DERIVATION_PATH, DEFAULT_TIMEOUT
from ..errors import AbiLoadError, ChainConnectionError, QueryError
from ..models import ConnectionHandle, ContractHandle, SigningIdentity
from ..sigil.keys import derive_secp256k1
from .abi import EVM, ContractAbi

logger = logging.getLogger(__name__)

_ADDRESS = re.compile(r"^0x[0-9a-fA-F]{40}$")


class RpcError(RuntimeError):
    """The node answered with a JSON-RPC error object or a malformed reply."""


def _to_checksum_address(address: str) -> str:
    """EIP-55 mixed-case form of a 20-byte hex address."""
    digits = address[2:].lower() if address.startswith("0x") else address.lower()
    nibbles = keccak(digits.encode("ascii")).hex()
    return "0x" + "".join(
        char.upper() if char.isalpha() and int(nibble, 16) >= 8 else char
        for char, nibble in zip(digits, nibbles)
    )


async def _rpc_call(client: httpx.AsyncClient, method: str, params: list) -> Any:
    """POST one JSON-RPC request and return its ``result`` member.

    httpx errors propagate; error objects and replies that are not a
    JSON object raise RpcError.
    """
    logger.debug("rpc -> %s %s", method, params)
    response = await client.post("", json={"jsonrpc": "2.0", "id": 1, "method": method, "params": params})
    response.raise_for_status()
    try:
        reply = response.json()
    except ValueError as exc:
        raise RpcError(f"Invalid JSON-RPC response: {exc}") from exc

    if not isinstance(reply, dict):
        raise RpcError(f"Invalid JSON-RPC response: expected an object, got {type(reply).__name__}")
    if "error" in reply:
        raise RpcError(f"RPC error: {reply['error']}")

    logger.debug("rpc <- %s %s", method, reply.get("result"))
    return reply.get("result")


def _find_function(entries: list, name: str) -> dict:
    for entry in entries:
        if entry.get("type", "function") == "function" and entry.get("name") == name:
            return entry
    raise ValueError(f"Function {name} not found in ABI")


def _param_types(params: list) -> list:
    return [param["type"] for param in params]


def _encode_function_call(entries: list, name: str, args: list) -> str:
    """Selector of ``name(types...)`` followed by the encoded arguments, as 0x-hex."""
    input_types = _param_types(_find_function(entries, name).get("inputs", []))
    selector = keccak(f"{name}({','.join(input_types)})".encode("utf-8"))[:4]
    encoded = encode(input_types, args) if args else b""
    return "0x" + (selector + encoded).hex()


def _decode_function_result(entries: list, name: str, data: str) -> Any:
    output_types = _param_types(_find_function(entries, name).get("outputs", []))
    if not output_types:
        return None

    values = decode(output_types, bytes.fromhex(data[2:] if data.startswith("0x") else data))
    return values[0] if len(values) == 1 else values


class EvmBackend:
    network = "evm"

    def __init__(
        self,
        derivation_path: str = DEFAULT_DERIVATION_PATH,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.derivation_path = derivation_path
        self.timeout = timeout
        self.transport = transport

    async def connect(self, endpoint: str) -> ConnectionHandle:
        client = httpx.AsyncClient(base_url=endpoint, timeout=self.timeout, transport=self.transport)
        try:
            chain_id = int(await _rpc_call(client, "eth_chainId", []), 16)
        except (httpx.HTTPError, RpcError, TypeError, ValueError) as exc:
            await client.aclose()
            raise ChainConnectionError(f"Cannot connect to {endpoint}: {exc}") from exc
        return ConnectionHandle(endpoint=endpoint, network=self.network, chain=str(chain_id), client=client)

    async def derive_identity(self, secret_phrase: str) -> SigningIdentity:
        return derive_secp256k1(secret_phrase, derivation_path=self.derivation_path)

    async def bind_contract(
        self, connection: ConnectionHandle, abi: ContractAbi, address: str
    ) -> ContractHandle:
        if abi.format != EVM:
            raise AbiLoadError(f"{abi.path} is {abi.format} format; EVM contracts need an ABI list")
        if not _ADDRESS.match(address):
            raise AbiLoadError(f"Invalid EVM contract address: {address}")
        return ContractHandle(
            address=_to_checksum_address(address), abi=abi, connection=connection
        )

    async def query(
        self,
        contract: ContractHandle,
        identity: SigningIdentity,
        message: str,
        args: Any = None,
    ) -> Any:
        label = contract.abi.resolve(message)
        if label is None:
            raise QueryError(f"Contract {contract.address} has no function {message!r}")

        entries = contract.abi.evm_entries
        try:
            calldata = _encode_function_call(entries, label, list(args or []))
            result = await _rpc_call(
                contract.connection.client,
                "eth_call",
                [
                    {"from": identity.address, "to": contract.address, "data": calldata, "value": "0x0"},
                    "latest",
                ],
            )
            if result is None or result == "0x":
                return None
            if not isinstance(result, str):
                raise RpcError(f"eth_call returned {type(result).__name__}, expected hex data")
            return _decode_function_result(entries, label, result)
        except (httpx.HTTPError, RpcError, TypeError, ValueError, EncodingError, DecodingError) as exc:
            raise QueryError(f"{message} failed: {exc}") from exc
