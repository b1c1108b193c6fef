"""
Substrate backend for ink! contracts (Aleph Zero testnet and friends).

substrate-interface is a blocking websocket client, so every network
call runs in a worker thread via ``asyncio.to_thread``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from substrateinterface import SubstrateInterface
from substrateinterface.contracts import ContractInstance, ContractMetadata

from ..config import DEFAULT_SS58_FORMAT, DEFAULT_TIMEOUT
from ..errors import AbiLoadError, ChainConnectionError, QueryError
from ..models import ConnectionHandle, ContractHandle, SigningIdentity
from ..sigil.keys import derive_sr25519
from .abi import INK, ContractAbi

logger = logging.getLogger(__name__)


def _unwrap(value: Any, message: str) -> Any:
    """Strip ink! ``Result`` wrappers: {"Ok": {"Ok": 3}} -> 3."""
    while isinstance(value, dict) and len(value) == 1:
        if "Ok" in value:
            value = value["Ok"]
        elif "Err" in value:
            raise QueryError(f"{message} returned an error: {value['Err']}")
        else:
            break
    return value


class SubstrateBackend:
    network = "substrate"

    def __init__(self, ss58_format: int = DEFAULT_SS58_FORMAT, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.ss58_format = ss58_format
        self.timeout = timeout

    def _open(self, endpoint: str) -> tuple[SubstrateInterface, str]:
        substrate = SubstrateInterface(
            url=endpoint,
            ss58_format=self.ss58_format,
            ws_options={"timeout": self.timeout},
        )
        # system_chain doubles as the handshake check
        return substrate, str(substrate.chain)

    async def connect(self, endpoint: str) -> ConnectionHandle:
        logger.debug("opening websocket to %s", endpoint)
        try:
            substrate, chain = await asyncio.to_thread(self._open, endpoint)
        except Exception as exc:
            raise ChainConnectionError(f"Cannot connect to {endpoint}: {exc}") from exc
        return ConnectionHandle(endpoint=endpoint, network=self.network, chain=chain, client=substrate)

    async def derive_identity(self, secret_phrase: str) -> SigningIdentity:
        return derive_sr25519(secret_phrase, ss58_format=self.ss58_format)

    async def bind_contract(
        self, connection: ConnectionHandle, abi: ContractAbi, address: str
    ) -> ContractHandle:
        if abi.format != INK:
            raise AbiLoadError(f"{abi.path} is {abi.format} format; Substrate contracts need ink! metadata")

        try:
            metadata = ContractMetadata(metadata_dict=abi.document, substrate=connection.client)
        except (ValueError, KeyError, TypeError, NotImplementedError) as exc:
            raise AbiLoadError(f"Unsupported ink! metadata in {abi.path}: {exc}") from exc

        instance = ContractInstance(
            contract_address=address, metadata=metadata, substrate=connection.client
        )
        return ContractHandle(address=address, abi=abi, connection=connection, instance=instance)

    async def query(
        self,
        contract: ContractHandle,
        identity: SigningIdentity,
        message: str,
        args: Any = None,
    ) -> Any:
        label = contract.abi.resolve(message)
        if label is None:
            raise QueryError(f"Contract {contract.address} has no message {message!r}")

        logger.debug("dry-run %s(%s) on %s as %s", label, args, contract.address, identity.address)
        try:
            result = await asyncio.to_thread(
                contract.instance.read, identity.signer, label, args or {}
            )
            data = result.contract_result_data
            return _unwrap(getattr(data, "value", data), message)
        except QueryError:
            raise
        except Exception as exc:
            raise QueryError(f"{message} failed: {exc}") from exc
