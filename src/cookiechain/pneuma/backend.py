"""
Chain backend interface.

A backend wraps one client library and turns its exceptions into the
bootstrap error taxonomy:

- connect          -> ChainConnectionError
- derive_identity  -> InvalidSecretError
- bind_contract    -> AbiLoadError
- query            -> QueryError
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from ..models import ConnectionHandle, ContractHandle, SigningIdentity
from .abi import ContractAbi

if TYPE_CHECKING:
    from ..config import BootstrapConfig


class ChainBackend(Protocol):
    network: str

    async def connect(self, endpoint: str) -> ConnectionHandle:
        ...

    async def derive_identity(self, secret_phrase: str) -> SigningIdentity:
        ...

    async def bind_contract(
        self, connection: ConnectionHandle, abi: ContractAbi, address: str
    ) -> ContractHandle:
        ...

    async def query(
        self,
        contract: ContractHandle,
        identity: SigningIdentity,
        message: str,
        args: Any = None,
    ) -> Any:
        ...


def get_backend(config: "BootstrapConfig") -> ChainBackend:
    """Build the backend for ``config.network``."""
    if config.network == "substrate":
        from .substrate import SubstrateBackend

        return SubstrateBackend(ss58_format=config.ss58_format, timeout=config.timeout)

    if config.network == "evm":
        from .rpc import EvmBackend

        return EvmBackend(derivation_path=config.derivation_path, timeout=config.timeout)

    raise ValueError(f"No backend for network {config.network!r}")
