from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional, Union

from .errors import BootstrapError

if TYPE_CHECKING:
    from .pneuma.abi import ContractAbi


@dataclass
class ConnectionHandle:
    """Live link to a network endpoint.

    Attributes:
        endpoint: URL the client connected to
        network: Backend kind ("substrate" or "evm")
        chain: Chain name (Substrate) or chain id (EVM) reported by the node
        client: Underlying library client object
    """
    endpoint: str
    network: str
    chain: str
    client: Any = field(default=None, repr=False, compare=False)
    connected: bool = True

    async def close(self) -> None:
        if not self.connected:
            return
        self.connected = False
        closer = getattr(self.client, "aclose", None)
        if closer is not None:
            await closer()
            return
        closer = getattr(self.client, "close", None)
        if closer is not None:
            # blocking websocket teardown (substrate-interface)
            await asyncio.to_thread(closer)


@dataclass(frozen=True)
class SigningIdentity:
    address: str
    scheme: str
    signer: Any = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class ContractHandle:
    address: str
    abi: "ContractAbi"
    connection: ConnectionHandle = field(repr=False, compare=False)
    instance: Any = field(default=None, repr=False, compare=False)

    @property
    def message_names(self) -> frozenset[str]:
        return self.abi.message_names


@dataclass(frozen=True)
class QueryResult:
    message: str
    caller: str
    value: Any

    def __str__(self) -> str:
        return str(self.value)


# ============ Step outcomes ============


@dataclass(frozen=True)
class Ok:
    value: Any


@dataclass(frozen=True)
class Err:
    error: BootstrapError


Outcome = Union[Ok, Err]


class TerminalState(str, enum.Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    SUCCEEDED_WITH_WARNING = "succeeded_with_warning"
    FAILED = "failed"


@dataclass
class BootstrapResult:
    """Handles accumulated by one bootstrap run, plus per-step outcomes."""
    connection: Optional[ConnectionHandle] = None
    identity: Optional[SigningIdentity] = None
    contract: Optional[ContractHandle] = None
    query: Optional[QueryResult] = None
    outcomes: list[tuple[str, Outcome]] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    state: TerminalState = TerminalState.PENDING

    def record(self, step: str, outcome: Outcome) -> None:
        self.outcomes.append((step, outcome))

    @property
    def steps(self) -> list[str]:
        return [step for step, _ in self.outcomes]

    @property
    def ok(self) -> bool:
        return self.state in (TerminalState.SUCCEEDED, TerminalState.SUCCEEDED_WITH_WARNING)


__all__ = [
    "BootstrapResult",
    "ConnectionHandle",
    "ContractHandle",
    "Err",
    "Ok",
    "Outcome",
    "QueryResult",
    "SigningIdentity",
    "TerminalState",
]
