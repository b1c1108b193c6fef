__all__ = [
    # Configuration
    "BootstrapConfig",
    "load_config",
    "save_secret_phrase",
    # Sequencer
    "run",
    # Entities
    "BootstrapResult",
    "ConnectionHandle",
    "ContractHandle",
    "Err",
    "Ok",
    "QueryResult",
    "SigningIdentity",
    "TerminalState",
    # Errors
    "AbiLoadError",
    "BootstrapError",
    "ChainConnectionError",
    "InvalidSecretError",
    "QueryError",
    # ABI
    "ContractAbi",
    "load_abi",
    # Identity
    "derive_secp256k1",
    "derive_sr25519",
    # Backends
    "ChainBackend",
    "get_backend",
]

from .bootstrap import run
from .config import BootstrapConfig, load_config, save_secret_phrase
from .errors import (
    AbiLoadError,
    BootstrapError,
    ChainConnectionError,
    InvalidSecretError,
    QueryError,
)
from .models import (
    BootstrapResult,
    ConnectionHandle,
    ContractHandle,
    Err,
    Ok,
    QueryResult,
    SigningIdentity,
    TerminalState,
)
from .pneuma.abi import ContractAbi, load_abi
from .pneuma.backend import ChainBackend, get_backend
from .sigil.keys import derive_secp256k1, derive_sr25519
