"""
Bootstrap configuration.

Values come from the process environment, laid over the entries of
~/.cookiechain/.env.  The secret phrase has no default: it must be
injected through COOKIECHAIN_SECRET_PHRASE and is never written to
source control.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional
from urllib.parse import urlparse

from dotenv import dotenv_values, set_key


# Default config directory
COOKIECHAIN_DIR = Path.home() / ".cookiechain"
COOKIECHAIN_ENV = COOKIECHAIN_DIR / ".env"

DEFAULT_ENDPOINT = "wss://ws.test.azero.dev"  # Aleph Zero testnet
DEFAULT_ABI_PATH = Path("build") / "cookie_chain.json"
# Deployed cookiechain contract on the Aleph Zero testnet. EVM deployments
# are looked up in the artifact's "networks" table instead.
DEFAULT_CONTRACT_ADDRESS = "5GTrHGtgq3b4uX9vHmcuCssikFBzdbFXyQkJgKJm6e9EZQNT"
DEFAULT_CONTRACT_ADDRESSES = {"substrate": DEFAULT_CONTRACT_ADDRESS, "evm": None}
DEFAULT_QUERY = "cookiesCount"
DEFAULT_SS58_FORMAT = 42
DEFAULT_DERIVATION_PATH = "m/44'/60'/0'/0/0"
DEFAULT_TIMEOUT = 30.0

NETWORKS = ("substrate", "evm")

_SCHEME_NETWORKS = {
    "ws": "substrate",
    "wss": "substrate",
    "http": "evm",
    "https": "evm",
}

_NETWORK_DEFAULT: Any = object()


@dataclass(frozen=True)
class BootstrapConfig:
    """
    Everything one bootstrap run needs.

    Attributes:
        endpoint: Node URL (ws/wss for Substrate, http/https for EVM)
        secret_phrase: Mnemonic, derivation URI or 0x-prefixed hex seed
        abi_path: Path to the ABI / contract metadata JSON file
        contract_address: Deployed contract address; None resolves it
            from the artifact's "networks" table
            (default: the testnet deployment on Substrate, None on EVM)
        network: "substrate" or "evm"; inferred from the endpoint if empty
        query: Read-only message to call
        query_args: Message arguments (dict for ink!, list for EVM)
        ss58_format: Address format for Substrate accounts
        derivation_path: BIP-44 path for EVM accounts
        timeout: Per-request timeout in seconds
    """
    endpoint: str = DEFAULT_ENDPOINT
    secret_phrase: str = field(default="", repr=False)
    abi_path: Path = DEFAULT_ABI_PATH
    contract_address: Optional[str] = _NETWORK_DEFAULT
    network: str = ""
    query: str = DEFAULT_QUERY
    query_args: Any = None
    ss58_format: int = DEFAULT_SS58_FORMAT
    derivation_path: str = DEFAULT_DERIVATION_PATH
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        object.__setattr__(self, "abi_path", Path(self.abi_path))
        network = self.network or infer_network(self.endpoint)
        if network not in NETWORKS:
            raise ValueError(f"Unknown network {network!r}; expected one of {NETWORKS}")
        object.__setattr__(self, "network", network)
        if self.contract_address is _NETWORK_DEFAULT:
            object.__setattr__(self, "contract_address", DEFAULT_CONTRACT_ADDRESSES[network])


def infer_network(endpoint: str) -> str:
    """Pick the backend kind from the endpoint URL scheme."""
    scheme = urlparse(endpoint).scheme.lower()
    try:
        return _SCHEME_NETWORKS[scheme]
    except KeyError:
        raise ValueError(
            f"Cannot infer network from endpoint {endpoint!r}; "
            f"set COOKIECHAIN_NETWORK to one of {NETWORKS}"
        ) from None


def _env_number(env: Mapping[str, str], name: str, default: float, cast: type) -> Any:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_json(env: Mapping[str, str], name: str) -> Any:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"{name} must be valid JSON: {exc}") from None


def read_environment(env_path: Optional[Path] = None) -> dict[str, str]:
    """Variables from the .env file overlaid by the process environment.

    Exported variables win over the file, and os.environ is left untouched.
    """
    env_path = env_path or COOKIECHAIN_ENV
    env: dict[str, str] = {}
    if env_path.exists():
        env.update((k, v) for k, v in dotenv_values(env_path).items() if v is not None)
    env.update(os.environ)
    return env


def load_config(env_path: Optional[Path] = None, **overrides: Any) -> BootstrapConfig:
    """
    Build a BootstrapConfig from the environment.

    Args:
        env_path: Path to .env file (default: ~/.cookiechain/.env)
        **overrides: Field values that take precedence when not None

    Returns:
        BootstrapConfig

    Raises:
        ValueError: If a numeric or JSON variable cannot be parsed,
            or the network cannot be determined
    """
    env = read_environment(env_path)

    values: dict[str, Any] = {
        "endpoint": env.get("COOKIECHAIN_ENDPOINT", DEFAULT_ENDPOINT),
        "secret_phrase": env.get("COOKIECHAIN_SECRET_PHRASE", "").strip(),
        "abi_path": Path(env.get("COOKIECHAIN_ABI_PATH", str(DEFAULT_ABI_PATH))),
        "contract_address": _NETWORK_DEFAULT,
        "network": env.get("COOKIECHAIN_NETWORK", "").strip().lower(),
        "query": env.get("COOKIECHAIN_QUERY", DEFAULT_QUERY),
        "query_args": _env_json(env, "COOKIECHAIN_QUERY_ARGS"),
        "ss58_format": _env_number(env, "COOKIECHAIN_SS58_FORMAT", DEFAULT_SS58_FORMAT, int),
        "derivation_path": env.get("COOKIECHAIN_DERIVATION_PATH", DEFAULT_DERIVATION_PATH),
        "timeout": _env_number(env, "COOKIECHAIN_TIMEOUT", DEFAULT_TIMEOUT, float),
    }
    if "COOKIECHAIN_CONTRACT_ADDRESS" in env:
        # An empty value means "look it up in the artifact"
        values["contract_address"] = env["COOKIECHAIN_CONTRACT_ADDRESS"].strip() or None

    for key, value in overrides.items():
        if value is None:
            continue
        if key not in values:
            raise TypeError(f"Unknown config field: {key}")
        values[key] = value
        if key == "endpoint" and overrides.get("network") is None:
            values["network"] = ""

    return BootstrapConfig(**values)


def save_secret_phrase(secret_phrase: str, env_path: Optional[Path] = None) -> Path:
    """Store COOKIECHAIN_SECRET_PHRASE in the .env file, readable by the owner only.

    Other variables already in the file are kept.
    """
    env_path = env_path or COOKIECHAIN_ENV
    env_path.parent.mkdir(parents=True, exist_ok=True)
    env_path.touch(mode=0o600, exist_ok=True)

    set_key(str(env_path), "COOKIECHAIN_SECRET_PHRASE", secret_phrase, quote_mode="always")
    if os.name != "nt":
        env_path.chmod(0o600)
    return env_path
