"""
ABI Loader - Loads contract interface definitions from local JSON files.

Three shapes are recognised:

- ink! contract metadata (cargo-contract output, ``V3`` or ``version`` 4+),
  messages keyed by ``label``
- EVM ABI: a bare list of entries, or a Truffle / Foundry artifact with
  an ``abi`` list and an optional ``networks`` table
- A plain message map ``{"cookiesCount": {...}, ...}``

Message lookup accepts both the raw label and its camelCase alias, so
``cookiesCount`` and ``cookies_count`` resolve to the same message.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from ..errors import AbiLoadError


INK = "ink"
EVM = "evm"
MESSAGES = "messages"


@dataclass(frozen=True)
class ContractAbi:
    """
    Parsed ABI file.

    Attributes:
        path: File the ABI was loaded from
        format: "ink", "evm" or "messages"
        document: Parsed JSON, as handed to the chain client
        messages: Raw message label -> message definition
        networks: Chain id -> deployed address (Truffle artifacts only)
    """
    path: Path
    format: str
    document: Any = field(repr=False, compare=False)
    messages: dict[str, Any] = field(repr=False)
    networks: dict[str, str] = field(default_factory=dict)

    @property
    def message_names(self) -> frozenset[str]:
        return frozenset(self.messages)

    def resolve(self, name: str) -> Optional[str]:
        """Return the raw label for ``name``, or None if the ABI has no such message."""
        if name in self.messages:
            return name
        wanted = camel_case(name)
        for label in self.messages:
            if camel_case(label) == wanted:
                return label
        return None

    def deployed_address(self, chain: str) -> Optional[str]:
        return self.networks.get(str(chain))

    @property
    def evm_entries(self) -> list[dict[str, Any]]:
        if self.format != EVM:
            raise AbiLoadError(f"{self.path} is {self.format} metadata, not an EVM ABI")
        if isinstance(self.document, list):
            return self.document
        return self.document["abi"]


def camel_case(name: str) -> str:
    """``get_cookie_count`` -> ``getCookieCount``; camelCase input is unchanged."""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def humanize(name: str) -> str:
    """``cookiesCount`` / ``cookies_count`` -> ``cookies count``."""
    spaced = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", " ", name).replace("_", " ")
    return " ".join(spaced.split()).lower()


def _ink_spec(document: dict[str, Any]) -> Optional[dict[str, Any]]:
    if "spec" in document and isinstance(document["spec"], dict):
        return document["spec"]
    # Pre-v4 metadata nests everything under a version key (V1, V2, V3)
    for key, value in document.items():
        if re.fullmatch(r"V\d+", key) and isinstance(value, dict) and "spec" in value:
            return value["spec"]
    return None


def _ink_label(message: dict[str, Any]) -> str:
    label = message.get("label")
    if isinstance(label, str):
        return label
    # V1/V2 metadata uses a "name" path list instead of "label"
    name = message.get("name")
    if isinstance(name, list) and name:
        return "::".join(name)
    raise AbiLoadError(f"ink! message without a label: {message!r}")


def _parse_ink(path: Path, document: dict[str, Any], spec: dict[str, Any]) -> ContractAbi:
    messages = spec.get("messages")
    if not isinstance(messages, list):
        raise AbiLoadError(f"{path}: ink! metadata has no message list")
    return ContractAbi(
        path=path,
        format=INK,
        document=document,
        messages={_ink_label(m): m for m in messages},
    )


def _parse_evm(path: Path, document: Any) -> ContractAbi:
    entries = document if isinstance(document, list) else document.get("abi")
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise AbiLoadError(f"{path}: EVM ABI must be a list of entries")

    networks: dict[str, str] = {}
    if isinstance(document, dict):
        for chain_id, deployment in (document.get("networks") or {}).items():
            if isinstance(deployment, dict) and deployment.get("address"):
                networks[str(chain_id)] = deployment["address"]

    return ContractAbi(
        path=path,
        format=EVM,
        document=document,
        messages={
            e["name"]: e for e in entries
            if e.get("type", "function") == "function" and "name" in e
        },
        networks=networks,
    )


def parse_abi(document: Any, path: Path) -> ContractAbi:
    """
    Classify a parsed ABI document.

    Raises:
        AbiLoadError: If the document matches none of the known shapes
    """
    if isinstance(document, list):
        return _parse_evm(path, document)

    if not isinstance(document, dict):
        raise AbiLoadError(f"{path}: expected a JSON object or list, got {type(document).__name__}")

    spec = _ink_spec(document)
    if spec is not None:
        return _parse_ink(path, document, spec)

    if "abi" in document:
        return _parse_evm(path, document)

    messages = {k: v for k, v in document.items() if isinstance(v, dict)}
    if not messages or len(messages) != len(document):
        raise AbiLoadError(f"{path}: unrecognised ABI format")
    return ContractAbi(path=path, format=MESSAGES, document=document, messages=messages)


def load_abi(path: Path) -> ContractAbi:
    """
    Load a contract ABI from a JSON file.

    Args:
        path: ABI / contract metadata file

    Returns:
        ContractAbi

    Raises:
        AbiLoadError: If the file is missing, unreadable, not JSON, or
            not a recognised ABI shape
    """
    path = Path(path)
    if not path.is_file():
        raise AbiLoadError(f"ABI not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            document = json.load(f)
    except (OSError, UnicodeDecodeError) as exc:
        raise AbiLoadError(f"Cannot read ABI {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise AbiLoadError(f"ABI {path} is not valid JSON: {exc}") from exc

    return parse_abi(document, path)
