"""
Bootstrap error taxonomy.

Every failure the bootstrap can report derives from ``BootstrapError``.
``exit_code`` is what the CLI exits with; ``result`` carries the partial
``BootstrapResult`` when the sequencer aborts.
"""

from __future__ import annotations

from typing import Any, Optional


class BootstrapError(RuntimeError):
    exit_code: int = 1

    def __init__(self, message: str, result: Optional[Any] = None) -> None:
        super().__init__(message)
        self.result = result


class ChainConnectionError(BootstrapError):
    """Endpoint unreachable or handshake failed."""

    exit_code = 2


class InvalidSecretError(BootstrapError):
    """Secret phrase missing or not usable by the derivation scheme."""

    exit_code = 3


class AbiLoadError(BootstrapError):
    """ABI file missing, malformed, or unusable for the contract."""

    exit_code = 4


class QueryError(BootstrapError):
    """Read-only contract call failed."""

    exit_code = 5
