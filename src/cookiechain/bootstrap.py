"""
Bootstrap Sequencer.

Runs the three startup steps in order and reports each one on the
``cookiechain.bootstrap`` logger:

1. connect           - open the network connection
2. identity          - derive the signing account from the secret phrase
3. contract / query  - load the ABI, bind the contract, run one read-only query

Every step yields an ``Ok`` or ``Err`` outcome.  ``FATAL_STEPS`` decides
which errors abort the run; the others only annotate the terminal state.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional

from .config import BootstrapConfig
from .errors import AbiLoadError, BootstrapError
from .models import BootstrapResult, Err, Ok, Outcome, QueryResult, TerminalState
from .pneuma.abi import humanize, load_abi
from .pneuma.backend import ChainBackend, get_backend

logger = logging.getLogger(__name__)

CONNECT = "connect"
IDENTITY = "identity"
CONTRACT = "contract"
QUERY = "query"

FATAL_STEPS = frozenset({CONNECT, IDENTITY, CONTRACT})


async def _attempt(action: Callable[..., Awaitable[Any]], *args: Any) -> Outcome:
    try:
        return Ok(await action(*args))
    except BootstrapError as exc:
        return Err(exc)


def _settle(result: BootstrapResult, step: str, outcome: Outcome) -> Any:
    """Record the outcome; raise if the step is fatal, else downgrade to a warning."""
    result.record(step, outcome)
    if isinstance(outcome, Ok):
        return outcome.value

    error = outcome.error
    if step in FATAL_STEPS:
        result.state = TerminalState.FAILED
        logger.error("%s failed: %s", step, error)
        error.result = result
        raise error

    logger.warning("%s failed: %s", step, error)
    result.warnings.append(str(error))
    return None


async def _load_contract(backend: ChainBackend, config: BootstrapConfig, result: BootstrapResult):
    abi = load_abi(config.abi_path)

    address = config.contract_address or abi.deployed_address(result.connection.chain)
    if not address:
        raise AbiLoadError(
            f"Contract not deployed to detected network {result.connection.chain} "
            f"and no contract address configured"
        )
    return await backend.bind_contract(result.connection, abi, address)


async def _query(backend: ChainBackend, config: BootstrapConfig, result: BootstrapResult) -> QueryResult:
    value = await backend.query(result.contract, result.identity, config.query, config.query_args)
    return QueryResult(message=config.query, caller=result.identity.address, value=value)


async def run(config: BootstrapConfig, backend: Optional[ChainBackend] = None) -> BootstrapResult:
    """
    Run the bootstrap sequence.

    Args:
        config: Endpoint, secret, ABI path, contract address and query
        backend: Chain backend (default: chosen from ``config.network``)

    Returns:
        BootstrapResult in state SUCCEEDED or SUCCEEDED_WITH_WARNING

    Raises:
        ChainConnectionError: Step 1 failed
        InvalidSecretError: Step 2 failed
        AbiLoadError: The contract could not be loaded in step 3

        The raised error carries the partial result as ``exc.result``.
    """
    backend = backend or get_backend(config)
    result = BootstrapResult()

    result.connection = _settle(result, CONNECT, await _attempt(backend.connect, config.endpoint))
    logger.info("connected: %s (%s)", config.endpoint, result.connection.chain)

    result.identity = _settle(
        result, IDENTITY, await _attempt(backend.derive_identity, config.secret_phrase)
    )
    logger.info("account loaded: %s", result.identity.address)

    result.contract = _settle(
        result, CONTRACT, await _attempt(_load_contract, backend, config, result)
    )
    logger.info("contract loaded: %s", result.contract.address)

    result.query = _settle(result, QUERY, await _attempt(_query, backend, config, result))
    if result.query is not None:
        logger.info("%s: %s", humanize(config.query), result.query)

    result.state = (
        TerminalState.SUCCEEDED_WITH_WARNING if result.warnings else TerminalState.SUCCEEDED
    )
    return result
