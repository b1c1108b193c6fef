"""
Theurgy Load - Run the bootstrap sequence.

Connects to the configured network, loads the account from the secret
phrase, loads the contract ABI and reads the cookie count.  A failed
query is reported as a warning; every other failure exits non-zero.
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Optional

import click

from ..bootstrap import run
from ..config import BootstrapConfig, load_config
from ..errors import BootstrapError
from ..models import BootstrapResult, TerminalState


async def _run_and_close(config: BootstrapConfig) -> BootstrapResult:
    result: Optional[BootstrapResult] = None
    try:
        result = await run(config)
        return result
    except BootstrapError as exc:
        result = exc.result
        raise
    finally:
        if result is not None and result.connection is not None:
            await result.connection.close()


def _print_summary(result: BootstrapResult) -> None:
    click.echo("")
    click.echo(f"  Endpoint:  {result.connection.endpoint}")
    click.echo(f"  Chain:     {result.connection.chain}")
    click.echo(f"  Account:   {result.identity.address}")
    click.echo(f"  Contract:  {result.contract.address}")
    if result.query is not None:
        click.echo(f"  {result.query.message}: {result.query}")
    click.echo("")


@click.command()
@click.option("--endpoint", default=None, help="Node URL (ws/wss or http/https)")
@click.option("--network", type=click.Choice(["substrate", "evm"]), default=None, help="Backend kind")
@click.option("--abi", "abi_path", type=click.Path(path_type=Path), default=None, help="ABI / metadata JSON file")
@click.option("--contract", "contract_address", default=None, help="Deployed contract address")
@click.option("--query", default=None, help="Read-only message to call")
@click.option("--args", "args_json", default=None, help="Query args as JSON")
@click.option("--env-file", type=click.Path(path_type=Path), default=None, help=".env file to read")
def load(
    endpoint: Optional[str],
    network: Optional[str],
    abi_path: Optional[Path],
    contract_address: Optional[str],
    query: Optional[str],
    args_json: Optional[str],
    env_file: Optional[Path],
) -> None:
    """
    Connect, load the account and query the contract.
    """
    click.echo("=== cookiechain load ===")

    query_args: Any = None
    if args_json is not None:
        try:
            query_args = json.loads(args_json)
        except json.JSONDecodeError as exc:
            click.secho(f"ERROR: Invalid args: {exc}", fg="red")
            sys.exit(1)

    try:
        config = load_config(
            env_file,
            endpoint=endpoint,
            network=network,
            abi_path=abi_path,
            contract_address=contract_address,
            query=query,
            query_args=query_args,
        )
    except ValueError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)

    try:
        result = asyncio.run(_run_and_close(config))
    except BootstrapError as exc:
        click.secho(f"FAILED: {exc}", fg="red")
        sys.exit(exc.exit_code)

    _print_summary(result)

    if result.state is TerminalState.SUCCEEDED_WITH_WARNING:
        for warning in result.warnings:
            click.secho(f"WARNING: {warning}", fg="yellow")
        click.echo("=== Load Complete (with warnings) ===")
    else:
        click.secho("=== Load Complete ===", fg="green")
