"""
Theurgy Messages - Inspect an ABI file offline.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from ..errors import AbiLoadError
from ..pneuma.abi import camel_case, load_abi


@click.command()
@click.argument("path", type=click.Path(path_type=Path))
def messages(path: Path) -> None:
    """List the callable messages of an ABI file."""
    try:
        abi = load_abi(path)
    except AbiLoadError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)

    click.echo(f"Format: {abi.format}")
    click.echo(f"Messages: {len(abi.message_names)}")
    for label in sorted(abi.message_names):
        alias = camel_case(label)
        if alias != label:
            click.echo(f"  {label}  ({alias})")
        else:
            click.echo(f"  {label}")

    if abi.networks:
        click.echo("Deployments:")
        for chain, address in sorted(abi.networks.items()):
            click.echo(f"  {chain}: {address}")
