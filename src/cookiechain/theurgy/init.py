"""
Theurgy Init - Store the secret phrase outside the source tree.

The phrase is checked by deriving its address before it is written to
~/.cookiechain/.env (mode 0600).
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click

from ..config import save_secret_phrase
from ..errors import InvalidSecretError
from ..sigil.keys import derive_secp256k1, derive_sr25519


@click.command()
@click.option("--network", type=click.Choice(["substrate", "evm"]), default="substrate", help="Key scheme to check against")
@click.option("--env-file", type=click.Path(path_type=Path), default=None, help=".env file to write")
@click.option(
    "--secret-phrase",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Mnemonic, derivation URI or 0x seed",
)
def init(network: str, env_file: Optional[Path], secret_phrase: str) -> None:
    """Store the secret phrase in the cookiechain .env file."""
    try:
        if network == "evm":
            identity = derive_secp256k1(secret_phrase)
        else:
            identity = derive_sr25519(secret_phrase)
    except InvalidSecretError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)

    path = save_secret_phrase(" ".join(secret_phrase.split()), env_file)
    click.echo(f"Address: {identity.address}")
    click.echo(f"Saved to: {path}")
