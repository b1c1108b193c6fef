"""
cookiechain CLI

Command-line front end for the cookiechain bootstrap: connect to the
test network, load the account, load the contract and read its cookie
count.

Commands:
  load      - Run the bootstrap sequence
  whoami    - Show the account derived from the secret phrase
  messages  - List callable messages in an ABI file
  init      - Store the secret phrase in ~/.cookiechain/.env
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from .config import load_config
from .errors import BootstrapError
from .sigil.keys import derive_secp256k1, derive_sr25519


# ============ Constants ============

VERSION = "0.1.0"


# ============ Logging ============


class ClickEchoHandler(logging.Handler):
    """Render log records through click so they land on the active stderr."""

    COLORS = {
        logging.WARNING: "yellow",
        logging.ERROR: "red",
        logging.CRITICAL: "red",
    }

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            click.secho(message, fg=self.COLORS.get(record.levelno), err=True)
        except Exception:
            self.handleError(record)


def _configure_logging(verbose: bool, quiet: bool) -> None:
    logger = logging.getLogger("cookiechain")
    if not any(isinstance(h, ClickEchoHandler) for h in logger.handlers):
        handler = ClickEchoHandler()
        handler.setFormatter(logging.Formatter("  %(message)s"))
        logger.addHandler(handler)
    if verbose:
        logger.setLevel(logging.DEBUG)
    elif quiet:
        logger.setLevel(logging.WARNING)
    else:
        logger.setLevel(logging.INFO)


# ============ Banner ============


def _print_banner() -> None:
    click.echo(
        click.style("  ◆ ", fg="cyan")
        + click.style("C O O K I E C H A I N", fg="bright_white", bold=True)
        + click.style(f"  v{VERSION}", dim=True)
    )
    click.echo()


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="cookiechain")
@click.option("-v", "--verbose", is_flag=True, help="Show RPC traffic")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool) -> None:
    """cookiechain — test-network contract bootstrap."""
    _configure_logging(verbose, quiet)
    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Top-level Commands ============

from .theurgy.load import load
from .theurgy.messages import messages
from .theurgy.init import init

cli.add_command(load)
cli.add_command(messages)
cli.add_command(init)


# ============ Identity ============


@cli.command()
@click.option("--network", type=click.Choice(["substrate", "evm"]), default=None, help="Key scheme")
@click.option("--env-file", type=click.Path(path_type=Path), default=None, help=".env file to read")
def whoami(network: Optional[str], env_file: Optional[Path]) -> None:
    """Show the account derived from the secret phrase."""
    try:
        config = load_config(env_file, network=network)
        if config.network == "evm":
            identity = derive_secp256k1(config.secret_phrase, config.derivation_path)
        else:
            identity = derive_sr25519(config.secret_phrase, config.ss58_format)
    except ValueError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)
    except BootstrapError as exc:
        click.echo(f"No account: {exc}")
        sys.exit(exc.exit_code)

    click.echo(f"Address: {identity.address}")
    click.echo(f"Scheme:  {identity.scheme}")
