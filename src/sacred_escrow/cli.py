"""Sacred Escrow command-line interface.

Usage:
    sacred-escrow [global options] <command> [options]

Global options fall back to environment variables (RPC_URL, ESCROW_ADDRESS,
CHAIN_ID, RELAYER_PRIVATE_KEY, ATTESTER_PRIVATE_KEY), read from a ``.env``
file when present.
"""

import json
import logging
import sys
from typing import Optional

import click
from dotenv import load_dotenv

from .attestation import parse_uint256
from .config import EscrowConfig
from .dispatcher import CommandResult, EscrowDispatcher
from .errors import SacredEscrowError

logger = logging.getLogger(__name__)


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _render(result: CommandResult, json_output: bool) -> None:
    if json_output:
        click.echo(json.dumps(result.payload, indent=2))
    else:
        click.echo(result.message)


def _run(ctx: click.Context, command: str, **params) -> None:
    dispatcher: EscrowDispatcher = ctx.obj
    try:
        result = getattr(dispatcher, command)(**params)
    except SacredEscrowError as exc:
        raise click.ClickException(str(exc)) from exc
    _render(result, dispatcher.config.json_output)


def attestation_options(require_nonce: bool):
    """Options shared by attest, verify and claim."""

    def decorator(func):
        options = [
            click.option("--platform", required=True, help="Platform id (uint8, e.g. 1 for X/Twitter)"),
            click.option("--user-id", required=True, help="Platform numeric user id (uint256)"),
            click.option("--payout", required=True, help="Payout address"),
            click.option("--deposit-id", required=True, help="Deposit ID to claim (uint256)"),
            click.option(
                "--nonce",
                required=require_nonce,
                help="Nonce (uint256)" if require_nonce else "Nonce (defaults to now*1000 + random 0-999)",
            ),
            click.option(
                "--expiry",
                required=require_nonce,
                help="Expiry unix seconds" if require_nonce else "Expiry unix seconds (defaults to now + 24h)",
            ),
        ]
        for option in reversed(options):
            func = option(func)
        return func

    return decorator


@click.group()
@click.option("--rpc", help="RPC URL (falls back to env RPC_URL)")
@click.option("--escrow", help="Escrow contract address (falls back to env ESCROW_ADDRESS)")
@click.option("--chain-id", help="Chain ID override (otherwise read from RPC)")
@click.option("--depositor-key", help="Private key for depositor (with or without 0x)")
@click.option("--relayer-key", help="Private key for relayer (with or without 0x)")
@click.option("--attester-key", help="Private key for attester (with or without 0x)")
@click.option("--json", "json_output", is_flag=True, default=False, help="JSON output")
@click.option("-v", "--verbose", count=True, help="Log progress to stderr (-vv for debug)")
@click.pass_context
def cli(
    ctx: click.Context,
    rpc: Optional[str],
    escrow: Optional[str],
    chain_id: Optional[str],
    depositor_key: Optional[str],
    relayer_key: Optional[str],
    attester_key: Optional[str],
    json_output: bool,
    verbose: int,
):
    """CLI to deposit/attest/claim/refund against SacredEscrow"""
    _configure_logging(verbose)
    try:
        config = EscrowConfig.from_env().with_overrides(
            rpc_url=rpc,
            escrow_address=escrow,
            chain_id=parse_uint256(chain_id, "chain id") if chain_id else None,
            depositor_key=depositor_key,
            relayer_key=relayer_key,
            attester_key=attester_key,
            json_output=json_output,
        )
    except SacredEscrowError as exc:
        raise click.ClickException(str(exc)) from exc

    logger.debug("Loaded configuration: %r", config)
    ctx.obj = EscrowDispatcher(config)


@cli.command()
@click.option("--platform", required=True, help="Platform id (e.g., 1 for X/Twitter)")
@click.option("--recipient-user-id", required=True, help="Platform numeric user id of the recipient")
@click.option("--amount", required=True, help="Amount in ETH to deposit (e.g., 0.1)")
@click.option("--depositor-user-id", default="0", show_default=True, help="Platform numeric user id of the depositor")
@click.option("--content-url", default="", help="URL of the content being tipped (e.g., a post URL)")
@click.pass_context
def deposit(ctx, platform, recipient_user_id, amount, depositor_user_id, content_url):
    """Create a deposit for an identity"""
    _run(
        ctx,
        "deposit",
        platform=platform,
        recipient_user_id=recipient_user_id,
        amount=amount,
        depositor_user_id=depositor_user_id,
        content_url=content_url,
    )


@cli.command()
@attestation_options(require_nonce=False)
@click.pass_context
def attest(ctx, platform, user_id, payout, deposit_id, nonce, expiry):
    """Create an EIP-712 claim attestation signature (off-chain)"""
    _run(
        ctx,
        "attest",
        platform=platform,
        user_id=user_id,
        payout=payout,
        deposit_id=deposit_id,
        nonce=nonce,
        expiry=expiry,
    )


@cli.command()
@attestation_options(require_nonce=True)
@click.option("--signature", required=True, help="Attester signature")
@click.option("--expected-attester", help="Expected attester address")
@click.pass_context
def verify(ctx, platform, user_id, payout, deposit_id, nonce, expiry, signature, expected_attester):
    """Verify a claim attestation signature off-chain (no blockchain interaction)"""
    _run(
        ctx,
        "verify",
        platform=platform,
        user_id=user_id,
        payout=payout,
        deposit_id=deposit_id,
        nonce=nonce,
        expiry=expiry,
        signature=signature,
        expected_attester=expected_attester,
    )


@cli.command()
@attestation_options(require_nonce=True)
@click.option("--signature", help="Attester signature (if omitted and --attester-key provided, will sign)")
@click.option("--expected-attester", help="Refuse to relay unless the signature recovers to this address")
@click.pass_context
def claim(ctx, platform, user_id, payout, deposit_id, nonce, expiry, signature, expected_attester):
    """Submit on-chain claim tx (optionally signing locally if --signature not provided)"""
    _run(
        ctx,
        "claim",
        platform=platform,
        user_id=user_id,
        payout=payout,
        deposit_id=deposit_id,
        nonce=nonce,
        expiry=expiry,
        signature=signature,
        expected_attester=expected_attester,
    )


@cli.command("get-deposit")
@click.option("--deposit-id", required=True, help="Deposit ID")
@click.pass_context
def get_deposit(ctx, deposit_id):
    """Read deposit state"""
    _run(ctx, "get_deposit", deposit_id=deposit_id)


@cli.command()
@click.option("--deposit-id", required=True, help="Deposit ID")
@click.pass_context
def refund(ctx, deposit_id):
    """Refund an unclaimed deposit (caller must be depositor)"""
    _run(ctx, "refund", deposit_id=deposit_id)


def main() -> None:
    """Console entry point. Every failure, usage errors included, exits with 1."""
    load_dotenv()
    try:
        cli.main(prog_name="sacred-escrow", standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        sys.exit(1)
    except click.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)
    except Exception as exc:
        logger.debug("Unhandled error", exc_info=True)
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
