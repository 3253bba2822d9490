#!/usr/bin/env python3
"""
swell-token: operator CLI for the SWELL token core.

Usage:
  swell-token health
  swell-token decimals
  swell-token address OWNER
  swell-token balance OWNER
  swell-token transfer RECIPIENT AMOUNT [--priority-fee N]

transfer signs with SWELL_SENDER_PRIVATE_KEY (base58 or JSON byte array).
Results are printed as JSON on stdout; logs go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from swell_token.client import SwellTokenClient
from swell_token.config.env import mask_rpc_url
from swell_token.config.settings import SwellSettings, explorer_address_url
from swell_token.core.errors import SwellTransferError
from swell_token.core.types import TransferParams
from swell_token.swell_logging import get_logger
from swell_token.tools.signers import KeypairSigner, load_keypair_from_env

logger = get_logger(__name__)


def _print(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, default=str))


async def _run(args: argparse.Namespace, settings: SwellSettings) -> dict[str, Any]:
    async with SwellTokenClient(settings) as swell:
        if args.command == "health":
            return {
                "healthy": await swell.is_healthy(),
                "cluster": settings.cluster,
                "rpc_url": mask_rpc_url(settings.rpc_url),
            }
        if args.command == "decimals":
            return {"mint": settings.mint_address, "decimals": await swell.get_decimals()}
        if args.command == "address":
            ata = swell.get_token_account_address(args.owner)
            return {"owner": args.owner, "token_account": str(ata), "explorer_url": explorer_address_url(ata, settings)}
        if args.command == "balance":
            bal = await swell.get_balance(args.owner)
            return {
                "owner": args.owner,
                "amount": str(bal.amount),
                "raw_amount": bal.raw_amount,
                "decimals": bal.decimals,
                "token_account": str(bal.token_account),
                "account_exists": bal.account_exists,
            }
        if args.command == "transfer":
            signer = KeypairSigner(load_keypair_from_env())
            result = await swell.transfer(
                TransferParams(
                    sender=signer,
                    recipient=args.recipient,
                    amount=args.amount,
                    priority_fee=args.priority_fee,
                )
            )
            return {
                "signature": result.signature,
                "slot": result.slot,
                "block_time": result.block_time,
                "explorer_url": result.explorer_url,
            }
    raise ValueError(f"Unknown command: {args.command}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="swell-token", description="SWELL token operations on Solana")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("health", help="Check RPC reachability")
    sub.add_parser("decimals", help="Fetch SWELL mint decimals")
    p_addr = sub.add_parser("address", help="Derive the SWELL token account of OWNER (no network)")
    p_addr.add_argument("owner")
    p_bal = sub.add_parser("balance", help="SWELL balance of OWNER")
    p_bal.add_argument("owner")
    p_tx = sub.add_parser("transfer", help="Transfer SWELL from SWELL_SENDER_PRIVATE_KEY to RECIPIENT")
    p_tx.add_argument("recipient")
    p_tx.add_argument("amount", help="Token units, e.g. 10.5")
    p_tx.add_argument("--priority-fee", type=int, default=None, help="Microlamports per compute unit")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = SwellSettings()
        payload = asyncio.run(_run(args, settings))
    except SwellTransferError as e:
        logger.error("swell_cli_failed", command=args.command, code=e.code.value, error=e.message)
        _print({"error": e.code.value, "message": e.message})
        return 1
    except ValueError as e:
        logger.error("swell_cli_config_error", command=args.command, error=str(e))
        _print({"error": "CONFIG", "message": str(e)})
        return 2
    _print(payload)
    return 0


if __name__ == "__main__":
    sys.exit(main())
