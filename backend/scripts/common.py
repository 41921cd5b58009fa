# backend/scripts/common.py
# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Joltkin LLC.
#
# Purpose
# -------
# Operator helpers for a deployed gold certificate application:
#   fund-app  top up the application account (box MBR headroom)
#   status    print `total`, the app balance and its min-balance as JSON
#
# Usage
# -----
#   python backend/scripts/common.py fund-app --appid 123 --amount 200000
#   python backend/scripts/common.py status --appid 123
#
# Conventions
# -----------
# * Amounts are in **microAlgos** (µAlgos).
# * Targets Algorand **TestNet** by default (override via .env).
# * `fund-app` reads CREATOR_MNEMONIC from .env unless --mnemonic is passed.

from __future__ import annotations

import argparse
import base64
import json
import logging
import os

from algosdk import account, mnemonic, transaction
from algosdk.logic import get_application_address
from algosdk.transaction import wait_for_confirmation
from algosdk.v2client import algod
from dotenv import load_dotenv

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s %(levelname)-8s: %(message)s"
)
log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------
load_dotenv()  # try project root
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), ".env"))  # fallback

ALGOD_URL: str = os.getenv("ALGOD_URL", "https://testnet-api.algonode.cloud")
ALGOD_TOKEN: str = os.getenv("ALGOD_TOKEN", "a" * 64)


def client() -> algod.AlgodClient:
    """Construct an Algod client using environment variables."""
    return algod.AlgodClient(ALGOD_TOKEN, ALGOD_URL)


def fund_app(c: algod.AlgodClient, app_id: int, amount: int, from_mn: str) -> str:
    """
    Send `amount` µAlgos from a mnemonic-derived account to an application.

    Raises:
        ValueError: If inputs are invalid (non-positive amount/app id, bad mnemonic).
    """
    if app_id <= 0:
        raise ValueError(f"Invalid app id: {app_id}")
    if amount <= 0:
        raise ValueError(f"Amount must be > 0 (µAlgos). Got: {amount}")
    if not from_mn or len(from_mn.split()) != 25:
        raise ValueError("Invalid or missing 25-word mnemonic for sender")

    sender_sk = mnemonic.to_private_key(from_mn)
    sender_addr = account.address_from_private_key(sender_sk)
    app_addr = get_application_address(app_id)

    txn = transaction.PaymentTxn(sender_addr, c.suggested_params(), app_addr, amount)
    txid = c.send_transaction(txn.sign(sender_sk))
    wait_for_confirmation(c, txid, 4)
    log.info("Funded app %d (%s) with %d µAlgos, txid=%s", app_id, app_addr, amount, txid)
    return txid


def app_status(c: algod.AlgodClient, app_id: int) -> dict[str, object]:
    """Return the certificate total and balance figures for an application."""
    info = c.application_info(app_id)
    total = None
    for kv in info["params"].get("global-state", []):
        if base64.b64decode(kv["key"]) == b"total":
            total = kv["value"].get("uint", 0)
    app_addr = get_application_address(app_id)
    acct = c.account_info(app_addr)
    return {
        "app_id": app_id,
        "app_address": app_addr,
        "total": total,
        "amount": int(acct.get("amount", 0)),
        "min_balance": int(acct.get("min-balance", 0)),
    }


def _parse_args() -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        description="Gold certificate app utilities (TestNet defaults).",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    fund = sub.add_parser(
        "fund-app",
        help="Fund the application account with µAlgos",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    fund.add_argument("--appid", type=int, required=True, help="Application ID to fund")
    fund.add_argument("--amount", type=int, required=True, help="Amount in µAlgos")
    fund.add_argument(
        "--mnemonic",
        type=str,
        default=os.getenv("CREATOR_MNEMONIC"),
        help="25-word mnemonic for sender; defaults to CREATOR_MNEMONIC from .env",
    )

    status = sub.add_parser("status", help="Print certificate total and app balance")
    status.add_argument("--appid", type=int, required=True, help="Application ID")
    return ap.parse_args()


def main() -> None:
    args = _parse_args()
    c = client()

    if args.cmd == "fund-app":
        if not args.mnemonic:
            raise SystemExit(
                "Set CREATOR_MNEMONIC in .env or pass --mnemonic (25-word secret)"
            )
        try:
            fund_app(c, args.appid, args.amount, args.mnemonic)
        except Exception as e:
            # Surface a clear, single-line error for scripting/CI environments.
            raise SystemExit(f"fund-app failed: {e}") from e
    elif args.cmd == "status":
        print(json.dumps(app_status(c, args.appid), indent=2))


if __name__ == "__main__":
    main()
