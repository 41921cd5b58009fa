# backend/scripts/deploy_gold_platform.py
# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Joltkin LLC.
#
# Purpose
# -------
# Deploy the **Gold Certificate** PyTeal application to Algorand TestNet.
# The app keeps:
#   - global `total` (uint)  number of minted certificates
#   - global `admin` (bytes) creator address, may update/delete the app
#   - one box per certificate, funded by the minter in the same group
#
# What this script does
# ---------------------
# 1) Loads and compiles ./contracts/gold_certificate.py (PyTeal → TEAL → program).
# 2) Creates the application with the correct global schema.
# 3) Prefunds the application account with its base minimum balance so that
#    the first box can be created.
# 4) Prints a JSON receipt: { app_id, app_address, create_txid, fund_txid }.
#
# Environment (.env)
# ------------------
# ALGOD_URL=https://testnet-api.algonode.cloud
# ALGOD_TOKEN=
# CREATOR_MNEMONIC="... 25 words ..."
#
# Example
# -------
#   python backend/scripts/deploy_gold_platform.py --prefund 100000

from __future__ import annotations

import argparse
import base64
import importlib.util
import json
import logging
import os
import pathlib

from algosdk import account, logic, mnemonic
from algosdk.transaction import (
    ApplicationCreateTxn,
    OnComplete,
    PaymentTxn,
    StateSchema,
    wait_for_confirmation,
)
from algosdk.v2client import algod
from dotenv import load_dotenv
from pyteal import Mode, compileTeal

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
# Some public nodes ignore tokens; keep a non-empty string for SDK compatibility.
ALGOD_TOKEN: str = os.getenv("ALGOD_TOKEN", "a" * 64)

# Base minimum balance of any account (µAlgos); the app account needs it
# before its first box.
APP_BASE_MBR = 100_000

CONTRACT_PATH = (
    pathlib.Path(__file__).resolve().parents[1] / "contracts" / "gold_certificate.py"
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def algod_client() -> algod.AlgodClient:
    """Instantiate a configured Algod client."""
    return algod.AlgodClient(ALGOD_TOKEN, ALGOD_URL)


def compile_program(client: algod.AlgodClient, teal_src: str) -> bytes:
    """Compile TEAL source via the algod compile endpoint into program bytes."""
    resp = client.compile(teal_src)
    return base64.b64decode(resp["result"])


def load_pyteal_module(path: pathlib.Path = CONTRACT_PATH):
    """Dynamically import the PyTeal contract (must define approval() and clear())."""
    if not path.exists():
        raise FileNotFoundError(f"Cannot locate PyTeal contract at: {path}")
    spec = importlib.util.spec_from_file_location("gold_certificate", str(path))
    if spec is None or spec.loader is None:
        raise ImportError(f"importlib could not load {path}")
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


def build_teal(path: pathlib.Path = CONTRACT_PATH) -> tuple[str, str]:
    """Return (approval_teal, clear_teal) source for the contract at `path`."""
    mod = load_pyteal_module(path)
    approval_teal = compileTeal(mod.approval(), Mode.Application, version=8)
    clear_teal = compileTeal(mod.clear(), Mode.Application, version=8)
    return approval_teal, clear_teal


def _normalize_mnemonic(raw: str | None, label: str) -> str:
    """Strip shell quotes, collapse whitespace and require exactly 25 words."""
    if not raw:
        raise SystemExit(f"Set {label} to a 25-word mnemonic in your .env")
    words = raw.strip().strip('"').strip("'").split()
    if len(words) != 25:
        raise SystemExit(f"{label} must contain 25 words, got {len(words)}")
    return " ".join(words)


def _parse_args() -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        description="Deploy the Gold Certificate application to Algorand TestNet.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ap.add_argument(
        "--prefund",
        type=int,
        default=APP_BASE_MBR,
        help="µAlgos sent to the app account after creation (0 to skip)",
    )
    return ap.parse_args()


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def main() -> None:
    """Compile PyTeal, create the application, prefund it, and emit JSON."""
    args = _parse_args()
    mn = _normalize_mnemonic(os.getenv("CREATOR_MNEMONIC"), "CREATOR_MNEMONIC")
    sender_sk = mnemonic.to_private_key(mn)
    sender_addr = account.address_from_private_key(sender_sk)

    client = algod_client()
    approval_teal, clear_teal = build_teal()
    ap_prog = compile_program(client, approval_teal)
    cl_prog = compile_program(client, clear_teal)

    # Global: 1 uint (total), 1 byte-slice (admin). No local state.
    txn = ApplicationCreateTxn(
        sender=sender_addr,
        sp=client.suggested_params(),
        on_complete=OnComplete.NoOpOC,
        approval_program=ap_prog,
        clear_program=cl_prog,
        global_schema=StateSchema(num_uints=1, num_byte_slices=1),
        local_schema=StateSchema(num_uints=0, num_byte_slices=0),
    )
    create_txid = client.send_transaction(txn.sign(sender_sk))
    resp = wait_for_confirmation(client, create_txid, 4)
    app_id = int(resp["application-index"])
    app_addr = logic.get_application_address(app_id)
    log.info("Created gold certificate app %d (%s)", app_id, app_addr)

    fund_txid = None
    if args.prefund > 0:
        pay = PaymentTxn(
            sender=sender_addr,
            sp=client.suggested_params(),
            receiver=app_addr,
            amt=int(args.prefund),
        )
        fund_txid = client.send_transaction(pay.sign(sender_sk))
        wait_for_confirmation(client, fund_txid, 4)
        log.info("Prefunded app account with %d µAlgos", args.prefund)

    # Machine-readable output for scripts/CI.
    print(
        json.dumps(
            {
                "app_id": app_id,
                "app_address": app_addr,
                "create_txid": create_txid,
                "fund_txid": fund_txid,
            },
            indent=2,
        )
    )


if __name__ == "__main__":
    main()
