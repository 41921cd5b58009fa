# frontend/streamlit_app/services/ledger.py
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Ledger gateway for the gold certificate application.

This module is the only place that talks to algod on behalf of the console:
  • Wallet handshake (account + signing capability)
  • Reading on-chain state (global `total`, one box per certificate)
  • Submitting mint/transfer groups and waiting for confirmation

Design principles
-----------------
- No hidden side effects; functions do only what they say.
- Raw values out: reads return what the ledger stores (uints, byte slices,
  addresses) and leave normalization to `services.sync`.
- Every algosdk failure is re-raised as a `core.errors` type with the
  original exception chained as `__cause__`.
"""

import base64
import logging
from typing import Any

from algosdk import encoding, error, logic
from algosdk import transaction as ftxn
from algosdk.atomic_transaction_composer import TransactionSigner
from algosdk.transaction import wait_for_confirmation
from algosdk.v2client import algod

from core.constants import (
    ADDR_LEN,
    EVENT_MINTED,
    FIXED_PART_LEN,
    KEY_TOTAL,
    METHOD_MINT,
    METHOD_TRANSFER,
    OWNER_OFFSET,
    STR_LEN_PREFIX,
    UINT_LEN,
    box_mbr,
    box_name,
    record_len,
)
from core.errors import (
    ConfirmationTimeout,
    GatewayUnavailable,
    NoWalletProvider,
    RecordNotFound,
    TransactionRejected,
    TransactionReverted,
    UserRejected,
)
from core.numeric import normalize_uint
from services.wallet import WalletProvider

log = logging.getLogger(__name__)

# Positional tuple in contract order:
# (weight, purity, origin, refinery, mint_date, owner, vault)
RawRecord = tuple[Any, Any, str, str, Any, str, str]

# algod answers 400 for transactions the node or the program refused.
_REJECTED_HTTP_CODES = (400,)


def _addr32(addr: str) -> bytes:
    """Decode a 58-char Algorand address into 32 raw bytes, with checks."""
    try:
        raw = encoding.decode_address(addr)
    except Exception as e:
        raise ValueError(f"Invalid Algorand address: {addr}") from e
    if len(raw) != ADDR_LEN:
        raise ValueError(f"Address did not decode to 32 bytes: {addr}")
    return raw


def decode_global_value(v: dict[str, Any]) -> Any:
    """Return a TEAL global-state value: bytes for type 1, uint for type 2."""
    if v.get("type") == 1:
        return base64.b64decode(v.get("bytes", ""))
    return v.get("uint", 0)


def decode_record(value: bytes) -> RawRecord:
    """Split a certificate box value into its seven positional fields.

    Uint fields are returned as 8-byte big-endian slices, exactly as stored.
    """
    if len(value) < FIXED_PART_LEN:
        raise ValueError(f"Certificate box too short: {len(value)} bytes")

    weight = value[0:UINT_LEN]
    purity = value[UINT_LEN : 2 * UINT_LEN]
    mint_ts = value[2 * UINT_LEN : OWNER_OFFSET]
    owner = encoding.encode_address(value[OWNER_OFFSET:FIXED_PART_LEN])

    texts: list[str] = []
    pos = FIXED_PART_LEN
    for _ in range(3):
        n = int.from_bytes(value[pos : pos + STR_LEN_PREFIX], "big")
        pos += STR_LEN_PREFIX
        chunk = value[pos : pos + n]
        if len(chunk) != n:
            raise ValueError("Certificate box truncated inside a text field")
        texts.append(chunk.decode("utf-8"))
        pos += n

    origin, refinery, vault = texts
    return (weight, purity, origin, refinery, mint_ts, owner, vault)


class LedgerGateway:
    """Read/write boundary for one deployed gold certificate application."""

    def __init__(self, client: algod.AlgodClient, app_id: int, *, confirm_rounds: int = 4):
        if int(app_id) <= 0:
            raise ValueError(f"Invalid app id: {app_id}")
        self.client = client
        self.app_id = int(app_id)
        self.confirm_rounds = int(confirm_rounds)

    @property
    def app_address(self) -> str:
        return logic.get_application_address(self.app_id)

    # -------------------------------------------------------------------------
    # Wallet
    # -------------------------------------------------------------------------

    def connect(self, wallet: WalletProvider | None) -> tuple[str, TransactionSigner]:
        """Request the active account and a signer bound to it."""
        if wallet is None:
            raise NoWalletProvider("No wallet configured. Paste a TestNet mnemonic first.")
        accounts = wallet.request_accounts()
        if not accounts:
            raise UserRejected("Wallet returned no accounts.")
        addr = accounts[0]
        signer = wallet.get_signing_capability(addr)
        log.info("Connected account %s…%s", addr[:6], addr[-4:])
        return addr, signer

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_total_count(self) -> Any:
        """Return the raw `total` global value (uint or big-endian bytes)."""
        try:
            info = self.client.application_info(self.app_id)
        except (error.AlgodHTTPError, OSError) as e:
            raise GatewayUnavailable(f"application_info({self.app_id}) failed: {e}") from e

        for kv in info.get("params", {}).get("global-state", []):
            try:
                k = base64.b64decode(kv["key"]).decode()
            except Exception:
                continue
            if k == KEY_TOTAL:
                return decode_global_value(kv["value"])
        raise GatewayUnavailable(
            f"Application {self.app_id} has no '{KEY_TOTAL}' global; is it a gold platform app?"
        )

    def get_record(self, cert_id: int) -> RawRecord:
        """Return the raw seven-field tuple stored for `cert_id`."""
        try:
            resp = self.client.application_box_by_name(self.app_id, box_name(cert_id))
        except error.AlgodHTTPError as e:
            if getattr(e, "code", None) == 404:
                raise RecordNotFound(cert_id) from e
            raise GatewayUnavailable(f"box read for #{cert_id} failed: {e}") from e
        except OSError as e:
            raise GatewayUnavailable(f"box read for #{cert_id} failed: {e}") from e

        try:
            return decode_record(base64.b64decode(resp["value"]))
        except (KeyError, ValueError) as e:
            raise GatewayUnavailable(f"Malformed box for #{cert_id}: {e}") from e

    def get_owner(self, cert_id: int) -> str:
        """Current owner address of a certificate."""
        return self.get_record(cert_id)[5]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def _sign_and_send(self, signer: TransactionSigner, txns: list[ftxn.Transaction]) -> str:
        if len(txns) > 1:
            ftxn.assign_group_id(txns)
        try:
            signed = signer.sign_transactions(txns, list(range(len(txns))))
        except Exception as e:
            # Any signer failure counts as a declined signature.
            raise TransactionRejected(f"Signing failed: {e}") from e

        try:
            self.client.send_transactions(signed)
        except error.AlgodHTTPError as e:
            if getattr(e, "code", None) in _REJECTED_HTTP_CODES:
                raise TransactionReverted(str(e)) from e
            raise GatewayUnavailable(f"send failed: {e}") from e
        except OSError as e:
            raise GatewayUnavailable(f"send failed: {e}") from e
        return txns[-1].get_txid()

    def submit_mint(
        self,
        sender: str,
        signer: TransactionSigner,
        weight: int,
        purity_bp: int,
        origin: str,
        refinery: str,
        vault: str,
    ) -> str:
        """Submit [Payment(box MBR) → app, AppCall("mint")]; returns the app-call txid."""
        next_id = normalize_uint(self.get_total_count(), KEY_TOTAL)
        mbr = box_mbr(record_len(origin, refinery, vault))

        try:
            sp = self.client.suggested_params()
        except (error.AlgodHTTPError, OSError) as e:
            raise GatewayUnavailable(f"suggested_params failed: {e}") from e

        pay = ftxn.PaymentTxn(sender=sender, sp=sp, receiver=self.app_address, amt=mbr)
        call = ftxn.ApplicationNoOpTxn(
            sender=sender,
            sp=sp,
            index=self.app_id,
            app_args=[
                METHOD_MINT,
                int(weight).to_bytes(UINT_LEN, "big"),
                int(purity_bp).to_bytes(UINT_LEN, "big"),
                origin.encode(),
                refinery.encode(),
                vault.encode(),
            ],
            boxes=[(0, box_name(next_id))],
        )
        txid = self._sign_and_send(signer, [pay, call])
        log.info("Submitted mint for #%d (txid=%s, mbr=%d µAlgos)", next_id, txid, mbr)
        return txid

    def submit_transfer(
        self, sender: str, signer: TransactionSigner, cert_id: int, new_owner: str
    ) -> str:
        """Submit AppCall("transfer") moving `cert_id` to `new_owner`."""
        owner_raw = _addr32(new_owner)
        try:
            sp = self.client.suggested_params()
        except (error.AlgodHTTPError, OSError) as e:
            raise GatewayUnavailable(f"suggested_params failed: {e}") from e

        call = ftxn.ApplicationNoOpTxn(
            sender=sender,
            sp=sp,
            index=self.app_id,
            app_args=[METHOD_TRANSFER, int(cert_id).to_bytes(UINT_LEN, "big"), owner_raw],
            boxes=[(0, box_name(cert_id))],
        )
        txid = self._sign_and_send(signer, [call])
        log.info("Submitted transfer of #%d (txid=%s)", cert_id, txid)
        return txid

    def await_confirmation(self, txid: str) -> dict[str, Any]:
        """Block until `txid` is confirmed; returns algod's pending-txn info."""
        try:
            return wait_for_confirmation(self.client, txid, self.confirm_rounds)
        except error.ConfirmationTimeoutError as e:
            raise ConfirmationTimeout(
                f"{txid} not confirmed within {self.confirm_rounds} rounds"
            ) from e
        except error.TransactionRejectedError as e:
            raise TransactionReverted(str(e)) from e
        except (error.AlgodHTTPError, OSError) as e:
            raise GatewayUnavailable(f"confirmation poll for {txid} failed: {e}") from e


def minted_id(confirmation: dict[str, Any]) -> int | None:
    """Certificate id logged by a confirmed mint, or None if absent."""
    for entry in confirmation.get("logs", []):
        raw = base64.b64decode(entry)
        if raw.startswith(EVENT_MINTED):
            return int.from_bytes(raw[len(EVENT_MINTED) :], "big")
    return None
