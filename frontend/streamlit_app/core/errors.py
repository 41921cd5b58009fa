# frontend/streamlit_app/core/errors.py
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Error taxonomy for the gold certificate console.

Every failure raised by the ledger gateway, the synchronizer, or the session
derives from :class:`GoldLedgerError` so that the UI can catch one type and
render `str(e)` for the operator. Gateway errors keep the underlying algosdk
exception as `__cause__` (`raise ... from e`).
"""


class GoldLedgerError(RuntimeError):
    """Base class for all console failures."""


# --- Wallet ------------------------------------------------------------------


class NoWalletProvider(GoldLedgerError):
    """No wallet is configured for this session."""


class UserRejected(GoldLedgerError):
    """The operator declined the account request."""


# --- Ledger reads --------------------------------------------------------------


class GatewayUnavailable(GoldLedgerError):
    """Network or contract-call failure while talking to algod."""


class RecordNotFound(GoldLedgerError):
    """No certificate box exists for the requested id."""

    def __init__(self, cert_id: int):
        super().__init__(f"Certificate #{cert_id} not found on ledger")
        self.cert_id = cert_id


# --- Ledger writes -------------------------------------------------------------


class TransactionRejected(GoldLedgerError):
    """The wallet refused (or failed) to sign the transaction."""


class TransactionReverted(GoldLedgerError):
    """The node or the application rejected the transaction."""


class ConfirmationTimeout(GoldLedgerError):
    """The transaction was not confirmed within the configured rounds."""


# --- Synchronization -----------------------------------------------------------


class PrecisionLoss(GoldLedgerError):
    """A numeric ledger field does not fit the fixed-width representation."""

    def __init__(self, field: str, cert_id: int | None, raw: object = None):
        where = "total" if cert_id is None else f"certificate #{cert_id}"
        super().__init__(f"Field '{field}' of {where} out of range: {raw!r}")
        self.field = field
        self.cert_id = cert_id
        self.raw = raw


class SyncFailed(GoldLedgerError):
    """A record fetch failed; the whole refresh was aborted."""

    def __init__(self, cert_id: int, cause: BaseException):
        super().__init__(f"Sync aborted at certificate #{cert_id}: {cause}")
        self.cert_id = cert_id
        self.cause = cause


# --- Session -------------------------------------------------------------------


class OperationInProgress(GoldLedgerError):
    """Another connect/refresh/mint is still running for this session."""


class NotConnected(GoldLedgerError):
    """The operation requires a connected account."""
