# frontend/streamlit_app/core/session.py
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Session/view state for the gold certificate console.

One `CertificateSession` per browser session owns a single immutable
`ViewState` value (phase, account, certificate snapshot, last error). Pages
read `session.state` and call the three operations:

    connect(wallet)       DISCONNECTED/READY → CONNECTING → SYNCING → READY
    refresh()             READY → SYNCING → READY
    request_mint(request) READY → MINTING → SYNCING → READY

Rules
-----
- Only one operation runs at a time. Starting another while CONNECTING,
  SYNCING or MINTING raises `OperationInProgress` and does nothing else.
- Failures become `state.error`; the last good snapshot is kept.
- Every operation holds a request token. Results are applied only while that
  token is current, so `discard()`/`disconnect()` make late results no-ops.
- A successful mint always triggers a full refresh; the new certificate is
  never appended locally.
"""

import logging
import threading
from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Protocol

from algosdk.atomic_transaction_composer import TransactionSigner

from core.constants import (
    DEMO_ORIGIN,
    DEMO_PURITY_BP,
    DEMO_REFINERY,
    DEMO_VAULT,
    DEMO_WEIGHT,
    MAX_PURITY_BP,
)
from core.errors import GoldLedgerError, NotConnected, OperationInProgress
from core.projections import DEFAULT_UNITS_PER_KG, total_weight_kg
from services import sync
from services.sync import Certificate
from services.wallet import WalletProvider

log = logging.getLogger(__name__)


class Phase(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    READY = "ready"
    SYNCING = "syncing"
    MINTING = "minting"


BUSY_PHASES = frozenset({Phase.CONNECTING, Phase.SYNCING, Phase.MINTING})


class Gateway(Protocol):
    def connect(self, wallet: WalletProvider | None) -> tuple[str, TransactionSigner]: ...

    def get_total_count(self) -> Any: ...

    def get_record(self, cert_id: int) -> Any: ...

    def submit_mint(
        self,
        sender: str,
        signer: TransactionSigner,
        weight: int,
        purity_bp: int,
        origin: str,
        refinery: str,
        vault: str,
    ) -> str: ...

    def await_confirmation(self, txid: str) -> dict[str, Any]: ...


@dataclass(frozen=True)
class MintRequest:
    """Parameters for one new certificate."""

    weight: int
    purity_bp: int
    origin: str
    refinery: str
    vault: str

    def __post_init__(self) -> None:
        if int(self.weight) <= 0:
            raise ValueError(f"weight must be positive, got {self.weight}")
        if not 0 < int(self.purity_bp) <= MAX_PURITY_BP:
            raise ValueError(f"purity_bp must be in (0, {MAX_PURITY_BP}], got {self.purity_bp}")
        for name in ("origin", "refinery", "vault"):
            if not str(getattr(self, name)).strip():
                raise ValueError(f"{name} must not be empty")


DEMO_MINT = MintRequest(
    weight=DEMO_WEIGHT,
    purity_bp=DEMO_PURITY_BP,
    origin=DEMO_ORIGIN,
    refinery=DEMO_REFINERY,
    vault=DEMO_VAULT,
)


@dataclass(frozen=True)
class ViewState:
    phase: Phase = Phase.DISCONNECTED
    account: str | None = None
    certificates: tuple[Certificate, ...] = ()
    error: GoldLedgerError | None = None
    last_txid: str | None = None
    request_id: int = field(default=0, compare=False)

    @property
    def loading(self) -> bool:
        return self.phase in BUSY_PHASES

    @property
    def connected(self) -> bool:
        return self.account is not None

    @property
    def certificate_count(self) -> int:
        return len(self.certificates)

    def total_weight_kg(self, units_per_kg: int = DEFAULT_UNITS_PER_KG) -> Decimal:
        return total_weight_kg(self.certificates, units_per_kg)


class CertificateSession:
    """Single owned handle over the console's view state."""

    def __init__(self, gateway: Gateway, *, sync_workers: int = 1):
        self.gateway = gateway
        self.sync_workers = sync_workers
        self._lock = threading.Lock()
        self._state = ViewState()
        self._signer: TransactionSigner | None = None

    @property
    def state(self) -> ViewState:
        return self._state

    # -------------------------------------------------------------------------
    # Transition plumbing
    # -------------------------------------------------------------------------

    def _begin(self, allowed: frozenset[Phase], phase: Phase) -> int:
        with self._lock:
            current = self._state.phase
            if current in BUSY_PHASES:
                raise OperationInProgress(f"Session is busy ({current.value}).")
            if current not in allowed:
                raise NotConnected("Connect a wallet first.")
            token = self._state.request_id + 1
            self._state = replace(self._state, phase=phase, error=None, request_id=token)
            return token

    def _apply(self, token: int, **changes: Any) -> bool:
        with self._lock:
            if token != self._state.request_id:
                log.info("Dropping stale result for request %d", token)
                return False
            self._state = replace(self._state, **changes)
            return True

    def _fail(self, token: int, phase: Phase, exc: GoldLedgerError) -> ViewState:
        log.warning("Operation failed (%s): %s", type(exc).__name__, exc)
        self._apply(token, phase=phase, error=exc)
        return self._state

    def _sync(self, token: int) -> ViewState:
        try:
            certs = sync.refresh(self.gateway, max_workers=self.sync_workers)
        except GoldLedgerError as e:
            return self._fail(token, Phase.READY, e)
        except BaseException:
            self._apply(token, phase=Phase.READY)
            raise
        self._apply(token, phase=Phase.READY, certificates=certs, error=None)
        return self._state

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def connect(self, wallet: WalletProvider | None) -> ViewState:
        """Connect the wallet, then load the full certificate collection."""
        token = self._begin(frozenset({Phase.DISCONNECTED, Phase.READY}), Phase.CONNECTING)
        try:
            account, signer = self.gateway.connect(wallet)
        except GoldLedgerError as e:
            self._signer = None
            log.warning("Connect failed (%s): %s", type(e).__name__, e)
            self._apply(token, phase=Phase.DISCONNECTED, account=None, error=e)
            return self._state
        except BaseException:
            self._apply(token, phase=Phase.DISCONNECTED, account=None)
            raise

        if not self._apply(token, phase=Phase.SYNCING, account=account):
            return self._state
        self._signer = signer
        return self._sync(token)

    def refresh(self) -> ViewState:
        """Re-read every certificate from the ledger."""
        token = self._begin(frozenset({Phase.READY}), Phase.SYNCING)
        return self._sync(token)

    def request_mint(self, request: MintRequest = DEMO_MINT) -> ViewState:
        """Mint one certificate, wait for confirmation, then re-sync."""
        token = self._begin(frozenset({Phase.READY}), Phase.MINTING)
        account, signer = self._state.account, self._signer
        if account is None or signer is None:
            self._apply(token, phase=Phase.READY)
            raise NotConnected("No signing capability; reconnect the wallet.")

        try:
            txid = self.gateway.submit_mint(
                account,
                signer,
                request.weight,
                request.purity_bp,
                request.origin,
                request.refinery,
                request.vault,
            )
            if not self._apply(token, last_txid=txid):
                return self._state
            self.gateway.await_confirmation(txid)
        except GoldLedgerError as e:
            return self._fail(token, Phase.READY, e)
        except BaseException:
            self._apply(token, phase=Phase.READY)
            raise

        log.info("Mint %s confirmed; re-synchronizing", txid)
        if not self._apply(token, phase=Phase.SYNCING):
            return self._state
        return self._sync(token)

    def discard(self) -> ViewState:
        """Invalidate any in-flight operation; its eventual result is dropped."""
        with self._lock:
            phase = self._state.phase
            if phase is Phase.CONNECTING:
                phase = Phase.DISCONNECTED
            elif phase in BUSY_PHASES:
                phase = Phase.READY
            self._state = replace(self._state, phase=phase, request_id=self._state.request_id + 1)
            return self._state

    def disconnect(self) -> ViewState:
        """Forget the account, the signer and the snapshot."""
        with self._lock:
            self._signer = None
            self._state = ViewState(request_id=self._state.request_id + 1)
            return self._state
