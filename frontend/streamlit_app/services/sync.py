# frontend/streamlit_app/services/sync.py
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Certificate synchronizer: full-refresh read of the gold certificate ledger.

`refresh(gateway)` reads the current `total`, fetches every record in
`[0, total)`, normalizes each one into a `Certificate`, and returns the
complete tuple sorted by id. A refresh is all-or-nothing: if any record fetch
fails the whole pass raises `SyncFailed` and nothing is returned, so callers
never publish a collection that understates the reserves.

Fetches may run in a thread pool (`max_workers > 1`); results are joined and
re-sorted before returning, so the output order never depends on completion
order.
"""

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Protocol

from core.errors import GoldLedgerError, PrecisionLoss, SyncFailed
from core.numeric import normalize_uint

log = logging.getLogger(__name__)


class CertificateSource(Protocol):
    """The read half of `services.ledger.LedgerGateway`."""

    def get_total_count(self) -> Any: ...

    def get_record(self, cert_id: int) -> Sequence[Any]: ...


@dataclass(frozen=True)
class Certificate:
    """One minted gold bar, as of one synchronization pass."""

    id: int
    weight: int
    purity_bp: int
    mine_origin: str
    refinery: str
    vault_location: str
    mint_timestamp: int
    owner: str


def to_certificate(cert_id: int, raw: Sequence[Any]) -> Certificate:
    """Normalize the contract's positional tuple into a `Certificate`.

    Tuple order: (weight, purity, origin, refinery, mint_date, owner, vault).
    """
    if len(raw) != 7:
        raise ValueError(f"Certificate #{cert_id}: expected 7 fields, got {len(raw)}")
    weight, purity, origin, refinery, mint_date, owner, vault = raw
    return Certificate(
        id=cert_id,
        weight=normalize_uint(weight, "weight", cert_id),
        purity_bp=normalize_uint(purity, "purity", cert_id),
        mine_origin=str(origin),
        refinery=str(refinery),
        vault_location=str(vault),
        mint_timestamp=normalize_uint(mint_date, "mint_date", cert_id),
        owner=str(owner),
    )


def _fetch_one(source: CertificateSource, cert_id: int) -> Certificate:
    try:
        raw = source.get_record(cert_id)
    except GoldLedgerError as e:
        raise SyncFailed(cert_id, e) from e
    try:
        return to_certificate(cert_id, raw)
    except PrecisionLoss:
        raise
    except ValueError as e:
        raise SyncFailed(cert_id, e) from e


def _check_contiguous(certs: Sequence[Certificate], total: int) -> None:
    ids = [c.id for c in certs]
    if ids != list(range(total)):
        # The ledger owns id assignment; report and keep what was built.
        log.warning(
            "Non-contiguous certificate ids after sync (total=%d, got=%s)",
            total,
            ids,
        )


def refresh(source: CertificateSource, *, max_workers: int = 1) -> tuple[Certificate, ...]:
    """Fetch and normalize every certificate currently on the ledger.

    Args:
        source: Gateway (or any object with `get_total_count`/`get_record`).
        max_workers: Parallel record fetches; `<= 1` fetches sequentially.

    Returns:
        Tuple of certificates sorted by id ascending, one per id in `[0, total)`.

    Raises:
        PrecisionLoss: `total` or a numeric field is out of range.
        SyncFailed: A record fetch failed (carries the id and the cause).
        GatewayUnavailable: The `total` read itself failed.
    """
    total = normalize_uint(source.get_total_count(), "total")
    if total == 0:
        return ()

    certs: list[Certificate] = []
    if max_workers <= 1 or total == 1:
        for cert_id in range(total):
            certs.append(_fetch_one(source, cert_id))
    else:
        with ThreadPoolExecutor(max_workers=min(max_workers, total)) as executor:
            future_map = {executor.submit(_fetch_one, source, i): i for i in range(total)}
            try:
                for fut in as_completed(future_map):
                    certs.append(fut.result())
            except BaseException:
                # Don't start fetches that haven't begun; the pass is already lost.
                for fut in future_map:
                    fut.cancel()
                raise

    certs.sort(key=lambda c: c.id)
    _check_contiguous(certs, total)
    log.info("Synchronized %d certificate(s)", len(certs))
    return tuple(certs)
