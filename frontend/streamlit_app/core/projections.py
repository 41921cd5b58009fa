# frontend/streamlit_app/core/projections.py
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Read projections over a synchronized certificate snapshot.

All functions here are pure: they take certificates already normalized by
`services.sync` and never touch the ledger. Weight arithmetic is done in
`Decimal` so reserves come out exact (e.g. 250 g + 500 g == Decimal("0.750") kg).
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from services.sync import Certificate

DEFAULT_UNITS_PER_KG = 1000


@dataclass(frozen=True)
class ProvenanceStep:
    stage: str
    detail: str


def total_weight_kg(
    certs: Iterable[Certificate], units_per_kg: int = DEFAULT_UNITS_PER_KG
) -> Decimal:
    """Sum of certificate weights converted to kilograms."""
    if units_per_kg <= 0:
        raise ValueError(f"units_per_kg must be positive, got {units_per_kg}")
    total_units = sum(c.weight for c in certs)
    return Decimal(total_units) / Decimal(units_per_kg)


def certificate_count(certs: Sequence[Certificate]) -> int:
    return len(certs)


def format_weight_kg(weight: int, units_per_kg: int = DEFAULT_UNITS_PER_KG) -> str:
    """'0.250 kg' style label for one bar."""
    kg = Decimal(weight) / Decimal(units_per_kg)
    return f"{kg:.3f} kg"


def format_purity(purity_bp: int) -> str:
    """Basis points → percentage with two decimals (9990 → '99.90%')."""
    return f"{Decimal(purity_bp) / Decimal(100):.2f}%"


# Short labels for the scales the contract is deployed with.
_UNIT_LABELS = {1000: "g", 1_000_000: "mg"}


def format_weight_units(weight: int, units_per_kg: int = DEFAULT_UNITS_PER_KG) -> str:
    """'250g' / '250000mg' in stored units; falls back to kg for other scales."""
    label = _UNIT_LABELS.get(units_per_kg)
    if label is None:
        return format_weight_kg(weight, units_per_kg)
    return f"{weight}{label}"


def provenance(
    cert: Certificate, units_per_kg: int = DEFAULT_UNITS_PER_KG
) -> tuple[ProvenanceStep, ...]:
    """Fixed three-step journey derived from the certificate's static fields.

    This is not an event history; no ledger events are consulted.
    """
    weight = format_weight_units(cert.weight, units_per_kg)
    return (
        ProvenanceStep("Minted", f"{weight} gold bar from {cert.mine_origin}"),
        ProvenanceStep("Refined", f"{cert.refinery} - {format_purity(cert.purity_bp)} purity"),
        ProvenanceStep("Vaulted", f"{cert.vault_location} - Secure storage"),
    )


# How many characters to show from the start/end of an address when eliding.
_ADDR_PREFIX = 6
_ADDR_SUFFIX = 4


def short_addr(addr: str | None, *, prefix: int = _ADDR_PREFIX, suffix: int = _ADDR_SUFFIX) -> str:
    """Return a human-friendly shortened form of a ledger address.

    "ABCDEF…WXYZ" for a typical 58-char address. Short addresses are returned
    unchanged; None/empty yields "—".
    """
    if not addr:
        return "—"
    if len(addr) <= prefix + suffix + 1:
        return addr
    return f"{addr[:prefix]}…{addr[-suffix:]}"
