# frontend/streamlit_app/core/constants.py
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Ledger layout constants and demo presets for the gold certificate console.

This module centralizes:
  1) **Protocol economics** for application boxes (the minimum balance the
     application account must hold for each certificate record).
  2) **Record layout** shared by the PyTeal contract and the gateway decoder.
  3) **Demo mint preset** used by the Dashboard button.

Design notes
------------
- Constants are typed `Final` to communicate immutability and to help static
  analyzers catch accidental reassignment.
- Keep the layout values in sync with `backend/contracts/gold_certificate.py`.
"""

from typing import Final

# ---------------------------------------------------------------------------
# Algorand box economics (microAlgos).
# ---------------------------------------------------------------------------

#: Flat MBR charged per box, independent of its size.
BOX_MBR_FLAT: Final[int] = 2_500

#: MBR charged per byte of box name + box value.
BOX_MBR_PER_BYTE: Final[int] = 400

# ---------------------------------------------------------------------------
# Contract interface
# ---------------------------------------------------------------------------

#: Global-state key holding the number of minted certificates.
KEY_TOTAL: Final[str] = "total"

METHOD_MINT: Final[bytes] = b"mint"
METHOD_TRANSFER: Final[bytes] = b"transfer"

#: Log prefixes emitted by the contract (followed by itob(id)).
EVENT_MINTED: Final[bytes] = b"CertificateMinted"
EVENT_TRANSFERRED: Final[bytes] = b"CertificateTransferred"

# ---------------------------------------------------------------------------
# Record layout: weight:u64 | purity:u64 | mint_ts:u64 | owner:32 | 3 x (u16 len + utf-8)
# ---------------------------------------------------------------------------

BOX_NAME_LEN: Final[int] = 8
UINT_LEN: Final[int] = 8
ADDR_LEN: Final[int] = 32
STR_LEN_PREFIX: Final[int] = 2
OWNER_OFFSET: Final[int] = 3 * UINT_LEN
FIXED_PART_LEN: Final[int] = OWNER_OFFSET + ADDR_LEN

MAX_PURITY_BP: Final[int] = 10_000

# ---------------------------------------------------------------------------
# Demo preset (Dashboard "Mint New Gold Certificate" button)
# ---------------------------------------------------------------------------

DEMO_WEIGHT: Final[int] = 250  # grams
DEMO_PURITY_BP: Final[int] = 9_990  # 99.90%
DEMO_ORIGIN: Final[str] = "Pueblo Viejo, Dominican Republic"
DEMO_REFINERY: Final[str] = "Global Refinery, UK"
DEMO_VAULT: Final[str] = "London Vault C3"


def box_name(cert_id: int) -> bytes:
    """Box name for a certificate id (8-byte big-endian, as TEAL `itob`)."""
    return int(cert_id).to_bytes(BOX_NAME_LEN, "big")


def box_mbr(value_len: int) -> int:
    """MBR in µAlgos for one certificate box holding `value_len` bytes."""
    return BOX_MBR_FLAT + BOX_MBR_PER_BYTE * (BOX_NAME_LEN + int(value_len))


def record_len(origin: str, refinery: str, vault: str) -> int:
    """Encoded box size for a certificate with the given text fields."""
    texts = (origin, refinery, vault)
    return FIXED_PART_LEN + sum(STR_LEN_PREFIX + len(t.encode()) for t in texts)
