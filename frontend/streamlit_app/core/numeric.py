# frontend/streamlit_app/core/numeric.py
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Fixed-width integer normalization for ledger values.

Algod hands numeric data back in several shapes: JSON integers for global
state uints, base64 byte strings for byte-slice state, 8-byte big-endian
slices inside box values, and occasionally decimal strings from tooling.
`normalize_uint` is the single ingestion point for all of them; every numeric
certificate field passes through it before any arithmetic is done.

Ledger values are uints held in a signed 64-bit integer, so the accepted
range is [0, INT64_MAX]. AVM uints go up to 2**64 - 1; values above
INT64_MAX and negative inputs are reported rather than truncated.
"""

from typing import Final

from core.errors import PrecisionLoss

INT64_MAX: Final[int] = 2**63 - 1


def normalize_uint(raw: object, field: str, cert_id: int | None = None) -> int:
    """Convert a raw ledger value into a range-checked int.

    Args:
        raw: `int`, decimal `str`, or big-endian `bytes`/`bytearray`.
        field: Field name, used in the error.
        cert_id: Certificate id the value belongs to (None for `total`).

    Returns:
        The value as a Python int within [0, INT64_MAX].

    Raises:
        PrecisionLoss: Unsupported type, unparsable text, negative, or out of range.
    """
    # bool is an int subclass; a flag is never a valid quantity.
    if isinstance(raw, bool):
        raise PrecisionLoss(field, cert_id, raw)

    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, (bytes, bytearray)):
        if not raw:
            raise PrecisionLoss(field, cert_id, raw)
        value = int.from_bytes(bytes(raw), "big")
    elif isinstance(raw, str):
        try:
            value = int(raw.strip(), 10)
        except ValueError as e:
            raise PrecisionLoss(field, cert_id, raw) from e
    else:
        raise PrecisionLoss(field, cert_id, raw)

    if not 0 <= value <= INT64_MAX:
        raise PrecisionLoss(field, cert_id, raw)
    return value
