# frontend/streamlit_app/ui/components.py
# SPDX-License-Identifier: Apache-2.0
"""Reusable Streamlit UI components for certificates.

Currently provided:
  • error_banner(): Render the session's last error next to the snapshot.
  • certificate_card(): One gold bar with weight, purity, origin and owner.
  • provenance_list(): The three-step journey of one bar.
"""

from __future__ import annotations

import streamlit as st

from core.errors import GoldLedgerError, OperationInProgress
from core.projections import (
    format_purity,
    format_weight_kg,
    provenance,
    short_addr,
)
from services.sync import Certificate


def error_banner(err: GoldLedgerError | None) -> None:
    """Show the last operation error; the snapshot below it stays visible."""
    if err is None:
        return
    if isinstance(err, OperationInProgress):
        st.info(str(err))
    else:
        st.error(f"{type(err).__name__}: {err}")


def certificate_card(cert: Certificate, *, units_per_kg: int) -> None:
    """Render a bordered card for one certificate."""
    with st.container(border=True):
        st.markdown(f"### Gold Bar #{cert.id}")
        st.markdown(
            f"**Weight:** {format_weight_kg(cert.weight, units_per_kg)}  \n"
            f"**Purity:** {format_purity(cert.purity_bp)}  \n"
            f"**Origin:** {cert.mine_origin}  \n"
            f"**Refinery:** {cert.refinery}  \n"
            f"**Vault:** {cert.vault_location}  \n"
            f"**Owner:** `{short_addr(cert.owner)}`"
        )


def provenance_list(cert: Certificate, *, units_per_kg: int) -> None:
    """Render the Minted → Refined → Vaulted steps for one certificate."""
    st.markdown(f"#### Bar #{cert.id} - {cert.mine_origin}")
    lines = [f"- ✅ **{step.stage}:** {step.detail}" for step in provenance(cert, units_per_kg)]
    st.markdown("\n".join(lines))
