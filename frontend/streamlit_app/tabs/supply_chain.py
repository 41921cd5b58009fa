# frontend/streamlit_app/tabs/supply_chain.py
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Streamlit tab: Supply Chain Tracking

Each bar gets a fixed three-step journey (Minted → Refined → Vaulted) built
from the certificate's own fields. No ledger events are read here.
"""

import streamlit as st

from core.session import CertificateSession
from ui.components import provenance_list


def render(ctx: dict, session: CertificateSession) -> None:
    """Render the Supply Chain tab."""
    st.header("Supply Chain Tracking")
    certs = session.state.certificates
    if not certs:
        st.info("Nothing to trace yet.")
        return

    units_per_kg = ctx["settings"].WEIGHT_UNITS_PER_KG
    for cert in certs:
        with st.container(border=True):
            provenance_list(cert, units_per_kg=units_per_kg)
