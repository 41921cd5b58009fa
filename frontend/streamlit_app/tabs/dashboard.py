# frontend/streamlit_app/tabs/dashboard.py
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Streamlit tab: Dashboard: Platform Overview

Shows the two reserve aggregates computed from the current snapshot and the
demo actions:
  • "Mint New Gold Certificate (Demo)" mints a 250 g bar from Pueblo Viejo,
    waits for confirmation, then re-synchronizes the full collection.
  • "Refresh" re-reads every certificate from the ledger.

The overview metrics are drawn after the button handlers so they always show
the snapshot the session holds at the end of the run.

Both buttons are disabled while the session is busy; a click that still races
another operation surfaces `OperationInProgress` instead of starting work.
"""

import streamlit as st

from core.errors import OperationInProgress
from core.session import DEMO_MINT, CertificateSession
from ui.components import error_banner
from ui.keys import k


def render(ctx: dict, session: CertificateSession) -> None:
    """Render the Dashboard tab."""
    st.header("Platform Overview")
    state = session.state
    units_per_kg = ctx["settings"].WEIGHT_UNITS_PER_KG

    # Filled after the actions below so a mint shows up in this same run.
    overview = st.container()

    st.markdown("---")
    st.subheader("Demo Actions")

    mint_clicked = st.button(
        "Mint New Gold Certificate (Demo)",
        disabled=state.loading or not state.connected,
        use_container_width=True,
        key=k("dashboard", "mint"),
    )
    st.caption(
        f"This will create a new {DEMO_MINT.weight}g gold certificate from "
        f"{DEMO_MINT.origin.split(', ')[-1]}."
    )
    refresh_clicked = st.button(
        "Refresh",
        disabled=state.loading or not state.connected,
        key=k("dashboard", "refresh"),
    )

    try:
        if mint_clicked:
            with st.spinner("Minting… waiting for confirmation"):
                state = session.request_mint(DEMO_MINT)
            if state.error is None:
                st.success("✅ New gold certificate minted!")
        elif refresh_clicked:
            with st.spinner("Synchronizing…"):
                state = session.refresh()
    except OperationInProgress as e:
        st.info(str(e))

    state = session.state
    with overview:
        col1, col2 = st.columns(2)
        col1.metric("Total Gold Reserves", f"{state.total_weight_kg(units_per_kg):.3f} kg")
        col2.metric("Active Certificates", f"{state.certificate_count} bars")

    error_banner(state.error)
