# frontend/streamlit_app/tabs/certificates.py
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""Streamlit tab: Digital Gold Certificates (one card per bar, id order)."""

import streamlit as st

from core.session import CertificateSession
from ui.components import certificate_card
from ui.layout import stack_or_columns_spec


_GRID_COLUMNS = 3


def render(ctx: dict, session: CertificateSession) -> None:
    """Render the Gold Certificates tab."""
    st.header("Digital Gold Certificates")
    certs = session.state.certificates
    if not certs:
        st.info("No certificates loaded. Connect a wallet or mint one from the Dashboard.")
        return

    units_per_kg = ctx["settings"].WEIGHT_UNITS_PER_KG
    slots = stack_or_columns_spec(_GRID_COLUMNS, ctx["GUIDED_MODE"])
    for i, cert in enumerate(certs):
        with slots[i % len(slots)]:
            certificate_card(cert, units_per_kg=units_per_kg)
