# frontend/streamlit_app/app.py
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

__doc__ = """Gold Digitalization Platform: Operator Console (Streamlit).

This module is the Streamlit entrypoint. It wires up logging, the page
chrome, the wallet sidebar and the three tabs:

  1) Dashboard          : reserves, certificate count, demo mint, refresh.
  2) Gold Certificates  : one card per bar.
  3) Supply Chain       : Minted → Refined → Vaulted per bar.

Design notes:
* We import sibling packages (core/, services/, ui/, tabs/) by adding this
  directory to sys.path, so `streamlit run frontend/streamlit_app/app.py`
  works without installing the project.
* All certificate state lives in one `CertificateSession` stored in
  `st.session_state` (see core/state.py). Tabs read `session.state` and call
  session operations; they never talk to algod directly.
* Keep this file intentionally thin.
"""

# ────────────────────── sys.path bootstrap for local packages ─────────────────
import pathlib
import sys

APP_DIR = pathlib.Path(__file__).resolve().parent
if str(APP_DIR) not in sys.path:
    sys.path.insert(0, str(APP_DIR))
# ──────────────────────────────────────────────────────────────────────────────

import logging
from typing import Final

import streamlit as st

from core.clients import get_gateway
from core.config import settings
from core.session import CertificateSession
from core.state import get_session
from tabs import certificates, dashboard, supply_chain
from ui.layout import configure_page
from ui.sidebar import render_sidebar_and_status, render_status

logging.basicConfig(
    level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)-8s: %(message)s"
)

configure_page(title="Gold Digitalization Platform")

if settings.GOLD_APP_ID <= 0:
    st.error(
        "GOLD_APP_ID is not set. Deploy the contract with "
        "`python backend/scripts/deploy_gold_platform.py` and add the printed "
        "app id to `.env`."
    )
    st.stop()

session = get_session(
    lambda: CertificateSession(get_gateway(), sync_workers=settings.SYNC_WORKERS)
)
ctx: dict = render_sidebar_and_status(session)

# Keep tab order stable; Streamlit persists per-tab widget state by key.
TAB_TITLES: Final[list[str]] = [
    "Dashboard",
    "Gold Certificates",
    "Supply Chain",
]

tab1, tab2, tab3 = st.tabs(TAB_TITLES)

with tab1:
    dashboard.render(ctx, session)

with tab2:
    certificates.render(ctx, session)

with tab3:
    supply_chain.render(ctx, session)

# Last, so the sidebar status reflects any mint/refresh done in the tabs above.
render_status(ctx, session)
