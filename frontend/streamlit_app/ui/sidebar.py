# frontend/streamlit_app/ui/sidebar.py
# SPDX-License-Identifier: Apache-2.0
"""Sidebar composition for the gold certificate console.

The sidebar is the wallet surface: the operator pastes a TestNet mnemonic,
authorizes the console to use it, and connects. Connecting runs the first
full certificate sync. The sidebar also shows the connected account, its ALGO
balance, the session phase and the configured application.

Security & Privacy
------------------
- **TestNet only.** Mnemonics are accepted here strictly for demos.
- The mnemonic is a password field and lives only in process memory for the
  lifetime of the session. It is never logged.

Returns
-------
`render_sidebar_and_status(session)` returns a context dictionary with
`settings`, `GUIDED_MODE`, the current `state` (a `ViewState`) and the
`status` slot. Call `render_status(ctx, session)` after the tabs so the
status block reflects whatever they just did.
"""

from __future__ import annotations

import os
from typing import Any

import streamlit as st

from core.clients import get_algod
from core.config import settings
from core.errors import OperationInProgress
from core.projections import short_addr
from core.session import CertificateSession
from core.state import ensure_defaults
from services.wallet import MnemonicWallet
from ui.keys import k


def fmt_algos(micro: int) -> str:
    """Format µAlgos into a human string."""
    return f"{micro / 1_000_000:.6f} ALGO"


def _account_row(addr: str | None) -> None:
    """Render the connected account with a live balance (n/a on failure)."""
    if not addr:
        st.write("**Account**: —")
        return
    try:
        bal = int(get_algod().account_info(addr).get("amount", 0))
        st.write(f"**Account**  `{short_addr(addr)}`  ✅ {fmt_algos(bal)}")
    except Exception:
        # Keep the sidebar responsive even if the node is down.
        st.write(f"**Account**  `{short_addr(addr)}`  ⚠️ n/a")


def render_sidebar_and_status(session: CertificateSession) -> dict[str, Any]:
    """Render the wallet sidebar and return a context dict for tab renderers."""
    ensure_defaults()

    st.sidebar.header("Wallet (TestNet only)")

    mn = st.sidebar.text_input(
        "Wallet mnemonic",
        os.getenv("WALLET_MNEMONIC") or "",
        type="password",
        key=k("sidebar", "mnemonic"),
    )
    authorized = st.sidebar.toggle(
        "Allow this console to use the account",
        key="WALLET_AUTHORIZED",
    )

    state = session.state
    col_a, col_b = st.sidebar.columns(2)
    if col_a.button(
        "Connect",
        disabled=state.loading,
        use_container_width=True,
        key=k("sidebar", "connect"),
    ):
        wallet = MnemonicWallet(mn, authorized=authorized) if mn.strip() else None
        try:
            with st.spinner("Connecting…"):
                state = session.connect(wallet)
        except OperationInProgress as e:
            st.sidebar.info(str(e))
    if col_b.button(
        "Disconnect",
        disabled=not state.connected,
        use_container_width=True,
        key=k("sidebar", "disconnect"),
    ):
        state = session.disconnect()

    GUIDED_MODE = st.sidebar.toggle("Stacked certificate cards", value=True)

    # Filled by `render_status` once the tabs have run their operations.
    status = st.sidebar.container()

    return dict(settings=settings, GUIDED_MODE=GUIDED_MODE, state=state, status=status)


def render_status(ctx: dict[str, Any], session: CertificateSession) -> None:
    """Draw the status block from the session's current state."""
    state = session.state
    with ctx["status"]:
        st.markdown("### Status")
        _account_row(state.account)
        st.markdown(
            f"Phase: `{state.phase.value}`  \n"
            f"Gold App ID: `{settings.GOLD_APP_ID}`  \n"
            f"Certificates: `{state.certificate_count}`"
        )
        if state.last_txid:
            st.caption(f"Last txid: {state.last_txid}")

        st.markdown("[TestNet Faucet](https://bank.testnet.algorand.network/)")
