# frontend/streamlit_app/core/clients.py
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Client factories for the gold certificate console.

This module exposes two cached constructors:

- `get_algod()`   → `algosdk.v2client.algod.AlgodClient`
- `get_gateway()` → `services.ledger.LedgerGateway` for `settings.GOLD_APP_ID`

Both are wrapped with `@st.cache_resource` so that a single instance is
created per Streamlit process and persists across reruns. Objects are stored
as resources (not pickled), which is appropriate for network clients.

Failure behavior:
  * `get_algod()` does no health check; network/auth errors surface when the
    first request is executed.
  * `get_gateway()` raises `ValueError` when `GOLD_APP_ID` is unset; the app
    entrypoint renders that as a setup hint.
"""

import streamlit as st
from algosdk.v2client import algod

from services.ledger import LedgerGateway

from .config import settings


@st.cache_resource(show_spinner=False)
def get_algod() -> algod.AlgodClient:
    """Construct (once) and return a cached Algod client."""
    # No eager validation here: construction is cheap; defer errors to call time.
    return algod.AlgodClient(settings.ALGOD_TOKEN, settings.ALGOD_URL)


@st.cache_resource(show_spinner=False)
def get_gateway() -> LedgerGateway:
    """Construct (once) the gateway bound to the configured application."""
    return LedgerGateway(
        get_algod(), settings.GOLD_APP_ID, confirm_rounds=settings.CONFIRM_ROUNDS
    )
