# frontend/streamlit_app/core/state.py
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Session-scoped UI state helpers for the Streamlit console.

This module centralizes the **default values** we expect to exist in
`st.session_state` and owns the per-browser `CertificateSession`.

Design notes
------------
- Plain UI preferences live in `DEFAULTS`. Initialization is idempotent:
  existing values are preserved.
- The certificate view state is **not** spread across session keys; a single
  `CertificateSession` object is stored under `SESSION_KEY` and pages read
  `session.state` from it.
"""

from collections.abc import Callable, Mapping
from typing import Any, Final

import streamlit as st

from core.session import CertificateSession

SESSION_KEY: Final[str] = "GOLD_SESSION"

# Canonical set of session keys and their initial values.
DEFAULTS: Final[Mapping[str, Any]] = {
    # Whether the operator authorized the console to use the pasted mnemonic.
    "WALLET_AUTHORIZED": True,
}

__all__ = ["DEFAULTS", "SESSION_KEY", "ensure_defaults", "get_session"]


def ensure_defaults() -> None:
    """Ensure all expected session keys exist with sane defaults."""
    for key, default_value in DEFAULTS.items():
        st.session_state.setdefault(key, default_value)


def get_session(factory: Callable[[], CertificateSession]) -> CertificateSession:
    """Return this browser session's `CertificateSession`, creating it once."""
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = factory()
    return st.session_state[SESSION_KEY]
