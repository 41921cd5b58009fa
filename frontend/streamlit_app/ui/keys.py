# frontend/streamlit_app/ui/keys.py
# SPDX-License-Identifier: Apache-2.0
"""Namespaced Streamlit widget keys.

The three tabs and the sidebar all render buttons with similar labels
("Refresh", "Connect"). Streamlit raises `StreamlitDuplicateElementId` when two
widgets hash the same, so every widget gets an explicit key built here.

    from ui.keys import k

    st.button("Refresh", key=k("dashboard", "refresh"))
"""

from __future__ import annotations


def k(page: str, name: str) -> str:
    """Return "<page>:<name>"; pass short ASCII literals for both parts."""
    return f"{page}:{name}"
