# frontend/streamlit_app/ui/layout.py
# SPDX-License-Identifier: Apache-2.0
"""Layout helpers for the gold certificate console.

- `configure_page`: consistent browser title, wide layout and branded H1.
- `stack_or_columns_spec`: the same render code can produce a stacked
  (guided) layout or a compact grid of columns.

Call `configure_page()` exactly once at the beginning of the app (Streamlit
enforces that `st.set_page_config` runs before other UI).
"""

from __future__ import annotations

from collections.abc import Sequence

import streamlit as st
from streamlit.delta_generator import DeltaGenerator


def configure_page(title: str) -> None:
    """Configure global page options and render the main title."""
    st.set_page_config(page_title=title, page_icon="🏆", layout="wide")
    st.title(f"🏆 {title}")


def stack_or_columns_spec(
    spec: int | Sequence[float] | Sequence[int],
    guided: bool,
) -> list[DeltaGenerator]:
    """Return stacked containers when `guided`, otherwise `st.columns(spec)`.

    When stacked, `spec` only determines the *count* of containers.
    """
    if guided:
        count = spec if isinstance(spec, int) else len(spec)
        return [st.container() for _ in range(count)]
    return st.columns(spec)
