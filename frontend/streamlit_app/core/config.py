# frontend/streamlit_app/core/config.py
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Centralized, immutable application configuration for the gold certificate
console.

This module defines a frozen `Settings` dataclass whose fields are populated
from environment variables (loaded via python-dotenv if a `.env` file is
present). The resulting singleton `settings` is imported by other modules to
avoid scattering `os.getenv` calls throughout the codebase.

Design goals
------------
- **Single source of truth**: All tunables live here; other modules consume
  `settings` rather than reading environment variables directly.
- **Immutability**: `@dataclass(frozen=True)` prevents accidental mutation at
  runtime. Changes require process restart (or re-instantiation in tests).
- **Fast import**: Only minimal work at import time (dotenv load + dataclass
  construction). No network calls or validation here.

Testing
-------
- Construct a `Settings(...)` directly with explicit values, or set
  environment variables **before** importing this module and reload it:
      >>> import importlib, os
      >>> os.environ["GOLD_APP_ID"] = "1234"
      >>> import core.config as cfg
      >>> importlib.reload(cfg)
      >>> assert cfg.settings.GOLD_APP_ID == 1234
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load key-value pairs from a local `.env` file into process environment, if
# present. `override=False` by default, so pre-set env vars take precedence.
load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


@dataclass(frozen=True)
class Settings:
    """
    Immutable application settings.

    Each attribute is populated from the corresponding environment variable;
    when unset, a documented default is used.
    """

    # --- Algod (consensus node) endpoint configuration -----------------------
    # Base URL for the Algorand node RPC endpoint (TestNet by default).
    ALGOD_URL: str = os.getenv("ALGOD_URL", "https://testnet-api.algonode.cloud")
    # API token for the Algod endpoint. Public providers accept any value; the
    # 64-char placeholder satisfies strict client validators.
    ALGOD_TOKEN: str = os.getenv("ALGOD_TOKEN", "a" * 64)

    # --- Gold platform application ---------------------------------------------
    # Application id printed by backend/scripts/deploy_gold_platform.py.
    GOLD_APP_ID: int = _env_int("GOLD_APP_ID", 0)

    # Rounds to wait for a mint/transfer before raising ConfirmationTimeout.
    CONFIRM_ROUNDS: int = _env_int("CONFIRM_ROUNDS", 4)

    # Parallel record fetches per refresh (1 = sequential).
    SYNC_WORKERS: int = _env_int("SYNC_WORKERS", 4)

    # Ledger weight units per kilogram. The deployed contract stores grams.
    WEIGHT_UNITS_PER_KG: int = _env_int("WEIGHT_UNITS_PER_KG", 1000)

    # --- Logging ---------------------------------------------------------------
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


# Singleton settings object imported by consumers.
settings = Settings()
