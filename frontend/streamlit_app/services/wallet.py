# frontend/streamlit_app/services/wallet.py
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Wallet providers for the console.

The ledger gateway only needs two things from a wallet: the active account
(`request_accounts`) and a signing capability bound to it
(`get_signing_capability`). `MnemonicWallet` is the TestNet demo wallet: the
operator pastes a 25-word mnemonic in the sidebar and authorizes the console
to use it. Mnemonics are held in memory only and never logged.
"""

from typing import Protocol

from algosdk import account, mnemonic
from algosdk.atomic_transaction_composer import (
    AccountTransactionSigner,
    TransactionSigner,
)

from core.errors import NoWalletProvider, UserRejected


class WalletProvider(Protocol):
    def request_accounts(self) -> list[str]: ...

    def get_signing_capability(self, address: str) -> TransactionSigner: ...


def addr_from_mn(mn: str | None) -> str | None:
    """Derive an Algorand address from a 25-word mnemonic (or None on bad input)."""
    if not mn:
        return None
    try:
        return account.address_from_private_key(mnemonic.to_private_key(mn))
    except Exception:
        return None


class MnemonicWallet:
    """In-memory wallet backed by a single mnemonic."""

    def __init__(self, mn: str, *, authorized: bool = True):
        self._mn = mn
        self.authorized = authorized

    def request_accounts(self) -> list[str]:
        if not self.authorized:
            raise UserRejected("Account request declined by the operator.")
        addr = addr_from_mn(self._mn)
        if addr is None:
            raise NoWalletProvider("Mnemonic is not a valid 25-word Algorand mnemonic.")
        return [addr]

    def get_signing_capability(self, address: str) -> TransactionSigner:
        if not self.authorized:
            raise UserRejected("Signing declined by the operator.")
        sk = mnemonic.to_private_key(self._mn)
        if account.address_from_private_key(sk) != address:
            raise UserRejected(f"Wallet does not hold a key for {address}.")
        return AccountTransactionSigner(sk)
