"""MnemonicWallet handshake."""

import pytest
from algosdk import account, mnemonic

from core.errors import NoWalletProvider, UserRejected
from services.wallet import MnemonicWallet, addr_from_mn


@pytest.fixture
def mn_and_addr():
    sk, addr = account.generate_account()
    return mnemonic.from_private_key(sk), addr


def test_addr_from_mn(mn_and_addr):
    mn, addr = mn_and_addr
    assert addr_from_mn(mn) == addr
    assert addr_from_mn("") is None
    assert addr_from_mn("garbage words") is None


def test_request_accounts(mn_and_addr):
    mn, addr = mn_and_addr
    assert MnemonicWallet(mn).request_accounts() == [addr]


def test_unauthorized_wallet_rejects(mn_and_addr):
    mn, addr = mn_and_addr
    wallet = MnemonicWallet(mn, authorized=False)
    with pytest.raises(UserRejected):
        wallet.request_accounts()
    with pytest.raises(UserRejected):
        wallet.get_signing_capability(addr)


def test_invalid_mnemonic():
    with pytest.raises(NoWalletProvider):
        MnemonicWallet("one two three").request_accounts()


def test_signer_bound_to_other_address(mn_and_addr):
    mn, _ = mn_and_addr
    _, other = account.generate_account()
    with pytest.raises(UserRejected):
        MnemonicWallet(mn).get_signing_capability(other)
