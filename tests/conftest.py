"""Shared fixtures: an in-memory ledger that speaks the gateway interface."""

import pytest
from algosdk import encoding

from core.errors import GatewayUnavailable, NoWalletProvider, RecordNotFound

OWNER = encoding.encode_address(bytes(32))
MINTER = encoding.encode_address(bytes(range(32)))


def raw_record(weight, purity=9990, origin="Mine", refinery="Refinery", ts=1_700_000_000,
               owner=OWNER, vault="Vault"):
    """Positional tuple in contract order, with mixed value encodings."""
    return (int(weight).to_bytes(8, "big"), str(purity), origin, refinery, ts, owner, vault)


class FakeWallet:
    def __init__(self, address=MINTER):
        self.address = address

    def request_accounts(self):
        return [self.address]

    def get_signing_capability(self, address):
        return object()


class FakeLedger:
    """In-memory stand-in for `LedgerGateway`.

    Hooks:
      fail_ids     ids whose `get_record` raises GatewayUnavailable
      on_total     callable run inside `get_total_count` (before answering)
      submit_error / confirm_error   raised by the write path
    """

    def __init__(self, records=()):
        self.records = list(records)
        self.fail_ids = set()
        self.on_total = None
        self.submit_error = None
        self.confirm_error = None
        self.total_calls = 0
        self.record_calls = []
        self._pending = {}

    def connect(self, wallet):
        if wallet is None:
            raise NoWalletProvider("no wallet")
        addr = wallet.request_accounts()[0]
        return addr, wallet.get_signing_capability(addr)

    def get_total_count(self):
        self.total_calls += 1
        if self.on_total is not None:
            self.on_total()
        return len(self.records)

    def get_record(self, cert_id):
        self.record_calls.append(cert_id)
        if cert_id in self.fail_ids:
            raise GatewayUnavailable(f"boom at {cert_id}")
        if not 0 <= cert_id < len(self.records):
            raise RecordNotFound(cert_id)
        return self.records[cert_id]

    def submit_mint(self, sender, signer, weight, purity_bp, origin, refinery, vault):
        if self.submit_error is not None:
            raise self.submit_error
        txid = f"TX{len(self._pending)}"
        self._pending[txid] = (weight, purity_bp, origin, refinery, 1_700_000_123, sender, vault)
        return txid

    def await_confirmation(self, txid):
        if self.confirm_error is not None:
            raise self.confirm_error
        self.records.append(self._pending.pop(txid))
        return {"confirmed-round": 42}


@pytest.fixture
def ledger():
    return FakeLedger([raw_record(250), raw_record(500)])


@pytest.fixture
def wallet():
    return FakeWallet()
