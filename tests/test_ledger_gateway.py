"""LedgerGateway against a stub algod client (no network)."""

import base64
import urllib.error

import pytest
from algosdk import account, encoding, error, mnemonic, transaction
from algosdk.atomic_transaction_composer import AccountTransactionSigner

from core.constants import EVENT_MINTED, box_mbr, box_name, record_len
from core.errors import (
    ConfirmationTimeout,
    GatewayUnavailable,
    NoWalletProvider,
    RecordNotFound,
    TransactionRejected,
    TransactionReverted,
    UserRejected,
)
from core.session import CertificateSession, Phase
from services.ledger import LedgerGateway, decode_record, minted_id
from services.wallet import MnemonicWallet

APP_ID = 1234


def encode_record(weight, purity, ts, owner, origin, refinery, vault):
    """Box layout as written by the contract."""
    out = weight.to_bytes(8, "big") + purity.to_bytes(8, "big") + ts.to_bytes(8, "big")
    out += encoding.decode_address(owner)
    for text in (origin, refinery, vault):
        raw = text.encode()
        out += len(raw).to_bytes(2, "big") + raw
    return out


def _b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode()


class StubAlgod:
    def __init__(self, boxes=(), total_value=None):
        self.boxes = {box_name(i): value for i, value in enumerate(boxes)}
        self.total_value = total_value or {"type": 2, "uint": len(self.boxes)}
        self.sent = []
        self.send_error = None
        self.pending = {"confirmed-round": 10}
        self.info_error = None

    def application_info(self, app_id):
        if self.info_error is not None:
            raise self.info_error
        return {
            "id": app_id,
            "params": {"global-state": [{"key": _b64(b"total"), "value": self.total_value}]},
        }

    def application_box_by_name(self, app_id, name):
        if name not in self.boxes:
            raise error.AlgodHTTPError("box not found", 404)
        return {"name": _b64(name), "value": _b64(self.boxes[name]), "round": 9}

    def suggested_params(self):
        return transaction.SuggestedParams(
            fee=1000,
            first=1,
            last=1001,
            gh=_b64(bytes(32)),
            flat_fee=True,
            min_fee=1000,
        )

    def send_transactions(self, signed):
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(signed)
        return signed[0].transaction.get_txid()

    def status(self):
        return {"last-round": 8}

    def status_after_block(self, round_num):
        return {"last-round": round_num}

    def pending_transaction_info(self, txid):
        return self.pending


@pytest.fixture
def keys():
    sk, addr = account.generate_account()
    return sk, addr


@pytest.fixture
def owner(keys):
    return keys[1]


@pytest.fixture
def stub(owner):
    return StubAlgod(
        [
            encode_record(250, 9990, 1_700_000_000, owner, "Pueblo Viejo", "Global", "London"),
            encode_record(500, 9999, 1_700_000_500, owner, "Kalgoorlie", "Perth Mint", "Zürich"),
        ]
    )


@pytest.fixture
def gateway(stub):
    return LedgerGateway(stub, APP_ID, confirm_rounds=2)


def test_rejects_unset_app_id(stub):
    with pytest.raises(ValueError):
        LedgerGateway(stub, 0)


def test_total_count_uint_and_bytes(gateway, stub):
    assert gateway.get_total_count() == 2
    stub.total_value = {"type": 1, "bytes": _b64((7).to_bytes(8, "big"))}
    assert gateway.get_total_count() == (7).to_bytes(8, "big")


def test_total_count_missing_key_is_unavailable(gateway, stub):
    stub.application_info = lambda app_id: {"params": {"global-state": []}}
    with pytest.raises(GatewayUnavailable):
        gateway.get_total_count()


def test_total_count_network_error_is_unavailable(gateway, stub):
    stub.info_error = urllib.error.URLError("connection refused")
    with pytest.raises(GatewayUnavailable):
        gateway.get_total_count()


def test_get_record_decodes_box(gateway, owner):
    weight, purity, origin, refinery, ts, rec_owner, vault = gateway.get_record(1)
    assert int.from_bytes(weight, "big") == 500
    assert int.from_bytes(purity, "big") == 9999
    assert int.from_bytes(ts, "big") == 1_700_000_500
    assert (origin, refinery, vault) == ("Kalgoorlie", "Perth Mint", "Zürich")
    assert rec_owner == owner
    assert gateway.get_owner(1) == owner


def test_get_record_out_of_range_is_not_found(gateway):
    with pytest.raises(RecordNotFound) as exc:
        gateway.get_record(2)
    assert exc.value.cert_id == 2
    assert isinstance(exc.value.__cause__, error.AlgodHTTPError)


def test_get_record_server_error_is_unavailable(gateway, stub):
    def boom(app_id, name):
        raise error.AlgodHTTPError("internal", 500)

    stub.application_box_by_name = boom
    with pytest.raises(GatewayUnavailable):
        gateway.get_record(0)


def test_decode_record_rejects_truncated_box(owner):
    box = encode_record(1, 1, 1, owner, "a", "b", "c")
    with pytest.raises(ValueError):
        decode_record(box[:-1])
    with pytest.raises(ValueError):
        decode_record(box[:20])


def test_connect_requires_wallet(gateway):
    with pytest.raises(NoWalletProvider):
        gateway.connect(None)


def test_connect_declined(gateway, keys):
    wallet = MnemonicWallet(mnemonic.from_private_key(keys[0]), authorized=False)
    with pytest.raises(UserRejected):
        gateway.connect(wallet)


def test_connect_with_invalid_mnemonic(gateway):
    with pytest.raises(NoWalletProvider):
        gateway.connect(MnemonicWallet("not a mnemonic"))


def test_connect_returns_account_and_signer(gateway, keys):
    addr, signer = gateway.connect(MnemonicWallet(mnemonic.from_private_key(keys[0])))
    assert addr == keys[1]
    assert isinstance(signer, AccountTransactionSigner)


def test_submit_mint_builds_funded_group(gateway, stub, keys):
    sk, addr = keys
    txid = gateway.submit_mint(
        addr,
        AccountTransactionSigner(sk),
        250,
        9990,
        "Pueblo Viejo, Dominican Republic",
        "Global Refinery, UK",
        "London Vault C3",
    )

    (signed,) = stub.sent
    pay, call = (s.transaction for s in signed)
    assert pay.receiver == gateway.app_address
    assert pay.amt == box_mbr(
        record_len("Pueblo Viejo, Dominican Republic", "Global Refinery, UK", "London Vault C3")
    )
    assert pay.group == call.group and call.group is not None
    assert call.index == APP_ID
    assert call.app_args[0] == b"mint"
    assert int.from_bytes(call.app_args[1], "big") == 250
    assert int.from_bytes(call.app_args[2], "big") == 9990
    assert [b.name for b in call.boxes] == [box_name(2)]
    assert txid == call.get_txid()


def test_submit_mint_signer_failure_is_rejected(gateway, owner):
    class Refusing:
        def sign_transactions(self, txns, indexes):
            raise RuntimeError("user closed the prompt")

    with pytest.raises(TransactionRejected):
        gateway.submit_mint(owner, Refusing(), 1, 1, "o", "r", "v")


def test_submit_mint_node_rejection_is_reverted(gateway, stub, keys):
    stub.send_error = error.AlgodHTTPError("logic eval error: assert failed", 400)
    with pytest.raises(TransactionReverted):
        gateway.submit_mint(keys[1], AccountTransactionSigner(keys[0]), 1, 1, "o", "r", "v")


def test_submit_transfer(gateway, stub, keys):
    sk, addr = keys
    _, new_owner = account.generate_account()
    gateway.submit_transfer(addr, AccountTransactionSigner(sk), 1, new_owner)
    (signed,) = stub.sent
    (call,) = (s.transaction for s in signed)
    assert call.app_args == [b"transfer", (1).to_bytes(8, "big"), encoding.decode_address(new_owner)]
    assert [b.name for b in call.boxes] == [box_name(1)]


def test_submit_transfer_rejects_bad_address(gateway, keys):
    with pytest.raises(ValueError):
        gateway.submit_transfer(keys[1], AccountTransactionSigner(keys[0]), 0, "nope")


def test_await_confirmation(gateway, stub):
    stub.pending = {
        "confirmed-round": 10,
        "logs": [_b64(EVENT_MINTED + (2).to_bytes(8, "big"))],
    }
    confirmation = gateway.await_confirmation("TXID")
    assert minted_id(confirmation) == 2


def test_await_confirmation_timeout(gateway, stub):
    stub.pending = {"confirmed-round": 0, "pool-error": ""}
    with pytest.raises(ConfirmationTimeout):
        gateway.await_confirmation("TXID")


def test_await_confirmation_pool_error_is_reverted(gateway, stub):
    stub.pending = {"confirmed-round": 0, "pool-error": "overspend"}
    with pytest.raises(TransactionReverted):
        gateway.await_confirmation("TXID")


def test_minted_id_absent():
    assert minted_id({"confirmed-round": 3}) is None


def test_session_over_real_gateway(gateway, keys):
    session = CertificateSession(gateway, sync_workers=2)
    state = session.connect(MnemonicWallet(mnemonic.from_private_key(keys[0])))
    assert state.phase is Phase.READY
    assert [c.weight for c in state.certificates] == [250, 500]
    assert state.certificates[1].vault_location == "Zürich"
    assert f"{state.total_weight_kg():.3f}" == "0.750"
