"""Full-refresh synchronizer."""

import logging
import threading
import time

import pytest

from core.errors import GatewayUnavailable, PrecisionLoss, RecordNotFound, SyncFailed
from services.sync import Certificate, refresh, to_certificate
from tests.conftest import OWNER, FakeLedger, raw_record


@pytest.fixture
def ten():
    return FakeLedger([raw_record(100 + i, origin=f"Mine {i}") for i in range(10)])


def test_empty_ledger_yields_empty_tuple():
    assert refresh(FakeLedger()) == ()


def test_ids_are_exactly_zero_to_n_minus_one(ten):
    certs = refresh(ten)
    assert [c.id for c in certs] == list(range(10))
    assert ten.record_calls == list(range(10))


def test_record_is_normalized():
    cert = to_certificate(4, raw_record(250, purity=9990, origin="Pueblo Viejo"))
    assert cert == Certificate(
        id=4,
        weight=250,
        purity_bp=9990,
        mine_origin="Pueblo Viejo",
        refinery="Refinery",
        vault_location="Vault",
        mint_timestamp=1_700_000_000,
        owner=OWNER,
    )


def test_refresh_is_idempotent(ten):
    assert refresh(ten) == refresh(ten)


def test_parallel_fetch_restores_id_order():
    class SlowFirst(FakeLedger):
        def get_record(self, cert_id):
            # Early ids finish last.
            time.sleep(0.01 * (5 - cert_id))
            return super().get_record(cert_id)

    ledger = SlowFirst([raw_record(10 * (i + 1)) for i in range(5)])
    certs = refresh(ledger, max_workers=5)
    assert [c.id for c in certs] == [0, 1, 2, 3, 4]
    assert [c.weight for c in certs] == [10, 20, 30, 40, 50]


def test_failed_record_aborts_whole_refresh(ten):
    ten.fail_ids = {3}
    with pytest.raises(SyncFailed) as exc:
        refresh(ten)
    assert exc.value.cert_id == 3
    assert isinstance(exc.value.cause, GatewayUnavailable)


def test_failed_record_aborts_parallel_refresh(ten):
    ten.fail_ids = {3}
    with pytest.raises(SyncFailed) as exc:
        refresh(ten, max_workers=4)
    assert exc.value.cert_id == 3


def test_total_ahead_of_records_is_sync_failed():
    class Racing(FakeLedger):
        def get_total_count(self):
            return len(self.records) + 1

    with pytest.raises(SyncFailed) as exc:
        refresh(Racing([raw_record(1)]))
    assert isinstance(exc.value.cause, RecordNotFound)


def test_oversized_field_raises_precision_loss():
    ledger = FakeLedger([raw_record(1), raw_record(2**64 - 1)])
    with pytest.raises(PrecisionLoss) as exc:
        refresh(ledger)
    assert (exc.value.field, exc.value.cert_id) == ("weight", 1)


def test_gateway_failure_on_total_propagates():
    class Down(FakeLedger):
        def get_total_count(self):
            raise GatewayUnavailable("node down")

    with pytest.raises(GatewayUnavailable):
        refresh(Down())


def test_duplicate_ids_are_logged_not_dropped(monkeypatch, caplog):
    import services.sync as sync_mod

    real = sync_mod.to_certificate
    monkeypatch.setattr(sync_mod, "to_certificate", lambda cert_id, raw: real(0, raw))

    with caplog.at_level(logging.WARNING, logger="services.sync"):
        certs = refresh(FakeLedger([raw_record(1), raw_record(2)]))
    assert [c.id for c in certs] == [0, 0]
    assert "Non-contiguous" in caplog.text


def test_parallel_refresh_uses_several_threads():
    seen = set()
    lock = threading.Lock()

    class Recording(FakeLedger):
        def get_record(self, cert_id):
            with lock:
                seen.add(threading.get_ident())
            time.sleep(0.02)
            return super().get_record(cert_id)

    refresh(Recording([raw_record(1) for _ in range(4)]), max_workers=4)
    assert len(seen) > 1
