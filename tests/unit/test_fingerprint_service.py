"""FingerprintService: deterministic idempotency keys."""

from hashlib import sha256

from arthub.application.services.fingerprint_service import FingerprintService
from tests.fakes import COLLECTOR, make_request


def test_fingerprint_is_sha256_of_canonical_identity() -> None:
    request = make_request(amount="10")
    expected = sha256(
        (
            '{"amount_base_units":10000000,"artwork_id":"artwork-1",'
            f'"collector":"{COLLECTOR.lower()}"}}'
        ).encode()
    ).hexdigest()
    assert FingerprintService().compute(request) == expected


def test_fingerprint_ignores_collector_case_and_amount_formatting() -> None:
    svc = FingerprintService()
    a = make_request(amount="10", collector=COLLECTOR.upper().replace("0X", "0x"))
    b = make_request(amount="10.000000")
    assert svc.compute(a) == svc.compute(b)


def test_fingerprint_differs_by_artwork_and_amount() -> None:
    svc = FingerprintService()
    base = svc.compute(make_request())
    assert svc.compute(make_request(artwork_id="artwork-2")) != base
    assert svc.compute(make_request(amount="10.000001")) != base


def test_canonical_json_sorts_keys() -> None:
    assert FingerprintService.canonical_json({"b": 1, "a": 2}) == '{"a":2,"b":1}'
