"""Tests for domain value objects (amounts, Address, TxHash, PaymentSplit)."""

from decimal import Decimal

import pytest

from arthub.domain.value_objects.core import (
    Address,
    PaymentSplit,
    TxHash,
    from_base_units,
    to_base_units,
)


def test_to_base_units_is_exact() -> None:
    assert to_base_units(Decimal("10")) == 10_000_000
    assert to_base_units("1.000001") == 1_000_001
    assert to_base_units(Decimal("0.1")) == 100_000


def test_to_base_units_rejects_sub_micro_amounts() -> None:
    with pytest.raises(ValueError, match="at most 6 decimal places"):
        to_base_units("1.0000001")


@pytest.mark.parametrize("bad", ["abc", "NaN", "Infinity"])
def test_to_base_units_rejects_non_numbers(bad: str) -> None:
    with pytest.raises(ValueError):
        to_base_units(bad)


def test_from_base_units() -> None:
    assert from_base_units(9_500_000) == Decimal("9.500000")
    assert from_base_units(1) == Decimal("0.000001")


def test_split_five_percent_of_ten_usdc() -> None:
    split = PaymentSplit.compute(10_000_000, 500)
    assert split.treasury_base_units == 500_000
    assert split.artist_base_units == 9_500_000
    assert split.treasury_usdc == Decimal("0.5")
    assert split.artist_usdc == Decimal("9.5")


def test_split_floors_treasury_and_gives_remainder_to_artist() -> None:
    split = PaymentSplit.compute(1_000_001, 500)
    assert split.treasury_base_units == 50_000
    assert split.artist_base_units == 950_001


def test_split_parts_always_sum_to_total() -> None:
    for total in (1, 19, 999_999, 1_000_001, 123_456_789):
        for fee_bps in (0, 1, 250, 500, 3333, 10_000):
            split = PaymentSplit.compute(total, fee_bps)
            assert split.treasury_base_units + split.artist_base_units == total
            assert split.treasury_base_units == total * fee_bps // 10_000


def test_split_rejects_parts_that_do_not_sum() -> None:
    with pytest.raises(ValueError, match="sum to the total"):
        PaymentSplit(total_base_units=100, treasury_base_units=10, artist_base_units=80)


def test_split_rejects_out_of_range_fee() -> None:
    with pytest.raises(ValueError):
        PaymentSplit.compute(100, 10_001)


def test_address_checksums_and_compares_lowercase() -> None:
    raw = "0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed"
    addr = Address(raw)
    assert addr.value == "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
    assert addr.lower == raw
    assert Address(raw.upper().replace("0X", "0x")).value == addr.value


def test_address_rejects_mixed_case_with_wrong_checksum() -> None:
    # Valid checksum with the case of the first letter flipped.
    with pytest.raises(ValueError, match="checksum mismatch"):
        Address("0x5AAeb6053F3E94C9b9A09f33669435E7Ef1BeAed")


@pytest.mark.parametrize("bad", ["", "0x123", "5aaeb6053f3e94c9b9a09f33669435e7ef1beaed", "0x" + "g" * 40])
def test_address_rejects_malformed(bad: str) -> None:
    with pytest.raises(ValueError, match="Invalid address"):
        Address(bad)


def test_tx_hash_lowercases() -> None:
    h = TxHash("0x" + "AB" * 32)
    assert str(h) == "0x" + "ab" * 32
    with pytest.raises(ValueError):
        TxHash("0x1234")
