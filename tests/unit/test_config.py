"""Settings validation for platform accounts and address overrides."""

import pytest
from pydantic import ValidationError

from arthub.core.config import Settings

KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
CHECKSUMMED = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


def _settings(**overrides) -> Settings:
    fields = {"relayer_private_key": KEY, "treasury_wallet": "0x" + "7" * 40}
    fields.update(overrides)
    return Settings(_env_file=None, **fields)


def test_lowercase_addresses_are_stored_checksummed() -> None:
    settings = _settings(treasury_wallet=CHECKSUMMED.lower(), factory_address=CHECKSUMMED.lower())
    assert settings.treasury_wallet == CHECKSUMMED
    assert settings.effective_factory_address == CHECKSUMMED


def test_mixed_case_address_with_bad_checksum_is_rejected() -> None:
    with pytest.raises(ValidationError, match="invalid EIP-55 checksum"):
        _settings(treasury_wallet="0x5AAeb6053F3E94C9b9A09f33669435E7Ef1BeAed")


def test_missing_treasury_wallet_is_rejected() -> None:
    with pytest.raises(ValidationError, match="TREASURY_WALLET is required"):
        _settings(treasury_wallet="")
