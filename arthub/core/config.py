"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (RELAYER_PRIVATE_KEY, TREASURY_WALLET)
are validated at load time.
"""

import re
from decimal import Decimal
from functools import lru_cache

from eth_utils import is_checksum_address, to_checksum_address
from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from arthub.core.constants import (
    BPS_DENOMINATOR,
    DEFAULT_COLLECTION_SYMBOL,
    DEFAULT_ROYALTY_BPS,
    DEFAULT_TREASURY_FEE_BPS,
    NETWORKS,
    NetworkConfig,
)

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_PRIVATE_KEY_RE = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    Chain addresses default to the table in arthub.core.constants for the
    selected network; set USDC_ADDRESS / FACTORY_ADDRESS / RPC_URL to override.
    """

    # App
    app_name: str = "arthub-settlement"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (Postgres via asyncpg). Empty disables SQL-backed endpoints.
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Request / middleware. Collect waits for three confirmations.
    request_timeout_seconds: int = 300
    request_id_header: str = "X-Request-ID"
    correlation_id_header: str = "X-Correlation-ID"

    # Network: "base" or "base-sepolia"
    network: str = "base-sepolia"
    rpc_url: str | None = None
    usdc_address: str | None = None
    factory_address: str | None = None

    # Platform accounts
    treasury_wallet: str = ""
    relayer_private_key: SecretStr = SecretStr("")
    min_relayer_balance_wei: int = 10**15  # 0.001 ETH

    # Settlement economics
    treasury_fee_bps: int = DEFAULT_TREASURY_FEE_BPS
    royalty_bps: int = DEFAULT_ROYALTY_BPS
    minimum_amount_usdc: Decimal = Decimal("1")
    collection_symbol: str = DEFAULT_COLLECTION_SYMBOL

    # Confirmation waits
    confirmation_timeout_seconds: float = 120.0
    receipt_poll_interval_seconds: float = 1.0

    # Per-fingerprint lease
    settlement_lease_seconds: int = 600

    # Reconciliation (0 disables the periodic lifespan task)
    reconciliation_interval_seconds: int = 60
    reconciliation_batch_size: int = 50
    reconciliation_pending_grace_seconds: int = 300

    # Redis (distributed settlement lease)
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_chain_and_accounts(self) -> "Settings":
        """Validate network, platform accounts, and fee ranges.

        - NETWORK must be one of arthub.core.constants.NETWORKS.
        - RELAYER_PRIVATE_KEY (64 hex chars) and TREASURY_WALLET are required.
        - Address overrides must be 0x-prefixed 40-hex strings; they are
          stored checksummed.
        """
        if self.network not in NETWORKS:
            raise ValueError(
                f"network must be one of {sorted(NETWORKS)}, got: {self.network!r}"
            )
        key = self.relayer_private_key.get_secret_value()
        if not key:
            raise ValueError(
                "RELAYER_PRIVATE_KEY is required (hex private key of the platform signer)."
            )
        if not _PRIVATE_KEY_RE.fullmatch(key):
            raise ValueError("RELAYER_PRIVATE_KEY must be 64 hex characters (optional 0x prefix)")
        if not self.treasury_wallet:
            raise ValueError("TREASURY_WALLET is required.")
        for field_name in ("treasury_wallet", "usdc_address", "factory_address"):
            value = getattr(self, field_name)
            if not value:
                continue
            if not _ADDRESS_RE.fullmatch(value):
                raise ValueError(f"{field_name} must be a 0x-prefixed 40-hex address")
            digits = value[2:]
            if digits not in (digits.lower(), digits.upper()) and not is_checksum_address(value):
                raise ValueError(f"{field_name} has an invalid EIP-55 checksum")
            # Contract calls only accept checksummed addresses.
            setattr(self, field_name, to_checksum_address(value))
        for field_name in ("treasury_fee_bps", "royalty_bps"):
            value = getattr(self, field_name)
            if value < 0 or value > BPS_DENOMINATOR:
                raise ValueError(f"{field_name} must be between 0 and {BPS_DENOMINATOR}")
        if self.minimum_amount_usdc <= 0:
            raise ValueError("minimum_amount_usdc must be positive")
        return self

    @property
    def network_config(self) -> NetworkConfig:
        """Network table entry for the configured network."""
        return NETWORKS[self.network]

    @property
    def effective_rpc_url(self) -> str:
        return self.rpc_url or self.network_config.default_rpc_url

    @property
    def effective_usdc_address(self) -> str:
        return self.usdc_address or self.network_config.usdc_address

    @property
    def effective_factory_address(self) -> str:
        return self.factory_address or self.network_config.factory_address


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
