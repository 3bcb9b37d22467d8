"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Used by main.py; no business
logic here, only wiring of infrastructure (logging, telemetry, chain
gateway, signer queue, settlement lease, reconciliation runner, DB engine).
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import partial

from fastapi import FastAPI

from arthub.core.config import get_settings
from arthub.core.container import SettlementServices, build_reconciler
from arthub.core.reconciliation_runner import ReconciliationRunner
from arthub.infrastructure.persistence import database
from arthub.shared.telemetry.logging import setup_logging
from arthub.shared.telemetry.telemetry import TelemetryConfig, get_telemetry, set_telemetry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, telemetry (if enabled), settlement services
    (Redis lease if enabled, signer queue), reconciliation runner (only with
    a database). Shutdown runs in reverse and disposes the SQL engine last.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    if settings.telemetry_enabled:
        telemetry = TelemetryConfig.from_settings(settings)
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        telemetry.instrument_logging()
        if settings.redis_enabled:
            telemetry.instrument_redis()
        engine = database.get_engine()
        if engine is not None:
            telemetry.instrument_sqlalchemy(engine)
        logger.info("Telemetry initialized")

    services = SettlementServices.from_settings(settings)
    await services.start(connect_redis=settings.redis_enabled)
    app.state.settlement_services = services
    logger.info(
        "Settlement services ready: network=%s signer=%s",
        settings.network,
        services.gateway.signer_address,
    )

    runner: ReconciliationRunner | None = None
    if database.get_engine() is not None:
        runner = ReconciliationRunner(
            build_use_case=partial(build_reconciler, services, settings),
            interval_seconds=settings.reconciliation_interval_seconds,
            batch_size=settings.reconciliation_batch_size,
        )
        runner.start()
    else:
        logger.warning("DATABASE_URL not set: collect and reconciliation are unavailable")
    app.state.reconciliation_runner = runner

    yield

    # ---- Shutdown ----
    if runner is not None:
        await runner.stop()

    await services.close()
    logger.info("Settlement services closed")

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        logger.info("Telemetry shutdown complete")

    await database.dispose_engine()
    logger.info("Database engine disposed")
