"""Run one reconciliation pass: repair missing ledger rows and settle stale tx hashes.

Usage:
    python -m scripts.run_reconciliation [limit]
Requires Postgres (DATABASE_URL) and the chain settings used by the API.
Never submits transactions; safe to run while the API is serving.
"""

import asyncio
import sys

from arthub.core.config import get_settings
from arthub.core.container import SettlementServices, build_reconciler
import arthub.infrastructure.persistence.database as database
from arthub.shared.telemetry.logging import setup_logging


async def main() -> None:
    """Reconcile up to limit attempts and print the summary."""
    settings = get_settings()
    setup_logging()
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        print("DATABASE_URL not configured", file=sys.stderr)
        sys.exit(1)
    try:
        limit = int(sys.argv[1]) if len(sys.argv) > 1 else settings.reconciliation_batch_size
    except ValueError:
        print(f"limit must be an integer, got: {sys.argv[1]}", file=sys.stderr)
        sys.exit(2)

    services = SettlementServices.from_settings(settings)
    # No signer queue: reconciliation only reads the chain.
    if settings.redis_enabled:
        await services.lease.connect()
    try:
        summary = await build_reconciler(services, settings).run(limit=limit)
    finally:
        await services.lease.disconnect()
        await services.gateway.close()
        await database.dispose_engine()

    print(
        f"Examined {summary.examined}: ledger repaired {summary.ledger_repaired}, "
        f"steps confirmed {summary.steps_confirmed}, hashes cleared {summary.hashes_cleared}, "
        f"still pending {summary.still_pending}, errors {summary.errors}"
    )
    if summary.errors:
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
