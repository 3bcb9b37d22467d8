"""Fingerprint service: idempotency key of a collect request (canonical JSON + SHA-256)."""

from __future__ import annotations

import hashlib
import json
from typing import Any

from arthub.application.dtos.settlement import CollectRequest
from arthub.domain.value_objects.core import to_base_units


class FingerprintService:
    """Single source of truth for request fingerprints (IFingerprintService).

    Identity is artwork id, collector (case-insensitive) and exact amount in
    base units. Metadata and the artist address are deliberately not part of
    it: a retry with edited display fields is still the same purchase.
    """

    @staticmethod
    def canonical_json(data: dict[str, Any]) -> str:
        """Canonical JSON for deterministic hashing."""
        return json.dumps(data, sort_keys=True, separators=(",", ":"))

    def compute(self, request: CollectRequest) -> str:
        content = {
            "artwork_id": request.artwork_id,
            "collector": request.collector_address.lower(),
            "amount_base_units": to_base_units(request.amount_usdc),
        }
        return hashlib.sha256(self.canonical_json(content).encode()).hexdigest()
