"""Shared utilities: datetime and id generators."""

from arthub.shared.utils.datetime import ensure_utc, older_than, utc_now
from arthub.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "older_than",
]
