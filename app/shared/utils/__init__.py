"""Shared utilities: datetime and id generators."""

from app.shared.utils.datetime import (
    ensure_utc,
    parse_iso_utc,
    to_iso_z,
    utc_now,
)
from app.shared.utils.generators import generate_cuid, generate_prefixed_id

__all__ = [
    "generate_cuid",
    "generate_prefixed_id",
    "utc_now",
    "ensure_utc",
    "parse_iso_utc",
    "to_iso_z",
]
