"""Shared utilities: telemetry, localized messages, and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from app.shared.utils import (
    ensure_utc,
    generate_cuid,
    generate_prefixed_id,
    parse_iso_utc,
    to_iso_z,
    utc_now,
)

__all__ = [
    "ensure_utc",
    "generate_cuid",
    "generate_prefixed_id",
    "parse_iso_utc",
    "to_iso_z",
    "utc_now",
]
