"""Seed dev data: default departments and sign-in accounts with profiles.

Creates the default departments when none exist, then for each user in the
seed file registers an email/password account with the identity provider and
writes a matching profile (skipped when a profile with that email exists).

Usage:
    uv run python -m scripts.seed_dev_data [path/to/seed-data.json]

Default path: scripts/seed-data.json. Uses the configured DATABASE_BACKEND;
with 'memory' the data only lives for the duration of the run.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from app.application.use_cases.directory import DirectoryService
from app.core.config import get_settings
from app.domain.entities.user import UserEntity
from app.domain.exceptions import AuthenticationException
from app.infrastructure.backend import Backend, build_backend
from app.shared.telemetry import setup_logging

logger = logging.getLogger("scripts.seed_dev_data")


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def _load_env() -> None:
    """Load .env from project root so get_settings() sees FIREBASE_* when run as script."""
    load_dotenv(_project_root() / ".env", override=True)


async def _seed_user(backend: Backend, row: dict) -> bool:
    """Create account and profile for one seed row. Returns False if it already existed."""
    if await backend.users.get_by_email(row["email"]) is not None:
        logger.info("Profile exists, skipping %s", row["email"])
        return False
    try:
        identity = await backend.identity.create_account(
            row["email"], row["password"], display_name=row["name"]
        )
    except AuthenticationException as e:
        logger.warning("Could not create account %s: %s", row["email"], e.message)
        return False
    await backend.users.create(
        UserEntity(
            id=identity.uid,
            name=row["name"],
            email=identity.email,
            role=row["role"],
            dept=row["dept"],
            permissions=set(row.get("permissions", [])),
        )
    )
    logger.info("Created %s (%s)", row["email"], identity.uid)
    return True


async def seed(path: Path) -> None:
    data = json.loads(path.read_text(encoding="utf-8"))
    backend = build_backend(get_settings())
    try:
        directory = DirectoryService(backend.departments, backend.users, backend.templates)
        departments = await directory.seed_defaults()
        created = 0
        for row in data.get("users", []):
            created += await _seed_user(backend, row)
        logger.info(
            "Seed complete: %d departments, %d users (%s backend)",
            len(departments),
            created,
            backend.name,
        )
    finally:
        await backend.aclose()


def main() -> None:
    _load_env()
    get_settings.cache_clear()
    setup_logging()
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(__file__).with_name("seed-data.json")
    asyncio.run(seed(path))


if __name__ == "__main__":
    main()
