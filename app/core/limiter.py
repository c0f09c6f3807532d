"""SlowAPI rate limits for the task dashboard API.

One Limiter shared by main (app.state.limiter) and the route modules. Limit
strings are read from settings on each request, so deployments tune them
through the environment (SIGN_IN_RATE_LIMIT, WRITE_RATE_LIMIT,
ATTACHMENT_RATE_LIMIT) without touching the routes.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import get_settings

limiter = Limiter(key_func=get_remote_address)


def _sign_in_limit() -> str:
    return get_settings().sign_in_rate_limit


def _write_limit() -> str:
    return get_settings().write_rate_limit


def _attachment_limit() -> str:
    return get_settings().attachment_rate_limit


# Sign-in is limited per client address to slow down password guessing.
limit_auth = limiter.limit(_sign_in_limit)
# Task, comment, notification and directory mutations.
limit_writes = limiter.limit(_write_limit)
# Attachment uploads hit Cloud Storage; kept well below the write limit.
limit_upload = limiter.limit(_attachment_limit)
