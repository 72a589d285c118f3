# tests/helpers.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone

ONE_DAY_MS = 24 * 60 * 60 * 1000


def tomorrow() -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=1)


def yesterday() -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=1)
