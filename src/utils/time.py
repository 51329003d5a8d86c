from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def run_id(moment: datetime | None = None) -> str:
    """Directory-safe timestamp naming one recognition run."""
    return (moment or utc_now()).strftime("%Y%m%d-%H%M%S")


def iso_timestamp(moment: datetime | None = None) -> str:
    return (moment or utc_now()).isoformat(timespec="seconds")
