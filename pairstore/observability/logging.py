"""Event-style records for store outcomes callers may need to reconcile."""

from __future__ import annotations

from pairstore.util.logger import get_logger


events_logger = get_logger("events")


def log_event(event: str, **payload: object) -> None:
    events_logger.info("event=%s %s", event, " ".join(f"{key}={value!r}" for key, value in payload.items()))
