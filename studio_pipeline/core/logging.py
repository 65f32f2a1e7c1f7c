"""Structured log payloads keyed by the tenant/promise/quote a pipeline event concerns."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any


@dataclass(frozen=True)
class LogContext:
    tenant_id: int | None = None
    actor_id: int | None = None
    promise_id: int | None = None
    quote_id: int | None = None

    def for_quote(self, quote_id: int) -> "LogContext":
        return replace(self, quote_id=quote_id)

    def fields(self) -> dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}


def build_log_event(event: str, context: LogContext, **fields: Any) -> dict[str, Any]:
    """Payload for ``logger.<level>(event, extra=...)``; unset context ids are omitted."""
    payload: dict[str, Any] = {"event": event, **context.fields()}
    payload.update(fields)
    return payload
