"""Promise routing, pipeline sync and history schemas for API contracts."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class RouteResponse(BaseModel):
    promise_id: int
    route: str
    path: str
    url: str


class RouteValidationResponse(BaseModel):
    promise_id: int
    route: str
    valid: bool
    resolved: str


class SyncResponse(BaseModel):
    promise_id: int
    outcome: str
    target_slug: str | None = None
    resolved_slug: str | None = None
    fallback_applied: bool = False
    from_stage_id: int | None = None
    to_stage_id: int | None = None
    history_recorded: bool = False
    error_code: str | None = None
    error_message: str | None = None

    @classmethod
    def from_result(cls, result: Any) -> "SyncResponse":
        return cls(
            promise_id=result.promise_id,
            outcome=result.outcome.value,
            target_slug=result.target_slug,
            resolved_slug=result.resolved_slug,
            fallback_applied=result.fallback_applied,
            from_stage_id=result.from_stage_id,
            to_stage_id=result.to_stage_id,
            history_recorded=result.history_recorded,
            error_code=result.error.code.value if result.error else None,
            error_message=result.error.message if result.error else None,
        )


class HistoryEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    promise_id: int
    from_stage_id: int | None = None
    from_stage_slug: str | None = None
    to_stage_id: int
    to_stage_slug: str
    actor_id: int | None = None
    reason: str | None = None
    details: dict[str, Any] | None = None
    created_at: datetime | None = None
