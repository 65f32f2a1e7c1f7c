"""Pydantic schema package for API contracts."""

from studio_pipeline.schemas.promises import (
    HistoryEntryResponse,
    RouteResponse,
    RouteValidationResponse,
    SyncResponse,
)
from studio_pipeline.schemas.quotes import (
    NegotiationApplyResponse,
    NegotiationPreviewResponse,
    NegotiationRequest,
    QuoteChangeResponse,
    QuoteResponse,
    QuoteSelectionUpdateRequest,
    QuoteStatusUpdateRequest,
)

__all__ = [
    "HistoryEntryResponse",
    "NegotiationApplyResponse",
    "NegotiationPreviewResponse",
    "NegotiationRequest",
    "QuoteChangeResponse",
    "QuoteResponse",
    "QuoteSelectionUpdateRequest",
    "QuoteStatusUpdateRequest",
    "RouteResponse",
    "RouteValidationResponse",
    "SyncResponse",
]
