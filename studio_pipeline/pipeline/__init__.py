"""Pure derivation logic: status normalization, routing, stage rules and negotiation math."""

from studio_pipeline.pipeline.routing import RouteTarget, build_route_path, is_route_valid, resolve_route
from studio_pipeline.pipeline.stages import STAGE_FALLBACKS, derive_target_stage, resolve_stage_slug
from studio_pipeline.pipeline.status import ProspectSelection, QuoteSnapshot, normalize_status

__all__ = [
    "ProspectSelection",
    "QuoteSnapshot",
    "RouteTarget",
    "STAGE_FALLBACKS",
    "build_route_path",
    "derive_target_stage",
    "is_route_valid",
    "normalize_status",
    "resolve_route",
    "resolve_stage_slug",
]
