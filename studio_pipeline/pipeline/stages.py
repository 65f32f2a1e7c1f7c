"""Pipeline stage derivation from quote statuses and catalog fallback resolution."""

from __future__ import annotations

from collections.abc import Collection, Iterable
from typing import Any

from studio_pipeline.models.enums import QuoteStatus, StageSlug
from studio_pipeline.pipeline.status import ProspectSelection, snapshot_all

APPROVED_STATUSES = frozenset(
    {
        QuoteStatus.APPROVED.value,
        QuoteStatus.AUTHORIZED.value,
        QuoteStatus.CONTRACT_PENDING.value,
        QuoteStatus.CONTRACT_GENERATED.value,
        QuoteStatus.CONTRACT_SIGNED.value,
    }
)

# Substitute slug used when a tenant has not configured the target stage.
STAGE_FALLBACKS: dict[StageSlug, StageSlug] = {
    StageSlug.CLOSING: StageSlug.NEGOTIATION,
    StageSlug.CANCELED: StageSlug.PENDING,
}


def derive_target_stage(quotes: Iterable[Any]) -> StageSlug:
    snapshots = snapshot_all(quotes)

    if any(q.status in APPROVED_STATUSES for q in snapshots):
        return StageSlug.APPROVED
    if any(q.status == QuoteStatus.CLOSING.value and q.selection is ProspectSelection.SELECTED for q in snapshots):
        return StageSlug.CLOSING
    if any(
        q.status == QuoteStatus.NEGOTIATION.value and q.selection is not ProspectSelection.SELECTED
        for q in snapshots
    ):
        return StageSlug.NEGOTIATION
    if snapshots and all(q.status == QuoteStatus.CANCELED.value for q in snapshots):
        return StageSlug.CANCELED
    return StageSlug.PENDING


def resolve_stage_slug(target: StageSlug, available_slugs: Collection[str]) -> tuple[str | None, bool]:
    """Pick the slug to persist from what the tenant catalog offers.

    Returns ``(slug, fallback_applied)``; ``slug`` is None when neither the
    target nor its fallback is configured.
    """
    if target.value in available_slugs:
        return target.value, False
    fallback = STAGE_FALLBACKS.get(target)
    if fallback is not None and fallback.value in available_slugs:
        return fallback.value, True
    return None, False
