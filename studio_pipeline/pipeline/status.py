"""Quote status vocabulary, normalization and tri-state prospect selection."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Iterable

from studio_pipeline.models.enums import QuoteStatus

# Legacy spellings still present on older rows, collapsed to the canonical vocabulary.
STATUS_ALIASES: dict[str, str] = {
    "cierre": QuoteStatus.CLOSING.value,
    "en_cierre": QuoteStatus.CLOSING.value,
    "pendiente": QuoteStatus.PENDING.value,
    "negociacion": QuoteStatus.NEGOTIATION.value,
    "aprobada": QuoteStatus.APPROVED.value,
    "autorizada": QuoteStatus.AUTHORIZED.value,
    "cancelada": QuoteStatus.CANCELED.value,
    "contract_pending": QuoteStatus.CONTRACT_PENDING.value,
    "contract_generated": QuoteStatus.CONTRACT_GENERATED.value,
    "contract_signed": QuoteStatus.CONTRACT_SIGNED.value,
}


def normalize_status(raw: str | None) -> str:
    """Collapse known aliases; anything else is returned unchanged."""
    if raw is None:
        return ""
    return STATUS_ALIASES.get(raw, raw)


class ProspectSelection(enum.Enum):
    SELECTED = "selected"
    NOT_SELECTED = "not_selected"
    UNKNOWN = "unknown"

    @classmethod
    def from_flag(cls, flag: bool | None) -> "ProspectSelection":
        if flag is True:
            return cls.SELECTED
        if flag is False:
            return cls.NOT_SELECTED
        return cls.UNKNOWN

    def to_flag(self) -> bool | None:
        if self is ProspectSelection.SELECTED:
            return True
        if self is ProspectSelection.NOT_SELECTED:
            return False
        return None


@dataclass(frozen=True)
class QuoteSnapshot:
    """Status and selection of one quote at decision time."""

    quote_id: int | None
    status: str
    selection: ProspectSelection = ProspectSelection.UNKNOWN

    @classmethod
    def build(cls, quote_id: int | None, status: str | None, selected_by_prospect: bool | None = None) -> "QuoteSnapshot":
        return cls(
            quote_id=quote_id,
            status=normalize_status(status),
            selection=ProspectSelection.from_flag(selected_by_prospect),
        )

    @classmethod
    def from_row(cls, row: Any) -> "QuoteSnapshot":
        """Build from an ORM row or any object exposing id/status/selected_by_prospect."""
        return cls.build(
            quote_id=getattr(row, "id", None),
            status=getattr(row, "status", None),
            selected_by_prospect=getattr(row, "selected_by_prospect", None),
        )

    @property
    def is_selected(self) -> bool:
        return self.selection is ProspectSelection.SELECTED

    def as_dict(self) -> dict[str, Any]:
        return {
            "quote_id": self.quote_id,
            "status": self.status,
            "selected_by_prospect": self.selection.to_flag(),
        }


def snapshot_all(rows: Iterable[Any]) -> list[QuoteSnapshot]:
    return [row if isinstance(row, QuoteSnapshot) else QuoteSnapshot.from_row(row) for row in rows]
