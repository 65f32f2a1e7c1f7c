"""Canonical enum values for the tenant-aware schema."""

from __future__ import annotations

import enum


class QuoteStatus(str, enum.Enum):
    PENDING = "pending"
    NEGOTIATION = "negotiation"
    CLOSING = "closing"
    APPROVED = "approved"
    AUTHORIZED = "authorized"
    CONTRACT_PENDING = "contract-pending"
    CONTRACT_GENERATED = "contract-generated"
    CONTRACT_SIGNED = "contract-signed"
    CANCELED = "canceled"


class StageSlug(str, enum.Enum):
    PENDING = "pending"
    NEGOTIATION = "negotiation"
    CLOSING = "closing"
    APPROVED = "approved"
    CANCELED = "canceled"


class BillingType(str, enum.Enum):
    HOUR = "HOUR"
    SERVICE = "SERVICE"
    UNIT = "UNIT"


class AdvanceType(str, enum.Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"
