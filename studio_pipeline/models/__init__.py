"""SQLAlchemy model package for the tenant-aware studio schema."""

from studio_pipeline.models.base import Base
from studio_pipeline.models.commercial_condition import CommercialCondition
from studio_pipeline.models.enums import AdvanceType, BillingType, QuoteStatus, StageSlug
from studio_pipeline.models.pipeline_stage import PipelineStage
from studio_pipeline.models.promise import Promise
from studio_pipeline.models.quote import Quote, QuoteItem
from studio_pipeline.models.short_url import PromiseShortUrl
from studio_pipeline.models.status_history import PromiseStatusHistory
from studio_pipeline.models.tenant import Tenant

__all__ = [
    "AdvanceType",
    "Base",
    "BillingType",
    "CommercialCondition",
    "PipelineStage",
    "Promise",
    "PromiseShortUrl",
    "PromiseStatusHistory",
    "Quote",
    "QuoteItem",
    "QuoteStatus",
    "StageSlug",
    "Tenant",
]
