from __future__ import annotations

from studio_pipeline.services.stage_catalog_service import DEFAULT_STAGES, StageCatalogService


def test_ensure_default_stages_creates_missing_only(session, tenant):
    service = StageCatalogService(db=session)

    created = service.ensure_default_stages(tenant.id, slugs=("pending", "negotiation"))
    assert sorted(stage.slug for stage in created) == ["negotiation", "pending"]

    created_again = service.ensure_default_stages(tenant.id)
    assert len(created_again) == len(DEFAULT_STAGES) - 2
    assert set(service.active_stages(tenant.id)) == {slug for slug, _ in DEFAULT_STAGES}


def test_active_stages_excludes_inactive(session, tenant, stages):
    stages["closing"].is_active = False
    session.commit()

    assert "closing" not in StageCatalogService(db=session).active_stages(tenant.id)
