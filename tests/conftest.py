from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from studio_pipeline.models import Base, Promise, PromiseShortUrl, Quote, QuoteItem, Tenant
from studio_pipeline.services.stage_catalog_service import StageCatalogService


@pytest.fixture
def session():
    engine = create_engine("sqlite:///:memory:")
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def tenant(session):
    row = Tenant(tenant_key="studio-demo", name="Demo Studio", markup=Decimal("0.30"), sales_commission=Decimal("0.05"))
    session.add(row)
    session.commit()
    session.refresh(row)
    return row


@pytest.fixture
def stages(session, tenant):
    StageCatalogService(db=session).ensure_default_stages(tenant.id)
    return StageCatalogService(db=session).active_stages(tenant.id)


@pytest.fixture
def make_promise(session, tenant):
    def _make(name: str = "Wedding 2026", stage=None, tenant_id: int | None = None) -> Promise:
        promise = Promise(
            tenant_id=tenant_id or tenant.id,
            name=name,
            pipeline_stage_id=stage.id if stage is not None else None,
        )
        session.add(promise)
        session.commit()
        session.refresh(promise)
        return promise

    return _make


@pytest.fixture
def make_quote(session):
    def _make(
        promise: Promise,
        status: str = "pending",
        selected: bool | None = None,
        archived: bool = False,
        price: str = "0",
        items: tuple[dict, ...] = (),
    ) -> Quote:
        quote = Quote(
            tenant_id=promise.tenant_id,
            promise_id=promise.id,
            name=f"Quote {status}",
            status=status,
            selected_by_prospect=selected,
            archived=archived,
            price=Decimal(price),
        )
        session.add(quote)
        session.flush()
        for position, row in enumerate(items):
            session.add(
                QuoteItem(
                    tenant_id=promise.tenant_id,
                    quote_id=quote.id,
                    name=row.get("name", f"Item {position}"),
                    quantity=row.get("quantity", 1),
                    unit_price=Decimal(row.get("unit_price", "0")),
                    cost=Decimal(row.get("cost", "0")),
                    expense=Decimal(row.get("expense", "0")),
                    billing_type=row.get("billing_type", "SERVICE"),
                    is_courtesy=row.get("is_courtesy", False),
                    position=position,
                )
            )
        session.commit()
        session.refresh(quote)
        return quote

    return _make


@pytest.fixture
def make_short_url(session):
    def _make(promise: Promise, original_url: str = "/studio-demo/promise/0") -> PromiseShortUrl:
        row = PromiseShortUrl(
            tenant_id=promise.tenant_id,
            promise_id=promise.id,
            short_code=f"s{promise.id}",
            original_url=original_url,
        )
        session.add(row)
        session.commit()
        session.refresh(row)
        return row

    return _make
