from datetime import date, datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core.database import Base, get_db
from app.main import app as fastapi_app
from app.models.plan import Plan
from app.models.subscription import Subscription
from app.models.user_plan import UserPlan

PLANS = [
    {"slug": "free", "name": "Free", "price": 0, "billing_cycle": "free", "sort_order": 0},
    {"slug": "pro", "name": "Pro", "price": 1000, "billing_cycle": "monthly", "sort_order": 1},
    {"slug": "premium", "name": "Premium", "price": 2000, "billing_cycle": "monthly", "sort_order": 2},
    {"slug": "pro-yearly", "name": "Pro Yearly", "price": 10000, "billing_cycle": "yearly", "sort_order": 3},
    {"slug": "lifetime", "name": "Lifetime", "price": 30000, "billing_cycle": "lifetime", "sort_order": 4},
]


def utcnow_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    testing_session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = testing_session()
        try:
            yield db
        finally:
            db.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def plans(db_session):
    """Seeded plan catalogue keyed by slug"""
    rows = {p["slug"]: Plan(**p) for p in PLANS}
    db_session.add_all(rows.values())
    db_session.commit()
    return rows


@pytest.fixture
def make_user_plan(db_session, plans):
    def _make(user_id: int, slug: str, expires_at=None, status: str = "active") -> UserPlan:
        user_plan = UserPlan(
            user_id=user_id,
            plan_id=plans[slug].id,
            status=status,
            start_date=utcnow_naive() - timedelta(days=20),
            expires_at=expires_at,
        )
        db_session.add(user_plan)
        db_session.commit()
        return user_plan

    return _make


@pytest.fixture
def make_subscription(db_session):
    def _make(**kwargs) -> Subscription:
        defaults = {
            "owner_id": 1,
            "name": "Netflix",
            "amount": 1599,
            "billing_cycle": "monthly",
            "frequency": 1,
            "start_date": date(2024, 1, 15),
            "auto_renew": True,
        }
        defaults.update(kwargs)
        sub = Subscription(**defaults)
        db_session.add(sub)
        db_session.commit()
        return sub

    return _make
