# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("JWT_SECRET", "test-secret-key-for-phayao-hub")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from phayao_hub.core.security import create_access_token, hash_password
from phayao_hub.core.settings import Settings
from phayao_hub.db.session import Base
from phayao_hub.db.session import get_db as app_get_session
from phayao_hub.main import app as fastapi_app
from phayao_hub.models import Category, CommunityPost, Guide, Job, JobProfile, MarketItem, User
from phayao_hub.models.user import ROLE_ADMIN

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "secret123"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    session.begin_nested()

    @event.listens_for(session, "after_transaction_end")
    def restart_savepoint(sess: Session, trans) -> None:  # pragma: no cover - SQLAlchemy internals
        if trans.nested and not getattr(trans._parent, "nested", False):
            session.begin_nested()

    try:
        yield session
    finally:
        event.remove(session, "after_transaction_end", restart_savepoint)
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Provide a Settings instance aligned with runtime configuration."""
    return Settings()  # type: ignore[call-arg]


def _make_user(db: Session, username: str, **overrides: Any) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash=hash_password(TEST_PASSWORD),
        full_name=overrides.pop("full_name", username.title()),
        **overrides,
    )
    db.add(user)
    db.flush()
    db.refresh(user)
    return user


def bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def test_user(db_session: Session) -> Iterator[User]:
    """Create and return a persisted member."""
    yield _make_user(db_session, "somchai")


@pytest.fixture()
def other_user(db_session: Session) -> Iterator[User]:
    """Create and return a second persisted member."""
    yield _make_user(db_session, "malee")


@pytest.fixture()
def admin_user(db_session: Session) -> Iterator[User]:
    yield _make_user(db_session, "admin", role=ROLE_ADMIN)


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return bearer(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return bearer(other_user)


@pytest.fixture()
def admin_auth_token(admin_user: User) -> dict[str, str]:
    return bearer(admin_user)


@pytest.fixture()
def market_category(db_session: Session) -> Iterator[Category]:
    category = Category(name="Electronics", slug="electronics", type="market")
    db_session.add(category)
    db_session.flush()
    db_session.refresh(category)
    yield category


@pytest.fixture()
def market_item(
    db_session: Session, test_user: User, market_category: Category
) -> Iterator[MarketItem]:
    """Create an available market item owned by the primary user."""
    item = MarketItem(
        user_id=test_user.id,
        category_id=market_category.id,
        title="Used bicycle",
        description="Blue city bike, good condition",
        price=1500,
        location="Mueang Phayao",
    )
    db_session.add(item)
    db_session.flush()
    db_session.refresh(item)
    yield item


@pytest.fixture()
def job(db_session: Session, test_user: User) -> Iterator[Job]:
    job = Job(
        user_id=test_user.id,
        title="Barista",
        company_name="Kwan Phayao Cafe",
        description="Morning shift",
        job_type="part_time",
        salary_min=9000,
        salary_max=12000,
        location="Phayao",
    )
    db_session.add(job)
    db_session.flush()
    db_session.refresh(job)
    yield job


@pytest.fixture()
def community_post(db_session: Session, test_user: User) -> Iterator[CommunityPost]:
    post = CommunityPost(
        user_id=test_user.id,
        title="Best khao soi near the lake?",
        content="Looking for recommendations",
        category="food",
    )
    db_session.add(post)
    db_session.flush()
    db_session.refresh(post)
    yield post


@pytest.fixture()
def guide(db_session: Session) -> Iterator[Guide]:
    guide = Guide(
        title="Kwan Phayao",
        description="Freshwater lake in the city",
        category="attraction",
        location="Mueang Phayao",
    )
    db_session.add(guide)
    db_session.flush()
    db_session.refresh(guide)
    yield guide


@pytest.fixture()
def job_profile(db_session: Session, test_user: User) -> Iterator[JobProfile]:
    profile = JobProfile(
        user_id=test_user.id,
        full_name="Somchai Jaidee",
        email="somchai@example.com",
        skills="Coffee, English",
    )
    db_session.add(profile)
    db_session.flush()
    db_session.refresh(profile)
    yield profile


@pytest.fixture()
def user_password() -> str:
    """Plain-text password shared by every fixture user."""
    return TEST_PASSWORD
