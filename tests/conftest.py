"""Pytest configuration and shared fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rolemanager.core.cache import DerivedCache, MemoryTransientStore
from rolemanager.core.security import create_access_token
from rolemanager.db.base import Base
from rolemanager.db.seed import seed_default_roles
from rolemanager.db.store import RoleStore
from rolemanager.services.role_manager import RoleManagerService

import rolemanager.db.models  # noqa: F401


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Fresh database session per test."""
    session = sessionmaker(bind=db_engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded_session(db_session):
    """Session with the five protected core roles created."""
    seed_default_roles(db_session)
    db_session.commit()
    return db_session


@pytest.fixture
def transient_store():
    return MemoryTransientStore()


@pytest.fixture
def cache(transient_store):
    return DerivedCache(transient_store)


@pytest.fixture
def role_store(seeded_session):
    return RoleStore(seeded_session)


@pytest.fixture
def service(role_store, cache):
    return RoleManagerService(role_store, cache)


@pytest.fixture
def client(seeded_session, transient_store):
    """Test client wired to the test database and transient store."""
    from rolemanager.api.main import app
    from rolemanager.api.deps import get_db, get_transient_store

    def override_get_db():
        yield seeded_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_transient_store] = lambda: transient_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin_user(seeded_session):
    from tests.factories import create_user

    return create_user(seeded_session, role_slug="administrator", email="admin@example.com")


@pytest.fixture
def auth_headers(admin_user):
    return {"Authorization": f"Bearer {create_access_token(admin_user.id)}"}
