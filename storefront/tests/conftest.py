import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.db import Base, AdminUserOrm, BrandOrm, CategoryOrm
from storefront.db.connection import get_db
from storefront.dependencies.auth import get_current_admin
from storefront.main import app
from storefront.services.auth import hash_password

ADMIN_PASSWORD = "s3cret-pass"


@pytest.fixture
def engine():
    # One shared in-memory database per test
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
def db_session(engine):
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def admin_user(db_session):
    user = AdminUserOrm(username="admin", password_hash=hash_password(ADMIN_PASSWORD))
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def category(db_session):
    cat = CategoryOrm(name="Kitchen", slug="kitchen", sort_order=1)
    db_session.add(cat)
    db_session.commit()
    db_session.refresh(cat)
    return cat


@pytest.fixture
def brand(db_session):
    b = BrandOrm(name="Acme", slug="acme")
    db_session.add(b)
    db_session.commit()
    db_session.refresh(b)
    return b


@pytest.fixture
def client(db_session):
    """Anonymous client; the database dependency points at the test session."""
    app.dependency_overrides[get_db] = lambda: db_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client, admin_user):
    """Client whose requests are authenticated as `admin_user`."""
    app.dependency_overrides[get_current_admin] = lambda: admin_user
    return client
