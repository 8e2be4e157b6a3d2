import os

# Settings are read at import time; pin a test-friendly environment before importing the app.
os.environ.setdefault("SESSION_SECRET", "test_session_secret")
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("EMAIL_PROVIDER", "log")
# Cheap Argon2id profile so hashing doesn't dominate test time.
os.environ.setdefault("PASSWORD_HASH_TIME_COST", "1")
os.environ.setdefault("PASSWORD_HASH_MEMORY_KIB", "8")
os.environ.setdefault("PASSWORD_HASH_PARALLELISM", "1")

from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.base import Base
from app.core import config as app_config
from app.core.security import CredentialStore

# Import models so they register with SQLAlchemy metadata.
from app.models.user import User
from app.models.verification import Verification  # noqa: F401
from app.models.user_session import UserSession  # noqa: F401
from app.models.form import Form  # noqa: F401
from app.models.question import Question  # noqa: F401
from app.models.response import Response  # noqa: F401
from app.models.answer import Answer  # noqa: F401

from app.core.database import get_db

TEST_PASSWORD = "test_password_123"


@pytest.fixture(scope="session")
def db_engine():
    # In-memory SQLite for fast, isolated tests.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture()
def db_session(db_engine):
    # Important: because we use an in-memory SQLite DB with StaticPool, the DB
    # persists across tests. Reset schema per test to avoid cross-test coupling.
    Base.metadata.drop_all(bind=db_engine)
    Base.metadata.create_all(bind=db_engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session")
def credentials() -> CredentialStore:
    return CredentialStore(time_cost=1, memory_kib=8, parallelism=1)


@pytest.fixture(autouse=True)
def _reset_mutable_settings():
    """
    Tests sometimes tweak global settings (app_config.settings.*). Because that object is
    process-global, we must restore values after each test to avoid cross-test coupling.
    """
    keys = [
        "FF_USER_VERIFICATION",
        "VERIFICATION_TOKEN_EXPIRE_HOURS",
        "MAX_QUESTIONS_PER_FORM",
        "EMAIL_PROVIDER",
    ]
    original = {k: getattr(app_config.settings, k) for k in keys}
    try:
        yield
    finally:
        for k, v in original.items():
            setattr(app_config.settings, k, v)


@pytest.fixture()
def app(db_session, credentials):
    import app.main as main

    fastapi_app = main.app
    fastapi_app.state.credentials = credentials

    def override_get_db():
        yield db_session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def users(db_session, credentials):
    """
    Two distinct verified users for ownership / isolation tests.
    """
    user_a = User(
        username="alice",
        email="alice@example.com",
        password_hash=credentials.hash(TEST_PASSWORD),
        verified=True,
    )
    user_b = User(
        username="bob",
        email="bob@example.com",
        password_hash=credentials.hash(TEST_PASSWORD),
        verified=True,
    )
    db_session.add_all([user_a, user_b])
    db_session.commit()
    db_session.refresh(user_a)
    db_session.refresh(user_b)
    return user_a, user_b


@pytest.fixture()
def anonymous_client(app):
    with TestClient(app) as c:
        yield c


def sign_in(c: TestClient, email: str, password: str = TEST_PASSWORD) -> None:
    res = c.post("/api/account/signin", json={"email": email, "password": password})
    assert res.status_code == 200, res.text


@pytest.fixture()
def client(app, users):
    """
    Default client signed in as user_a through the real signin endpoint.
    """
    user_a, _ = users
    with TestClient(app) as c:
        sign_in(c, user_a.email)
        yield c


@pytest.fixture()
def client_for(app):
    """
    Context manager to create a client signed in as an arbitrary user.

    Usage:
        with client_for(user) as c:
            ...
    """

    @contextmanager
    def _client_for(user: User):
        with TestClient(app) as c:
            sign_in(c, user.email)
            yield c

    return _client_for


@pytest.fixture()
def captured_codes(monkeypatch):
    """
    Capture verification emails instead of delivering them. Returns a list of
    (email, code) tuples in send order.
    """
    sent: list[tuple[str, str]] = []

    def _fake_send(user, code):
        sent.append((user.email, code))

    monkeypatch.setattr("app.routes.account.send_verification_email", _fake_send)
    return sent
