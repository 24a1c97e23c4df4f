import itertools
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from passlib.context import CryptContext

from rating_platform.core import security
from rating_platform.core.session_store import InMemorySessionStore
from rating_platform.db import database
from rating_platform.db.database import get_db
from rating_platform.models.session import Principal
from rating_platform.models.user import UserRole
from rating_platform.repositories.store_repository import StoreRepository
from rating_platform.repositories.user_repository import UserRepository

DEFAULT_PASSWORD = "Secret#Pass1"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start=None):
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch):
    monkeypatch.setattr(
        security, "pwd_context", CryptContext(schemes=["bcrypt"], bcrypt__rounds=4)
    )


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = str(tmp_path / "ratings.db")
    monkeypatch.setattr(database, "DB_PATH", path)
    database.init_db()
    return path


@pytest.fixture
def conn(db_path):
    with get_db() as conn:
        yield conn


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session_store(clock):
    return InMemorySessionStore(clock=clock)


@pytest.fixture
def make_user(db_path):
    counter = itertools.count(1)

    def _make(role=UserRole.RATER, password=DEFAULT_PASSWORD, email=None, federated=False):
        n = next(counter)
        with get_db() as conn:
            return UserRepository(conn).create(
                email=email or f"{role.value}{n}@example.com",
                name=f"Test {role.value} account number {n:03d}",
                address=f"{n} Market Street",
                role=role,
                hashed_password=None if federated else security.hash_password(password),
            )

    return _make


@pytest.fixture
def make_store(db_path):
    counter = itertools.count(1)

    def _make(owner=None, name=None, address=None):
        n = next(counter)
        with get_db() as conn:
            return StoreRepository(conn).create(
                name=name or f"Store {n:03d}",
                email=f"store{n}@example.com",
                address=address or f"{n} High Street",
                owner_id=owner.id if owner else None,
            )

    return _make


def principal_of(user):
    return Principal(id=user.id, role=user.role)


@pytest.fixture
def app(db_path, session_store):
    from rating_platform.main import create_app

    application = create_app(session_store=session_store)
    with TestClient(application):
        yield application


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def login_as(app):
    """Return a fresh client logged in as the given user."""

    def _login(user, password=DEFAULT_PASSWORD):
        c = TestClient(app)
        response = c.post(
            "/api/v1/auth/login", json={"email": user.email, "password": password}
        )
        assert response.status_code == 200, response.text
        return c

    return _login
