"""Pytest configuration and shared fixtures."""

import os
import tempfile

# Set environment BEFORE importing the app, settings are cached on first use
_TMP_DIR = tempfile.mkdtemp(prefix="vita-admin-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP_DIR, 'default.db')}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_DIR"] = os.path.join(_TMP_DIR, "logs")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from vita_admin.core.exceptions import NotificationFailure
from vita_admin.db.init_db import init_db
from vita_admin.db.session import get_db, get_session_factory
from vita_admin.main import app
from vita_admin.models.admin import Admin
from vita_admin.models.user import Mentor, User
from vita_admin.services.auth import get_password_hash
from vita_admin.services.email import get_notifier

ADMIN_EMAIL = "a@x.com"
ADMIN_PASSWORD = "right"


class FakeNotifier:
    """Records emails instead of sending them; set ``fail`` to simulate SMTP errors."""

    def __init__(self):
        self.sent = []
        self.fail = False

    async def send(self, to_email, subject, template_name, **context):
        if self.fail:
            raise NotificationFailure()
        self.sent.append({
            "to": to_email,
            "subject": subject,
            "template": template_name,
            "context": context,
        })
        return f"<{len(self.sent)}@vita>"

    @property
    def last(self):
        return self.sent[-1]


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest_asyncio.fixture
async def client(session_factory, notifier):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_notifier] = lambda: notifier

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def admin(db):
    admin = Admin(
        name="Root Admin",
        email=ADMIN_EMAIL,
        hashed_password=get_password_hash(ADMIN_PASSWORD),
    )
    db.add(admin)
    await db.commit()
    await db.refresh(admin)
    return admin


async def sign_in(client, notifier, email=ADMIN_EMAIL, password=ADMIN_PASSWORD):
    """Run both login steps and return the verify-otp response."""
    response = await client.post("/api/admin/login", json={"email": email, "password": password})
    assert response.status_code == 200
    otp = notifier.last["context"]["otp"]
    return await client.post("/api/admin/verify-otp", json={"email": email, "otp": otp})


@pytest_asyncio.fixture
async def admin_client(client, notifier, admin):
    response = await sign_in(client, notifier)
    assert response.status_code == 200
    notifier.sent.clear()
    return client


@pytest_asyncio.fixture
async def mentor(db):
    mentor = Mentor(name="Mina Mentor", email="mina@example.com")
    db.add(mentor)
    await db.commit()
    await db.refresh(mentor)
    return mentor


@pytest_asyncio.fixture
async def mentor_user(db, mentor):
    user = User(name="Mina Mentor", email=mentor.email, mentor_information=mentor.id)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def fetch(session_factory, model, subject_id):
    async with session_factory() as session:
        return await session.get(model, subject_id)
