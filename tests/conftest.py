"""
UniEvents - Test Configuration and Fixtures
"""
import os
import tempfile
from datetime import timedelta
from typing import AsyncGenerator

import pytest
from faker import Faker
from httpx import AsyncClient, ASGITransport

# Set testing environment
os.environ['APP_ENV'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite:///./test_unievents.db'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['UPLOAD_DIR'] = tempfile.mkdtemp(prefix='unievents-uploads-')
os.environ.pop('SMTP_USER', None)
os.environ.pop('SUPABASE_URL', None)

from app.main import app
from app.auth import create_access_token
from app.database import database, engine, metadata, create_tables
from app.schemas.event import CreateEventRequest
from app.services.cache_service import cache
from app.services.email_service import email_service
from app.services.event_service import event_service
from app.services.user_service import user_service
from app.utils.datetime_utils import now_local

fake = Faker()

STUDENT_PASSWORD = 'StudentPass123'
ADMIN_PASSWORD = 'AdminPass123'


@pytest.fixture(autouse=True)
async def db() -> AsyncGenerator[None, None]:
    """Fresh schema for each test"""
    metadata.drop_all(bind=engine)
    create_tables()
    cache.clear()
    await database.connect()
    yield
    await database.disconnect()
    metadata.drop_all(bind=engine)


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac


@pytest.fixture
def sent_codes(monkeypatch) -> list:
    """Capture one-time codes instead of emailing them"""
    codes = []

    async def capture(to_email, first_name, code, purpose):
        codes.append({"email": to_email, "code": code, "purpose": purpose})
        return True

    monkeypatch.setattr(email_service, "send_code_email", capture)
    return codes


def token_for(user: dict) -> dict:
    token = create_access_token({
        "email": user["email"],
        "user_type": user["user_type"],
        "user_id": str(user["id"])
    })
    return {'Authorization': f'Bearer {token}'}


async def make_student(**overrides) -> dict:
    data = {
        "email": fake.unique.email(),
        "password": STUDENT_PASSWORD,
        "first_name": fake.first_name(),
        "last_name": fake.last_name(),
        "university_id": str(fake.unique.random_number(digits=8, fix_len=True)),
        "email_confirmed": True,
    }
    data.update(overrides)
    return await user_service.create_user(**data)


async def make_event(admin: dict, days: float = 7, **overrides) -> dict:
    """Approved event starting `days` from now (negative for past events)"""
    data = {
        "title": fake.catch_phrase(),
        "description": fake.sentence(),
        "event_date": now_local() + timedelta(days=days),
        "venue": "Main Hall",
        "event_type": "Workshop",
        "max_capacity": 10,
        "volunteer_hours": 3,
    }
    data.update(overrides)
    return await event_service.create_event(CreateEventRequest(**data), str(admin["id"]))


@pytest.fixture
async def test_user() -> dict:
    return await make_student()


@pytest.fixture
async def admin_user() -> dict:
    return await user_service.create_user(
        email=fake.unique.email(),
        password=ADMIN_PASSWORD,
        first_name=fake.first_name(),
        last_name=fake.last_name(),
        university_id=f"ADM{fake.unique.random_number(digits=5, fix_len=True)}",
        user_type="Admin",
        email_confirmed=True
    )


@pytest.fixture
def auth_headers(test_user: dict) -> dict:
    return token_for(test_user)


@pytest.fixture
def admin_auth_headers(admin_user: dict) -> dict:
    return token_for(admin_user)


@pytest.fixture
async def event(admin_user: dict) -> dict:
    return await make_event(admin_user)
