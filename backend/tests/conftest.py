# tests/conftest.py
import os

# must be in place before hms.config.settings is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DATABASE_CREATE_TABLES"] = "true"
os.environ["KAFKA_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from hms.config.constants import DOCTOR_SERVICE, PATIENT_SERVICE
from hms.core.events import InMemoryEventPublisher
from hms.db.base import create_tables, get_engine, get_session_factory
from hms.main import create_app


@pytest.fixture
def publisher():
    return InMemoryEventPublisher()


@pytest.fixture
def patient_client(publisher):
    # a fresh app per test means a fresh in-memory database
    app = create_app(PATIENT_SERVICE, event_publisher=publisher)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def doctor_client(publisher):
    app = create_app(DOCTOR_SERVICE, event_publisher=publisher)
    with TestClient(app) as client:
        yield client


@pytest_asyncio.fixture
async def db_session():
    engine = await get_engine("sqlite+aiosqlite:///:memory:")
    await create_tables(engine)
    session_factory = await get_session_factory(engine)
    async with session_factory() as session:
        yield session
    await engine.dispose()
