"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from bid_management.ai import AIClient
from bid_management.api import create_app
from bid_management.config import Config
from bid_management.database import MemoryStore
from bid_management.database.base import TENDERS
from bid_management.models import Tender, UserCreate, UserRole

PASSWORD = "secret-pass"


def make_tender(store, **overrides) -> Tender:
    """Insert a tender straight into the store."""
    fields = {
        "title": "Road Construction Phase 2",
        "organization": "Public Works Department",
        "value": 500000,
        "deadline": datetime.now(timezone.utc) + timedelta(days=10),
    }
    fields.update(overrides)
    tender = Tender(**fields)
    store.insert(TENDERS, tender.to_record())
    return tender


@pytest.fixture
def config(tmp_path) -> Config:
    return Config(
        jwt_secret="test-secret",
        storage_backend="memory",
        upload_dir=str(tmp_path / "uploads"),
        missed_opportunity_interval_minutes=0,
        openai_api_key="test-openai-key",
    )


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def app(config, store):
    return create_app(config, store=store, ai_client=AIClient(api_key="test-openai-key"))


@pytest.fixture
def services(app):
    return app.state.services


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


def _create_user(services, username: str, role: UserRole):
    services.users.create_user(UserCreate(
        username=username,
        email=f"{username}@example.com",
        password=PASSWORD,
        name=username.capitalize(),
        role=role,
    ))
    return services.users.login(username, PASSWORD)


@pytest.fixture
def admin_login(services):
    return _create_user(services, "admin", UserRole.ADMIN)


@pytest.fixture
def manager_login(services):
    return _create_user(services, "manager", UserRole.MANAGER)


@pytest.fixture
def bidder_login(services):
    return _create_user(services, "bidder", UserRole.BIDDER)


@pytest.fixture
def finance_login(services):
    return _create_user(services, "finance", UserRole.FINANCE_MANAGER)


def auth(login) -> dict:
    return {"Authorization": f"Bearer {login.token}"}


@pytest.fixture
def admin_headers(admin_login):
    return auth(admin_login)


@pytest.fixture
def manager_headers(manager_login):
    return auth(manager_login)


@pytest.fixture
def bidder_headers(bidder_login):
    return auth(bidder_login)


@pytest.fixture
def finance_headers(finance_login):
    return auth(finance_login)


@pytest.fixture
def admin_user(services, admin_login):
    return services.users.get_user(admin_login.user.id)


@pytest.fixture
def manager_user(services, manager_login):
    return services.users.get_user(manager_login.user.id)


@pytest.fixture
def bidder_user(services, bidder_login):
    return services.users.get_user(bidder_login.user.id)
