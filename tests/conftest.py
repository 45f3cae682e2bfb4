# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Swaps the Supabase singleton for an in-memory fake (tests/fakes.py)
# - Seeds users and issues bearer tokens for them
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789")
os.environ.setdefault("RESET_TOKEN_SECRET", "test-reset-secret-0123456789")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from app.auth.tokens import create_access_token, hash_password
from app.auth.models import AuthUser
from lib.supabase_client import SupabaseClient
from lib.utils import new_id, utc_now_iso
from tests.fakes import FakeSupabase

TEST_PASSWORD = "password123"


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def db():
    """Fresh in-memory store installed as the Supabase singleton."""
    fake = FakeSupabase()
    SupabaseClient._instance = fake
    yield fake
    SupabaseClient._instance = None


@pytest.fixture
def client(db):
    """Test client (lifespan not run; system components are seeded on demand)."""
    from app.main import app
    return TestClient(app)


def make_user(db, role="user", email=None, is_active=True, **extra):
    """Seed a user document and return it."""
    now = utc_now_iso()
    user = {
        "id": new_id(),
        "email": email or f"{role}-{new_id()[:8]}@example.com",
        "password": hash_password(TEST_PASSWORD),
        "firstName": role.title(),
        "lastName": "Tester",
        "role": role,
        "isActive": is_active,
        "lastLogin": None,
        "createdAt": now,
        "updatedAt": now,
        **extra,
    }
    db.seed("users", user)
    return user


def auth_headers(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user['id'])}"}


def as_auth_user(user) -> AuthUser:
    return AuthUser.from_document(user)


@pytest.fixture
def user(db):
    return make_user(db, role="user", email="user@example.com")


@pytest.fixture
def admin(db):
    return make_user(db, role="admin", email="admin@example.com")


@pytest.fixture
def user_headers(user):
    return auth_headers(user)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)
