"""
Pytest configuration and fixtures
"""
import base64
import os

# Configure the app before anything imports app.core.config
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_VERIFY_KEY", "test-jwt-secret")
os.environ.setdefault("JWT_ALGORITHM", "HS256")
os.environ.setdefault(
    "CLERK_WEBHOOK_SECRET",
    "whsec_" + base64.b64encode(b"test-webhook-signing-secret-0123").decode(),
)
os.environ.setdefault("SECRET_OBFUSCATION_KEY", "test-obfuscation-key")
os.environ.setdefault("PAGINATION_STRATEGY", "page")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.orm import Session

import app.models  # noqa: F401
from app.core.config import settings
from app.db.base import Base
from app.db.sessions import SessionLocal, engine
from app.main import app as fastapi_app
from app.services.user_directory import UserDirectory


@pytest.fixture(scope="function")
def db() -> Session:
    """Fresh schema and session for each test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db) -> TestClient:
    return TestClient(fastapi_app)


def make_token(external_id: str) -> str:
    return jwt.encode({"sub": external_id}, settings.JWT_VERIFY_KEY, algorithm=settings.JWT_ALGORITHM)


def auth_headers(external_id: str) -> dict:
    return {"Authorization": f"Bearer {make_token(external_id)}"}


@pytest.fixture
def alice(db) -> str:
    UserDirectory(db).upsert_by_external_id("user_alice", "alice@example.com", "Alice Doe", None)
    return "user_alice"


@pytest.fixture
def bob(db) -> str:
    UserDirectory(db).upsert_by_external_id("user_bob", "bob@example.com", "Bob Roe", None)
    return "user_bob"
