"""Test configuration and fixtures for the pizza service.

Every test gets its own application bound to a temporary SQLite database,
so state never leaks between tests.
"""
import os
from pathlib import Path
from typing import Callable, Dict, Generator, Tuple

import pytest
from fastapi.testclient import TestClient

# Set test environment BEFORE importing app modules
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from tests.helpers import random_name  # noqa: E402


@pytest.fixture(scope="function")
def client(tmp_path: Path) -> Generator[TestClient, None, None]:
    """Test client for a fresh app with an isolated database.

    Usage:
        def test_something(client):
            response = client.get("/api/order/menu")
            assert response.status_code == 200
    """
    from app.main import create_app

    app = create_app(f"sqlite:///{tmp_path / 'test.db'}")
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def register_user(client: TestClient) -> Callable[..., Tuple[Dict, str]]:
    """Factory registering a diner through the API.

    Returns:
        (user, token) where user includes the plain password
    """
    def _register(name: str = "pizza diner", password: str = "a") -> Tuple[Dict, str]:
        body = {"name": name, "email": f"{random_name()}@test.com", "password": password}
        response = client.post("/api/auth", json=body)
        assert response.status_code == 200, response.text
        data = response.json()
        user = dict(data["user"], password=password)
        return user, data["token"]

    return _register


@pytest.fixture(scope="function")
def create_admin_user(client: TestClient) -> Callable[[], Tuple[Dict, str]]:
    """Factory seeding an admin directly in the database, then logging in."""
    from models.user import Role, UserRole
    from utils.auth import create_user

    def _create() -> Tuple[Dict, str]:
        name = random_name()
        credentials = {"name": name, "email": f"{name}@admin.com", "password": "awesomePassword"}
        with client.app.state.db.session() as db:
            user = create_user(
                db,
                credentials["name"],
                credentials["email"],
                credentials["password"],
                roles=[UserRole(role=Role.ADMIN)],
            )
            db.commit()
            credentials["id"] = user.id

        response = client.put(
            "/api/auth",
            json={"email": credentials["email"], "password": credentials["password"]},
        )
        assert response.status_code == 200, response.text
        return credentials, response.json()["token"]

    return _create
