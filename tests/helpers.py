"""Shared helpers for the API tests."""
import re
import uuid

JWT_PATTERN = re.compile(r"^[a-zA-Z0-9\-_]*\.[a-zA-Z0-9\-_]*\.[a-zA-Z0-9\-_]*$")


def random_name() -> str:
    return uuid.uuid4().hex[:10]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def expect_valid_jwt(token) -> None:
    assert isinstance(token, str)
    assert JWT_PATTERN.match(token), f"not a JWT: {token!r}"
