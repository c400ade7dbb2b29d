# tests/helpers.py

from fastapi.testclient import TestClient

TEST_SECRET = "test-secret-key"


def register(client: TestClient, username: str, email: str, password: str = "secret1") -> dict:
    res = client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "password": password},
    )
    assert res.status_code == 201, res.text
    return res.json()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
