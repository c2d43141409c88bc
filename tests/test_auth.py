import pytest

from tests.utils import API, auth_headers


def test_register_returns_token_and_sends_code(client, outbox):
    resp = client.post(
        f"{API}/auth/register",
        json={
            "email": "Alice@Example.com",
            "username": "alice",
            "password": "secret123",
            "full_name": "Alice Liddell",
        },
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["token"]
    assert body["user"]["email"] == "alice@example.com"
    assert body["user"]["is_verified"] is False
    assert body["user"]["roles"] == ["customer"]
    assert "password_hash" not in body["user"]

    assert len(outbox) == 1
    email, code = outbox[0]
    assert email == "alice@example.com"
    assert len(code) == 6 and code.isdigit()


def test_register_duplicate_email_or_username(client, register):
    register()
    resp = client.post(
        f"{API}/auth/register",
        json={"email": "alice@example.com", "username": "other", "password": "secret123"},
    )
    assert resp.status_code == 400
    assert resp.json() == {"message": "Email or username already exists"}

    resp = client.post(
        f"{API}/auth/register",
        json={"email": "other@example.com", "username": "alice", "password": "secret123"},
    )
    assert resp.status_code == 400


def test_register_validation_error_envelope(client):
    resp = client.post(
        f"{API}/auth/register",
        json={"email": "not-an-email", "username": "al", "password": "123"},
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Validation error"
    assert body["errors"]


def test_login_unverified_requires_verification(client, register, outbox):
    register()
    outbox.clear()

    resp = client.post(
        f"{API}/auth/login",
        json={"email": "alice@example.com", "password": "secret123"},
    )
    assert resp.status_code == 200
    assert resp.json() == {"requires_verification": True, "email": "alice@example.com"}
    assert len(outbox) == 1


def test_login_invalid_credentials(client, register):
    register()
    resp = client.post(
        f"{API}/auth/login",
        json={"email": "alice@example.com", "password": "wrong-password"},
    )
    assert resp.status_code == 401
    assert resp.json() == {"message": "Invalid credentials"}

    resp = client.post(
        f"{API}/auth/login",
        json={"email": "nobody@example.com", "password": "secret123"},
    )
    assert resp.status_code == 401


def test_verify_otp_then_login(client, register, outbox):
    register()
    _, code = outbox[-1]

    resp = client.post(
        f"{API}/auth/verify-otp",
        json={"email": "alice@example.com", "otp": code},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["user"]["is_verified"] is True
    assert body["token"]

    # The code is consumed
    resp = client.post(
        f"{API}/auth/verify-otp",
        json={"email": "alice@example.com", "otp": code},
    )
    assert resp.status_code == 400

    resp = client.post(
        f"{API}/auth/login",
        json={"email": "alice@example.com", "password": "secret123"},
    )
    assert resp.status_code == 200
    assert resp.json()["token"]


def test_verify_otp_wrong_code(client, register, outbox):
    register()
    _, code = outbox[-1]
    wrong = "000000" if code != "000000" else "111111"

    resp = client.post(
        f"{API}/auth/verify-otp",
        json={"email": "alice@example.com", "otp": wrong},
    )
    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid verification code"}


def test_send_otp_replaces_previous_code(client, register, outbox):
    register()
    _, first = outbox[-1]

    resp = client.post(f"{API}/auth/send-otp", json={"email": "alice@example.com"})
    assert resp.status_code == 200
    _, second = outbox[-1]

    if first != second:
        resp = client.post(
            f"{API}/auth/verify-otp",
            json={"email": "alice@example.com", "otp": first},
        )
        assert resp.status_code == 400

    resp = client.post(
        f"{API}/auth/verify-otp",
        json={"email": "alice@example.com", "otp": second},
    )
    assert resp.status_code == 200


def test_send_otp_unknown_email(client):
    resp = client.post(f"{API}/auth/send-otp", json={"email": "ghost@example.com"})
    assert resp.status_code == 404
    assert resp.json() == {"message": "User not found"}


def test_protected_route_requires_token(client):
    resp = client.get(f"{API}/users/profile")
    assert resp.status_code == 401
    assert resp.json() == {"message": "Authentication required"}


def test_protected_route_rejects_bad_token(client):
    resp = client.get(f"{API}/users/profile", headers=auth_headers("not-a-jwt"))
    assert resp.status_code == 401
    assert resp.json() == {"message": "Invalid or expired token"}


@pytest.mark.parametrize("otp", ["12ab56", "12345", "1234567", "１２３４５６"])
def test_verify_otp_rejects_malformed_code(client, register, otp):
    register()
    resp = client.post(
        f"{API}/auth/verify-otp",
        json={"email": "alice@example.com", "otp": otp},
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Validation error"
