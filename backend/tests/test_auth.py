"""
Authentication tests.

Verifies:
- Registration returns the user without password material and always as USER
- Duplicate usernames, weak passwords and mismatched confirmations are rejected
- Login issues a bearer token; logout revokes it
"""

import pytest

from storefront.extensions import db
from storefront.models import SessionToken, User
from storefront.services import session_service
from storefront.services.auth_service import (
    PasswordValidationError,
    hash_password,
    validate_password_strength,
    verify_password,
)


class TestRegistration:
    def test_register_returns_user_without_password(self, client):
        res = client.post(
            "/register",
            json={"username": "alice", "password": "Pa$$w0rd", "confirmPassword": "Pa$$w0rd"},
        )
        assert res.status_code == 201
        body = res.get_json()
        assert body["username"] == "alice"
        assert body["role"] == "USER"
        assert "password" not in body
        assert "hashedPassword" not in body
        assert "hashed_password" not in body
        assert "Pa$$w0rd" not in res.get_data(as_text=True)

    def test_register_cannot_choose_admin(self, client):
        res = client.post("/register", json={"username": "eve", "password": "Pa$$w0rd", "role": "ADMIN"})
        assert res.status_code == 201
        assert res.get_json()["role"] == "USER"

    def test_duplicate_username_rejected(self, client, make_user):
        make_user("alice")
        res = client.post("/register", json={"username": "alice", "password": "Pa$$w0rd"})
        assert res.status_code == 400
        assert res.get_json()["error"] == "User already exists."

    @pytest.mark.parametrize("password", ["short1!", "alllower1!", "ALLUPPER1!", "NoDigits!!", "NoSpecial1"])
    def test_weak_password_rejected(self, client, password):
        res = client.post("/register", json={"username": "alice", "password": password})
        assert res.status_code == 400

    def test_confirm_mismatch_rejected(self, app, client):
        res = client.post(
            "/register",
            json={"username": "alice", "password": "Pa$$w0rd", "confirmPassword": "Pa$$w0rd?"},
        )
        assert res.status_code == 400
        with app.app_context():
            assert db.session.query(User).count() == 0

    def test_missing_fields_rejected(self, client):
        assert client.post("/register", json={"username": "alice"}).status_code == 400
        assert client.post("/register", data="not json").status_code == 400


class TestLoginLogout:
    def test_login_returns_token(self, client, make_user):
        uid = make_user("alice")
        res = client.post("/login", json={"username": "alice", "password": "Pa$$w0rd"})
        assert res.status_code == 200
        body = res.get_json()
        assert len(body["token"]) == 64
        assert body["user"] == {"id": uid, "username": "alice", "role": "USER"}

    def test_wrong_password_401(self, client, make_user):
        make_user("alice")
        res = client.post("/login", json={"username": "alice", "password": "Wr0ng!pass"})
        assert res.status_code == 401

    def test_unknown_user_401(self, client):
        res = client.post("/login", json={"username": "nobody", "password": "Pa$$w0rd"})
        assert res.status_code == 401

    def test_token_is_stored_hashed(self, app, client, make_user):
        make_user("alice")
        token = client.post("/login", json={"username": "alice", "password": "Pa$$w0rd"}).get_json()["token"]
        with app.app_context():
            stored = db.session.query(SessionToken).one()
            assert stored.token_hash != token
            assert stored.token_hash == session_service.hash_token(token)

    def test_logout_revokes_token(self, client, alice):
        headers = alice["headers"]
        assert client.get("/cart", headers=headers).status_code == 200

        res = client.post("/logout", headers=headers)
        assert res.status_code == 200

        assert client.get("/cart", headers=headers).status_code == 401

    def test_expired_token_rejected(self, app, client, alice):
        from datetime import timedelta
        from storefront.time_utils import utcnow

        with app.app_context():
            for session in db.session.query(SessionToken).all():
                session.expires_at = utcnow() - timedelta(minutes=1)
            db.session.commit()

        assert client.get("/cart", headers=alice["headers"]).status_code == 401


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("Pa$$w0rd")
        assert hashed != "Pa$$w0rd"
        assert verify_password("Pa$$w0rd", hashed)
        assert not verify_password("Pa$$w0rd!", hashed)

    def test_malformed_hash_never_verifies(self):
        assert not verify_password("Pa$$w0rd", "not-a-bcrypt-hash")

    def test_strength_rule(self):
        validate_password_strength("Pa$$w0rd")
        with pytest.raises(PasswordValidationError):
            validate_password_strength("password")
