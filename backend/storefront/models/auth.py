from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z

ROLE_USER = "USER"
ROLE_ADMIN = "ADMIN"
ROLES = (ROLE_USER, ROLE_ADMIN)


class User(db.Model):
    """
    Login identity.

    Username is unique and case-sensitive. The bcrypt hash never leaves this
    model: to_dict() omits it.
    """
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    user_id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(50), nullable=False, unique=True)
    hashed_password = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(16), nullable=False, default=ROLE_USER)

    profile = db.relationship("Profile", back_populates="user", uselist=False)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "username": self.username,
            "role": self.role,
        }


class Profile(db.Model):
    """Shipping and contact details. Exactly one per user, created at registration."""
    __tablename__ = "profiles"
    __table_args__ = {"sqlite_autoincrement": True}

    profile_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.user_id"), nullable=False, unique=True)

    first_name = db.Column(db.String(50), nullable=True)
    last_name = db.Column(db.String(50), nullable=True)
    phone = db.Column(db.String(20), nullable=True)
    email = db.Column(db.String(200), nullable=True)
    address = db.Column(db.String(200), nullable=True)
    city = db.Column(db.String(50), nullable=True)
    state = db.Column(db.String(2), nullable=True)
    zip = db.Column(db.String(20), nullable=True)

    user = db.relationship("User", back_populates="profile")

    def has_shipping_address(self) -> bool:
        return all(
            (value or "").strip()
            for value in (self.address, self.city, self.state, self.zip)
        )

    def to_dict(self) -> dict:
        return {
            "profileId": self.profile_id,
            "userId": self.user_id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zip": self.zip,
        }


class SessionToken(db.Model):
    """
    Bearer tokens issued at login.

    Only the SHA-256 of the token is stored; the plaintext goes to the client once.
    """
    __tablename__ = "session_tokens"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.user_id"), nullable=False, index=True)
    token_hash = db.Column(db.String(64), nullable=False, unique=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    expires_at = db.Column(db.DateTime(timezone=True), nullable=False)
    revoked_at = db.Column(db.DateTime(timezone=True), nullable=True)

    user = db.relationship("User")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "created_at": to_utc_z(self.created_at),
            "expires_at": to_utc_z(self.expires_at),
            "revoked_at": to_utc_z(self.revoked_at),
        }
