# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service

Passwords are hashed with bcrypt and validated for strength. Registration
creates the user and its (empty) profile in one transaction, so every user
has exactly one profile from the start.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor 12)
- Minimum 8 characters, upper, lower, digit and special char required
- Session tokens managed separately (see session_service.py)
"""

import re

import bcrypt
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import User, Profile
from ..models.auth import ROLES, ROLE_USER


class PasswordValidationError(Exception):
    """Raised when password doesn't meet strength requirements."""
    pass


class RegistrationError(Exception):
    """Raised for rejected registrations (duplicate username, bad role, ...)."""
    pass


def validate_password_strength(password: str) -> None:
    """
    Validate password meets strength requirements.

    Requirements:
    - Minimum 8 characters
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one digit
    - At least one special character

    Raises PasswordValidationError if requirements not met.
    """
    if len(password) < 8:
        raise PasswordValidationError("Password must be at least 8 characters long")

    if not re.search(r'[A-Z]', password):
        raise PasswordValidationError("Password must contain at least one uppercase letter")

    if not re.search(r'[a-z]', password):
        raise PasswordValidationError("Password must contain at least one lowercase letter")

    if not re.search(r'\d', password):
        raise PasswordValidationError("Password must contain at least one digit")

    if not re.search(r"[^A-Za-z0-9]", password):
        raise PasswordValidationError("Password must contain at least one special character")


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt with cost factor 12.

    Password is validated for strength before hashing.
    """
    validate_password_strength(password)
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """Timing-safe bcrypt check. Malformed hashes never verify."""
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def get_user_by_username(username: str) -> User | None:
    return db.session.query(User).filter(User.username == username).first()


def username_exists(username: str) -> bool:
    return get_user_by_username(username) is not None


def register_user(username: str, password: str, role: str = ROLE_USER) -> User:
    """
    Create a user and its paired profile.

    Raises:
        RegistrationError: blank/duplicate username or unknown role
        PasswordValidationError: weak password
    """
    username = (username or "").strip()
    if not username:
        raise RegistrationError("username is required")
    if role not in ROLES:
        raise RegistrationError(f"role must be one of: {', '.join(ROLES)}")

    if username_exists(username):
        raise RegistrationError("User already exists.")

    user = User(username=username, hashed_password=hash_password(password), role=role)
    db.session.add(user)
    db.session.flush()  # ensure user.user_id exists before the profile insert

    db.session.add(Profile(user_id=user.user_id))

    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same name
        db.session.rollback()
        raise RegistrationError("User already exists.")
    return user


def authenticate(username: str, password: str) -> User | None:
    """
    Authenticate user with username and password.

    Returns User if credentials valid, None otherwise.
    """
    user = get_user_by_username(username)
    if not user:
        return None

    if verify_password(password, user.hashed_password):
        return user

    return None
