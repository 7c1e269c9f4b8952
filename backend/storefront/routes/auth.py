# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

"""
Authentication API routes

- POST /register: self-registration, always as role USER
- POST /login: username/password -> bearer token
- POST /logout: revoke the presented token

Password material (plaintext or hash) never appears in a response.
"""

from flask import Blueprint, request, jsonify, g

from ..services import auth_service
from ..services import session_service
from ..services.auth_service import PasswordValidationError, RegistrationError
from ..decorators import require_auth


auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/register")
def register_route():
    """
    Register a new user (role USER) with an empty profile.

    Body: {"username", "password", "confirmPassword"?}
    """
    data = request.get_json(silent=True) or {}
    username = data.get("username")
    password = data.get("password")
    confirm = data.get("confirmPassword")

    if not isinstance(username, str) or not isinstance(password, str) or not username.strip() or not password:
        return jsonify({"error": "username and password required"}), 400

    if confirm is not None and confirm != password:
        return jsonify({"error": "Passwords do not match"}), 400

    try:
        user = auth_service.register_user(username, password)
    except PasswordValidationError as e:
        return jsonify({"error": str(e)}), 400
    except RegistrationError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify(user.to_dict()), 201


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and create session token.

    Token must be sent as "Authorization: Bearer <token>" on protected routes.
    """
    data = request.get_json(silent=True) or {}
    username = data.get("username")
    password = data.get("password")

    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        return jsonify({"error": "username and password required"}), 400

    user = auth_service.authenticate(username, password)
    if not user:
        return jsonify({"error": "Invalid credentials"}), 401

    _, token = session_service.create_session(user.user_id)

    return jsonify({
        "token": token,
        "user": user.to_dict(),
    }), 200


@auth_bp.post("/logout")
@require_auth
def logout_route():
    session_service.revoke_session(g.session_token)
    return jsonify({"ok": True}), 200
