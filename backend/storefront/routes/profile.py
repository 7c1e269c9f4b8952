# Overview: Flask API routes for the caller's profile.

from flask import Blueprint, request, g

from ..services import profile_service
from ..services.profile_service import PROFILE_POLICY
from ..models import Profile
from ..validation import validate_payload, ValidationError, NotFoundError
from ..decorators import require_auth

profile_bp = Blueprint("profile", __name__, url_prefix="/profile")


@profile_bp.get("")
@require_auth
def get_profile_route():
    try:
        profile = profile_service.get_profile(g.current_user.user_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    return profile.to_dict()


@profile_bp.put("")
@require_auth
def update_profile_route():
    """
    Update the caller's profile.

    SECURITY: the body must carry the caller's own userId. A missing or
    different userId is refused with 403 before anything is written.
    """
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return {"error": "Invalid JSON payload"}, 400

    body_user_id = payload.get("userId")
    if isinstance(body_user_id, bool) or body_user_id != g.current_user.user_id:
        return {"error": "Cannot update another user's profile"}, 403

    try:
        patch = validate_payload(model=Profile, payload=payload, policy=PROFILE_POLICY, partial=True)
        profile = profile_service.update_profile(user_id=g.current_user.user_id, patch=patch)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404

    return profile.to_dict()
