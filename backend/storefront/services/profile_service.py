# Overview: Service-layer operations for profiles; one contact/shipping record per user.

from __future__ import annotations

from ..extensions import db
from ..models import Profile
from ..validation import ModelValidationPolicy, NotFoundError

PROFILE_POLICY = ModelValidationPolicy(
    writable_fields={
        "userId", "firstName", "lastName", "phone", "email", "address", "city", "state", "zip",
    },
    aliases={
        "userId": "user_id",
        "firstName": "first_name",
        "lastName": "last_name",
    },
)

PROFILE_MUTABLE_FIELDS = {
    "first_name", "last_name", "phone", "email", "address", "city", "state", "zip",
}


def get_profile(user_id: int) -> Profile:
    profile = db.session.query(Profile).filter(Profile.user_id == user_id).first()
    if profile is None:
        raise NotFoundError("profile", user_id)
    return profile


def update_profile(*, user_id: int, patch: dict) -> Profile:
    """
    Apply a validated patch to the user's profile.

    user_id and profile_id are never writable here; ownership is checked
    by the caller before this runs.
    """
    profile = get_profile(user_id)
    for key, value in patch.items():
        if key in PROFILE_MUTABLE_FIELDS:
            setattr(profile, key, value)
    db.session.commit()
    return profile
