"""
Firebase ID token verification and the auth/premium/admin gates.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import quote

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth

from backend.db import DbClient
from backend.dependencies import ensure_firebase_app, get_db_client
from commerce import subscriptions
from shared.types import AuthenticatedUser

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)

AVATAR_URL = "https://ui-avatars.com/api/?name={name}&background=random&color=fff"


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> AuthenticatedUser:
    """Verifies the `Authorization: Bearer <id token>` header."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Authentication required")

    ensure_firebase_app()
    try:
        claims = auth.verify_id_token(credentials.credentials)
    except (
        auth.InvalidIdTokenError,
        auth.ExpiredIdTokenError,
        auth.RevokedIdTokenError,
        auth.CertificateFetchError,
        ValueError,
    ) as e:
        logger.info("Rejected ID token: %s", e)
        raise HTTPException(status_code=401, detail="Invalid authentication token")

    return AuthenticatedUser(
        uid=claims["uid"],
        email=claims.get("email"),
        display_name=claims.get("name"),
        photo_url=claims.get("picture"),
        email_verified=bool(claims.get("email_verified", False)),
    )


def default_display_name(user: AuthenticatedUser) -> str:
    if user.display_name:
        return user.display_name
    if user.email:
        return user.email.split("@")[0]
    return "User"


def default_avatar_url(display_name: str) -> str:
    return AVATAR_URL.format(name=quote(display_name, safe=""))


def get_or_create_profile(
    db: DbClient,
    user: AuthenticatedUser,
    initial_plan: Optional[str] = None,
    now: Optional[datetime] = None,
) -> dict:
    """
    Returns the user document, creating it on first sign-in.

    `initial_plan` (monthly/yearly) activates a subscription on the new
    document; it is ignored for existing users.
    """
    existing = db.get_user(user.uid)
    if existing is not None:
        return existing

    display_name = default_display_name(user)
    data = {
        "email": user.email,
        "display_name": display_name,
        "photo_url": user.photo_url or default_avatar_url(display_name),
        "is_admin": False,
    }
    if initial_plan:
        data["subscription"] = subscriptions.activate_subscription(initial_plan, now)
    db.create_user(user.uid, data)
    logger.info("Created profile for %s", user.uid)

    return {**data, "created_at": now or datetime.now(timezone.utc)}


def get_current_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
) -> dict:
    profile = get_or_create_profile(db, user)
    return {**profile, "uid": user.uid}


def require_premium(profile: dict = Depends(get_current_profile)) -> dict:
    if not subscriptions.is_premium(profile.get("subscription")):
        raise HTTPException(status_code=403, detail="Premium subscription required")
    return profile


def require_admin(profile: dict = Depends(get_current_profile)) -> dict:
    if not profile.get("is_admin"):
        raise HTTPException(status_code=403, detail="Admin access required")
    return profile
