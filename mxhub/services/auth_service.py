import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException
from supabase import Client
from supabase_auth.errors import AuthApiError

from ..core.config import Config


logger = logging.getLogger(__name__)

TOO_MANY_ATTEMPTS = "Too many sign in attempts. Please try again in a few minutes."


@dataclass(frozen=True)
class AuthenticatedUser:
    id: str
    email: Optional[str]
    access_token: str


def get_user(supabase: Client, access_token: str) -> AuthenticatedUser:
    try:
        response = supabase.auth.get_user(access_token)
    except AuthApiError as e:
        logger.info(f"Rejected access token: {e.message}")
        raise HTTPException(status_code=401, detail="Invalid or expired session")
    except Exception as e:
        logger.error(f"Failed to resolve session user: {e}")
        raise HTTPException(status_code=401, detail="Invalid or expired session")

    user = getattr(response, "user", None)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid or expired session")
    return AuthenticatedUser(id=user.id, email=getattr(user, "email", None), access_token=access_token)


def sign_up(supabase: Client, email: str, password: str) -> dict:
    try:
        response = supabase.auth.sign_up({
            "email": email,
            "password": password,
            "options": {"email_redirect_to": f"{Config.SITE_URL.rstrip('/')}/auth/callback"},
        })
    except AuthApiError as e:
        if e.status == 422:
            raise HTTPException(
                status_code=409,
                detail={"code": "user_already_exists", "message": e.message or "User already registered"},
            )
        logger.warning(f"Sign up failed for {email}: [{e.status}] {e.message}")
        raise HTTPException(
            status_code=e.status or 400,
            detail={"code": e.code or e.status, "message": e.message or "An error occurred during sign up"},
        )

    user = getattr(response, "user", None)
    return {
        "user_id": getattr(user, "id", None),
        "email": email,
        "confirmation_required": getattr(response, "session", None) is None,
    }


def sign_in(supabase: Client, email: str, password: str) -> dict:
    try:
        response = supabase.auth.sign_in_with_password({"email": email, "password": password})
    except AuthApiError as e:
        logger.warning(f"Sign in failed for {email}: [{e.status}] {e.message}")
        if e.status == 429:
            raise HTTPException(status_code=429, detail=TOO_MANY_ATTEMPTS)
        raise HTTPException(status_code=401, detail=e.message or "Authentication failed")

    session = getattr(response, "session", None)
    if session is None:
        raise HTTPException(status_code=401, detail="Authentication failed")

    return {
        "access_token": session.access_token,
        "refresh_token": session.refresh_token,
        "expires_in": session.expires_in,
        "user": {"id": response.user.id, "email": response.user.email},
    }


def sign_out(supabase: Client, access_token: str) -> None:
    try:
        supabase.auth.admin.sign_out(access_token)
    except AuthApiError as e:
        # The session is already gone; the cookie still gets cleared.
        logger.info(f"Sign out for an invalid session: {e.message}")
