import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request
from supabase import Client

from ..core.config import Config
from ..services import auth_service
from ..services.auth_service import AuthenticatedUser
from ..services.supabase_service import get_anon_client, get_client, get_user_client


logger = logging.getLogger(__name__)


def get_auth_client() -> Client:
    Config.validate()
    return get_anon_client()


def get_admin_client() -> Client:
    Config.validate()
    return get_client()


def get_access_token(request: Request) -> str:
    header = request.headers.get("authorization", "")
    token: Optional[str] = None
    if header.lower().startswith("bearer "):
        token = header[7:].strip()
    if not token:
        token = request.cookies.get(Config.SESSION_COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return token


def get_current_user(
    access_token: str = Depends(get_access_token),
    supabase: Client = Depends(get_auth_client),
) -> AuthenticatedUser:
    return auth_service.get_user(supabase, access_token)


def get_db(user: AuthenticatedUser = Depends(get_current_user)) -> Client:
    return get_user_client(user.access_token)
