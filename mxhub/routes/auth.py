from fastapi import APIRouter, Depends, Response
from supabase import Client

from ..core.config import Config
from ..schemas import Credentials
from ..services import auth_service
from ..services.auth_service import AuthenticatedUser
from .deps import get_access_token, get_admin_client, get_auth_client, get_current_user


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/sign-up", status_code=201)
def sign_up(body: Credentials, supabase: Client = Depends(get_auth_client)):
    return auth_service.sign_up(supabase, body.email, body.password)


@router.post("/sign-in")
def sign_in(body: Credentials, response: Response, supabase: Client = Depends(get_auth_client)):
    """Exchange credentials for a session.

    The access token is also set as an httponly cookie for browser clients.
    """
    session = auth_service.sign_in(supabase, body.email, body.password)
    response.set_cookie(
        Config.SESSION_COOKIE_NAME,
        session["access_token"],
        max_age=session["expires_in"],
        httponly=True,
        secure=not Config.is_development(),
        samesite="lax",
    )
    return session


@router.post("/sign-out", status_code=204)
def sign_out(
    access_token: str = Depends(get_access_token),
    supabase: Client = Depends(get_admin_client),
) -> Response:
    auth_service.sign_out(supabase, access_token)
    response = Response(status_code=204)
    response.delete_cookie(Config.SESSION_COOKIE_NAME)
    return response


@router.get("/me")
def me(user: AuthenticatedUser = Depends(get_current_user)):
    return {"id": user.id, "email": user.email}
