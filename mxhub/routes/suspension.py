from fastapi import APIRouter, Depends, Response
from supabase import Client

from ..core.validation import validate_identifier
from ..schemas import SuspensionSettingIn
from ..services import suspension_service
from ..services.auth_service import AuthenticatedUser
from .deps import get_current_user, get_db


router = APIRouter(prefix="/suspension", tags=["suspension"])


@router.get("")
def list_settings(user: AuthenticatedUser = Depends(get_current_user), supabase: Client = Depends(get_db)):
    return suspension_service.list_settings(supabase, user.id)


@router.post("", status_code=201)
def create_setting(
    body: SuspensionSettingIn,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
):
    return suspension_service.create_setting(supabase, user.id, body.model_dump())


@router.put("/{setting_id}")
def update_setting(
    setting_id: str,
    body: SuspensionSettingIn,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
):
    validate_identifier(setting_id, "setting_id")
    return suspension_service.update_setting(supabase, user.id, setting_id, body.model_dump())


@router.delete("/{setting_id}", status_code=204)
def delete_setting(
    setting_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
) -> Response:
    validate_identifier(setting_id, "setting_id")
    suspension_service.delete_setting(supabase, user.id, setting_id)
    return Response(status_code=204)
