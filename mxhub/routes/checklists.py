from fastapi import APIRouter, Depends, Response
from supabase import Client

from ..core.validation import validate_identifier
from ..schemas import ChecklistCreate, ChecklistUpdate, MotoUpdate
from ..services import checklist_service
from ..services.auth_service import AuthenticatedUser
from .deps import get_current_user, get_db


router = APIRouter(prefix="/checklists", tags=["checklists"])


@router.get("")
def list_checklists(user: AuthenticatedUser = Depends(get_current_user), supabase: Client = Depends(get_db)):
    return checklist_service.list_checklists(supabase, user.id)


@router.post("", status_code=201)
def create_checklist(
    body: ChecklistCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
):
    return checklist_service.create_checklist(supabase, user.id, body.date)


@router.patch("/{checklist_id}")
def update_checklist(
    checklist_id: str,
    body: ChecklistUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
):
    validate_identifier(checklist_id, "checklist_id")
    return checklist_service.update_checklist(supabase, user.id, checklist_id, body.model_dump(exclude_none=True))


@router.delete("/{checklist_id}", status_code=204)
def delete_checklist(
    checklist_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
) -> Response:
    validate_identifier(checklist_id, "checklist_id")
    checklist_service.delete_checklist(supabase, user.id, checklist_id)
    return Response(status_code=204)


@router.post("/{checklist_id}/motos", status_code=201)
def add_moto(
    checklist_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
):
    validate_identifier(checklist_id, "checklist_id")
    return checklist_service.add_moto(supabase, user.id, checklist_id)


@router.patch("/motos/{moto_id}")
def update_moto(
    moto_id: str,
    body: MotoUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
):
    validate_identifier(moto_id, "moto_id")
    return checklist_service.update_moto(supabase, user.id, moto_id, body.model_dump(exclude_none=True))


@router.delete("/motos/{moto_id}", status_code=204)
def delete_moto(
    moto_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
) -> Response:
    validate_identifier(moto_id, "moto_id")
    checklist_service.delete_moto(supabase, user.id, moto_id)
    return Response(status_code=204)
