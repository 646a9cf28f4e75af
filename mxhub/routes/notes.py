from fastapi import APIRouter, Depends, Response
from supabase import Client

from ..core.validation import validate_identifier
from ..schemas import NoteIn
from ..services import note_service
from ..services.auth_service import AuthenticatedUser
from .deps import get_current_user, get_db


router = APIRouter(prefix="/notes", tags=["notes"])


@router.get("")
def list_notes(user: AuthenticatedUser = Depends(get_current_user), supabase: Client = Depends(get_db)):
    return note_service.list_notes(supabase, user.id)


@router.post("", status_code=201)
def create_note(body: NoteIn, user: AuthenticatedUser = Depends(get_current_user), supabase: Client = Depends(get_db)):
    return note_service.create_note(supabase, user.id, body.content)


@router.put("/{note_id}")
def update_note(
    note_id: str,
    body: NoteIn,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
):
    validate_identifier(note_id, "note_id")
    return note_service.update_note(supabase, user.id, note_id, body.content)


@router.delete("/{note_id}", status_code=204)
def delete_note(
    note_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
) -> Response:
    validate_identifier(note_id, "note_id")
    note_service.delete_note(supabase, user.id, note_id)
    return Response(status_code=204)
