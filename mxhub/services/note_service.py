from fastapi import HTTPException
from supabase import Client

from .supabase_service import execute, first_or_404


NOTES = "notes"


def _require_content(content: str) -> str:
    if not content.strip():
        raise HTTPException(status_code=400, detail="Note content is required")
    return content


def list_notes(supabase: Client, user_id: str) -> list[dict]:
    return execute(
        supabase.table(NOTES).select("*").eq("user_id", user_id).order("created_at", desc=True),
        "fetch notes",
    )


def create_note(supabase: Client, user_id: str, content: str) -> dict:
    rows = execute(
        supabase.table(NOTES).insert({"content": _require_content(content), "user_id": user_id}),
        "create note",
    )
    return first_or_404(rows, "Note not created")


def update_note(supabase: Client, user_id: str, note_id: str, content: str) -> dict:
    rows = execute(
        supabase.table(NOTES).update({"content": _require_content(content)}).eq("id", note_id).eq("user_id", user_id),
        f"update note {note_id}",
    )
    return first_or_404(rows, "Note not found")


def delete_note(supabase: Client, user_id: str, note_id: str) -> None:
    rows = execute(
        supabase.table(NOTES).delete().eq("id", note_id).eq("user_id", user_id),
        f"delete note {note_id}",
    )
    first_or_404(rows, "Note not found")
