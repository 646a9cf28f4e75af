import logging
from datetime import date

from fastapi import HTTPException
from supabase import Client

from .supabase_service import execute, first_or_404


logger = logging.getLogger(__name__)

CHECKLISTS = "riding_checklists"
MOTOS = "moto_checklists"


def list_checklists(supabase: Client, user_id: str) -> list[dict]:
    checklists = execute(
        supabase.table(CHECKLISTS).select("*").eq("user_id", user_id).order("date", desc=True),
        "fetch checklists",
    )
    if not checklists:
        return []

    motos = execute(
        supabase.table(MOTOS)
        .select("*")
        .in_("riding_checklist_id", [c["id"] for c in checklists])
        .order("moto_number"),
        "fetch motos",
    )
    by_checklist: dict[str, list[dict]] = {}
    for moto in motos:
        by_checklist.setdefault(moto["riding_checklist_id"], []).append(moto)

    return [{**checklist, "motos": by_checklist.get(checklist["id"], [])} for checklist in checklists]


def get_checklist(supabase: Client, user_id: str, checklist_id: str) -> dict:
    rows = execute(
        supabase.table(CHECKLISTS).select("*").eq("id", checklist_id).eq("user_id", user_id),
        f"fetch checklist {checklist_id}",
    )
    return first_or_404(rows, "Checklist not found")


def create_checklist(supabase: Client, user_id: str, checklist_date: date) -> dict:
    date_str = checklist_date.isoformat()
    conflict = f"A checklist for {date_str} already exists."

    existing = execute(
        supabase.table(CHECKLISTS).select("id").eq("user_id", user_id).eq("date", date_str),
        "check for an existing checklist",
    )
    if existing:
        raise HTTPException(status_code=409, detail=conflict)

    rows = execute(
        supabase.table(CHECKLISTS).insert({"user_id": user_id, "date": date_str}),
        "create checklist",
        conflict_detail=conflict,
    )
    checklist = first_or_404(rows, "Checklist not created")
    logger.info(f"Created checklist {checklist['id']} for {date_str}")
    return {**checklist, "motos": []}


def update_checklist(supabase: Client, user_id: str, checklist_id: str, changes: dict) -> dict:
    if not changes:
        raise HTTPException(status_code=400, detail="No checklist items to update")

    rows = execute(
        supabase.table(CHECKLISTS).update(changes).eq("id", checklist_id).eq("user_id", user_id),
        f"update checklist {checklist_id}",
    )
    return first_or_404(rows, "Checklist not found")


def delete_checklist(supabase: Client, user_id: str, checklist_id: str) -> None:
    get_checklist(supabase, user_id, checklist_id)

    # Motos go first so none are left pointing at a missing checklist.
    execute(
        supabase.table(MOTOS).delete().eq("riding_checklist_id", checklist_id),
        f"delete motos of checklist {checklist_id}",
    )
    rows = execute(
        supabase.table(CHECKLISTS).delete().eq("id", checklist_id).eq("user_id", user_id),
        f"delete checklist {checklist_id}",
    )
    first_or_404(rows, "Checklist not found")


def add_moto(supabase: Client, user_id: str, checklist_id: str) -> dict:
    get_checklist(supabase, user_id, checklist_id)

    numbers = execute(
        supabase.table(MOTOS).select("moto_number").eq("riding_checklist_id", checklist_id),
        f"fetch motos of checklist {checklist_id}",
    )
    next_number = max((row["moto_number"] for row in numbers), default=0) + 1

    rows = execute(
        supabase.table(MOTOS).insert({
            "user_id": user_id,
            "riding_checklist_id": checklist_id,
            "moto_number": next_number,
        }),
        f"add moto to checklist {checklist_id}",
    )
    return first_or_404(rows, "Moto not created")


def update_moto(supabase: Client, user_id: str, moto_id: str, changes: dict) -> dict:
    if not changes:
        raise HTTPException(status_code=400, detail="No moto items to update")

    rows = execute(
        supabase.table(MOTOS).update(changes).eq("id", moto_id).eq("user_id", user_id),
        f"update moto {moto_id}",
    )
    return first_or_404(rows, "Moto not found")


def delete_moto(supabase: Client, user_id: str, moto_id: str) -> None:
    rows = execute(
        supabase.table(MOTOS).delete().eq("id", moto_id).eq("user_id", user_id),
        f"delete moto {moto_id}",
    )
    first_or_404(rows, "Moto not found")
