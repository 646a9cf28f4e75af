from supabase import Client

from .supabase_service import execute, first_or_404


SETTINGS = "suspension_settings"


def list_settings(supabase: Client, user_id: str) -> list[dict]:
    return execute(
        supabase.table(SETTINGS).select("*").eq("user_id", user_id).order("created_at", desc=True),
        "fetch suspension settings",
    )


def create_setting(supabase: Client, user_id: str, values: dict) -> dict:
    rows = execute(
        supabase.table(SETTINGS).insert({**values, "user_id": user_id}),
        "save suspension settings",
    )
    return first_or_404(rows, "Suspension settings not saved")


def update_setting(supabase: Client, user_id: str, setting_id: str, values: dict) -> dict:
    rows = execute(
        supabase.table(SETTINGS).update(values).eq("id", setting_id).eq("user_id", user_id),
        f"update suspension settings {setting_id}",
    )
    return first_or_404(rows, "Suspension settings not found")


def delete_setting(supabase: Client, user_id: str, setting_id: str) -> None:
    rows = execute(
        supabase.table(SETTINGS).delete().eq("id", setting_id).eq("user_id", user_id),
        f"delete suspension settings {setting_id}",
    )
    first_or_404(rows, "Suspension settings not found")
