import logging
from datetime import date
from typing import Optional

from supabase import Client

from . import track_service
from .lap_timer import best_lap_number, best_lap_time, format_time
from .supabase_service import execute, first_or_404


logger = logging.getLogger(__name__)

SESSIONS = "lap_sessions"
DUPLICATE_TRACK = "A track with this name already exists"


def _present_session(session: dict) -> dict:
    laps = session.get("laps") or []
    return {
        **session,
        "laps": laps,
        "total_time_display": format_time(session.get("total_time") or 0),
        "best_lap_time": best_lap_time(laps),
        "best_lap_number": best_lap_number(laps),
    }


def fastest_lap(sessions: list[dict]) -> Optional[int]:
    times = [best_lap_time(s.get("laps") or []) for s in sessions]
    times = [t for t in times if t is not None]
    return min(times) if times else None


def lap_overview(supabase: Client, user_id: str) -> list[dict]:
    """Tracks the rider can time, each with its sessions and fastest lap."""
    sessions = execute(
        supabase.table(SESSIONS).select("*").eq("user_id", user_id).order("created_at", desc=True),
        "fetch lap sessions",
    )

    track_ids = track_service.favorite_track_ids(supabase, user_id)
    track_ids.update(s["track_id"] for s in sessions)
    tracks = track_service.get_tracks(supabase, sorted(track_ids))

    by_track: dict[str, list[dict]] = {}
    for session in sessions:
        by_track.setdefault(session["track_id"], []).append(_present_session(session))

    overview = []
    for track in sorted(tracks, key=lambda t: t["name"]):
        track_sessions = by_track.get(track["id"], [])
        overview.append({
            "id": track["id"],
            "name": track["name"],
            "sessions": track_sessions,
            "fastest_lap": fastest_lap(track_sessions),
        })
    return overview


def add_track(supabase: Client, user_id: str, name: str) -> dict:
    track = track_service.create_track(supabase, user_id, name, conflict_detail=DUPLICATE_TRACK)
    return {"id": track["id"], "name": track["name"], "sessions": [], "fastest_lap": None}


def save_session(
    supabase: Client,
    user_id: str,
    track_id: str,
    total_time: int,
    laps: list[dict],
    session_date: Optional[date] = None,
) -> dict:
    track_service.get_track(supabase, track_id)

    rows = execute(
        supabase.table(SESSIONS).insert({
            "user_id": user_id,
            "track_id": track_id,
            "date": (session_date or date.today()).isoformat(),
            "total_time": total_time,
            "laps": laps,
        }),
        f"save lap session for track {track_id}",
    )
    session = first_or_404(rows, "Session not saved")
    logger.info(f"Saved session {session['id']} with {len(laps)} laps ({format_time(total_time)})")
    return _present_session(session)


def delete_session(supabase: Client, user_id: str, session_id: str) -> None:
    rows = execute(
        supabase.table(SESSIONS).delete().eq("id", session_id).eq("user_id", user_id),
        f"delete lap session {session_id}",
    )
    first_or_404(rows, "Session not found")
