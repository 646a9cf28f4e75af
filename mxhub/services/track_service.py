import logging
from datetime import datetime, timezone
from typing import Optional

from supabase import Client

from ..core.validation import slugify, validate_coordinates
from .supabase_service import execute, first_or_404


logger = logging.getLogger(__name__)

TRACKS = "tracks"
FAVORITES = "user_favorites"
SEARCH_LIMIT = 10
ACTIVE_STATUS = 1
DUPLICATE_TRACK = "A track with this name already exists. Please choose a different name."


def get_track(supabase: Client, track_id: str) -> dict:
    rows = execute(supabase.table(TRACKS).select("*").eq("id", track_id), f"fetch track {track_id}")
    return first_or_404(rows, "Track not found")


def get_tracks(supabase: Client, track_ids: list) -> list[dict]:
    if not track_ids:
        return []
    return execute(
        supabase.table(TRACKS).select("*").in_("id", list(track_ids)).order("name"),
        "fetch tracks",
    )


def favorite_track_ids(supabase: Client, user_id: str) -> set:
    rows = execute(
        supabase.table(FAVORITES).select("track_id").eq("user_id", user_id),
        "fetch favorites",
    )
    return {row["track_id"] for row in rows}


def list_favorites(supabase: Client, user_id: str) -> list[dict]:
    tracks = get_tracks(supabase, sorted(favorite_track_ids(supabase, user_id)))
    return [{**track, "is_favorite": True} for track in tracks]


def search_tracks(supabase: Client, user_id: str, query: str) -> list[dict]:
    query = query.strip()
    if not query:
        return []

    tracks = execute(
        supabase.table(TRACKS).select("*").ilike("name", f"%{query}%").limit(SEARCH_LIMIT),
        "search tracks",
    )
    favorites = favorite_track_ids(supabase, user_id)
    return [{**track, "is_favorite": track["id"] in favorites} for track in tracks]


def add_favorite(supabase: Client, user_id: str, track_id: str) -> None:
    execute(
        supabase.table(FAVORITES).insert({"user_id": user_id, "track_id": track_id}),
        f"add track {track_id} to favorites",
        conflict_detail="Track is already a favorite",
    )


def toggle_favorite(supabase: Client, user_id: str, track_id: str) -> dict:
    get_track(supabase, track_id)

    if track_id in favorite_track_ids(supabase, user_id):
        execute(
            supabase.table(FAVORITES).delete().eq("user_id", user_id).eq("track_id", track_id),
            f"remove track {track_id} from favorites",
        )
        return {"track_id": track_id, "is_favorite": False}

    add_favorite(supabase, user_id, track_id)
    return {"track_id": track_id, "is_favorite": True}


def create_track(
    supabase: Client,
    user_id: str,
    name: str,
    description: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    *,
    conflict_detail: str = DUPLICATE_TRACK,
) -> dict:
    """Insert a track and add it to the creator's favorites."""
    validate_coordinates(latitude, longitude)

    now = datetime.now(timezone.utc).isoformat()
    rows = execute(
        supabase.table(TRACKS).insert({
            "name": name,
            "description": description,
            "latitude": latitude,
            "longitude": longitude,
            "slug": slugify(name),
            "status": ACTIVE_STATUS,
            "created_at": now,
            "updated_at": now,
        }),
        f"add track {name!r}",
        conflict_detail=conflict_detail,
    )
    track = first_or_404(rows, "Track not created")

    add_favorite(supabase, user_id, track["id"])
    logger.info(f"Added track {track['id']} ({track['slug']})")
    return {**track, "is_favorite": True}
