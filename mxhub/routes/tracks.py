from fastapi import APIRouter, Depends, Query
from supabase import Client

from ..core.validation import validate_identifier
from ..schemas import TrackCreate
from ..services import geo_service, track_service
from ..services.auth_service import AuthenticatedUser
from .deps import get_current_user, get_db


router = APIRouter(prefix="/tracks", tags=["tracks"])


@router.get("/search")
def search_tracks(
    q: str = Query("", max_length=120),
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
):
    return track_service.search_tracks(supabase, user.id, q)


@router.get("/favorites")
def list_favorites(user: AuthenticatedUser = Depends(get_current_user), supabase: Client = Depends(get_db)):
    return track_service.list_favorites(supabase, user.id)


@router.get("/geocode")
def geocode(q: str = Query("", max_length=300), user: AuthenticatedUser = Depends(get_current_user)):
    """Address suggestions for the add-track form."""
    return geo_service.search_addresses(q)


@router.post("", status_code=201)
def add_track(
    body: TrackCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
):
    return track_service.create_track(
        supabase, user.id, body.name, body.description, body.latitude, body.longitude
    )


@router.post("/{track_id}/favorite")
def toggle_favorite(
    track_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
):
    validate_identifier(track_id, "track_id")
    return track_service.toggle_favorite(supabase, user.id, track_id)


@router.get("/{track_id}/address")
def track_address(
    track_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
):
    validate_identifier(track_id, "track_id")
    latitude, longitude = geo_service.require_coordinates(track_service.get_track(supabase, track_id))
    return {
        "track_id": track_id,
        "latitude": latitude,
        "longitude": longitude,
        "address": geo_service.reverse_geocode(latitude, longitude),
    }


@router.get("/{track_id}/weather")
def track_weather(
    track_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
):
    validate_identifier(track_id, "track_id")
    latitude, longitude = geo_service.require_coordinates(track_service.get_track(supabase, track_id))
    return {"track_id": track_id, **geo_service.current_weather(latitude, longitude)}
