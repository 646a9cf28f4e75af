import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from supabase import Client

from ..core.validation import validate_identifier
from ..schemas import LapSessionCreate, LapTrackCreate, TimerStart
from ..services import lap_service, track_service
from ..services.auth_service import AuthenticatedUser
from ..services.lap_timer import TimerRegistry, TimerStateError, timers
from .deps import get_current_user, get_db


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/lap-times", tags=["lap-times"])


def get_timers() -> TimerRegistry:
    return timers


@router.get("")
def lap_overview(user: AuthenticatedUser = Depends(get_current_user), supabase: Client = Depends(get_db)):
    return lap_service.lap_overview(supabase, user.id)


@router.post("/tracks", status_code=201)
def add_track(
    body: LapTrackCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
):
    return lap_service.add_track(supabase, user.id, body.name)


@router.post("/sessions", status_code=201)
def save_session(
    body: LapSessionCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
):
    validate_identifier(body.track_id, "track_id")
    laps = [lap.model_dump() for lap in body.laps]
    return lap_service.save_session(supabase, user.id, body.track_id, body.total_time, laps, body.date)


@router.delete("/sessions/{session_id}", status_code=204)
def delete_session(
    session_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
) -> Response:
    validate_identifier(session_id, "session_id")
    lap_service.delete_session(supabase, user.id, session_id)
    return Response(status_code=204)


# Server-side stopwatch. One timer per rider, held in process memory.

@router.get("/timer")
def timer_state(user: AuthenticatedUser = Depends(get_current_user), registry: TimerRegistry = Depends(get_timers)):
    timer = registry.get(user.id)
    if timer is None:
        return {"track_id": None, "running": False, "elapsed": 0, "elapsed_display": "00:00.00", "laps": []}
    return timer.snapshot()


@router.post("/timer/start")
def start_timer(
    body: TimerStart,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
    registry: TimerRegistry = Depends(get_timers),
):
    validate_identifier(body.track_id, "track_id")
    track_service.get_track(supabase, body.track_id)

    timer = registry.get_or_create(user.id)
    with timer.lock:
        if timer.running:
            raise HTTPException(status_code=409, detail="Timer is already running")
        if timer.track_id and timer.track_id != body.track_id and timer.elapsed() > 0:
            raise HTTPException(status_code=409, detail="Reset the timer before switching tracks")

        timer.track_id = body.track_id
        try:
            timer.start()
        except TimerStateError as e:
            raise HTTPException(status_code=409, detail=str(e))
        return timer.snapshot()


@router.post("/timer/lap")
def record_lap(user: AuthenticatedUser = Depends(get_current_user), registry: TimerRegistry = Depends(get_timers)):
    timer = registry.get(user.id)
    if timer is None:
        raise HTTPException(status_code=409, detail="Timer is not running")
    try:
        lap = timer.lap()
    except TimerStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return lap.to_dict()


@router.post("/timer/stop", status_code=201)
def stop_timer(
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
    registry: TimerRegistry = Depends(get_timers),
):
    """Stop the stopwatch, close the final lap and save the session."""
    timer = registry.get(user.id)
    if timer is None:
        raise HTTPException(status_code=409, detail="Timer is not running")
    # The lock stays held until the session is saved so a concurrent stop
    # cannot save the same laps twice.
    with timer.lock:
        try:
            total_time, laps = timer.finish()
        except TimerStateError as e:
            raise HTTPException(status_code=409, detail=str(e))

        # On failure the timer stays stopped and the next stop retries the save.
        session = lap_service.save_session(
            supabase, user.id, timer.track_id, total_time, [lap.to_dict() for lap in laps]
        )
        timer.reset()
    registry.discard(user.id)
    return session


@router.post("/timer/reset", status_code=204)
def reset_timer(user: AuthenticatedUser = Depends(get_current_user), registry: TimerRegistry = Depends(get_timers)) -> Response:
    registry.discard(user.id)
    return Response(status_code=204)
