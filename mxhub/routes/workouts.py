from fastapi import APIRouter, Depends, Response
from supabase import Client

from ..core.validation import validate_identifier
from ..schemas import ExerciseCreate, ExerciseUpdate, WorkoutCreate
from ..services import workout_service
from ..services.auth_service import AuthenticatedUser
from .deps import get_current_user, get_db


router = APIRouter(prefix="/workouts", tags=["workouts"])


@router.get("")
def list_workouts(user: AuthenticatedUser = Depends(get_current_user), supabase: Client = Depends(get_db)):
    """Workouts grouped by date, newest first."""
    return workout_service.list_workouts(supabase, user.id)


@router.post("", status_code=201)
def create_workout(
    body: WorkoutCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
):
    return workout_service.create_workout(supabase, user.id, body.title, body.date)


@router.delete("/{workout_id}", status_code=204)
def delete_workout(
    workout_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
) -> Response:
    validate_identifier(workout_id, "workout_id")
    workout_service.delete_workout(supabase, user.id, workout_id)
    return Response(status_code=204)


@router.post("/{workout_id}/exercises", status_code=201)
def add_exercise(
    workout_id: str,
    body: ExerciseCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
):
    validate_identifier(workout_id, "workout_id")
    return workout_service.add_exercise(supabase, user.id, workout_id, body.model_dump())


@router.put("/exercises/{exercise_id}")
def update_exercise(
    exercise_id: str,
    body: ExerciseUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
):
    validate_identifier(exercise_id, "exercise_id")
    return workout_service.update_exercise(supabase, user.id, exercise_id, body.model_dump())


@router.delete("/exercises/{exercise_id}", status_code=204)
def delete_exercise(
    exercise_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    supabase: Client = Depends(get_db),
) -> Response:
    validate_identifier(exercise_id, "exercise_id")
    workout_service.delete_exercise(supabase, user.id, exercise_id)
    return Response(status_code=204)
