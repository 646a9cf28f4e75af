import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from supabase import Client

from .lap_timer import format_time
from .supabase_service import execute, first_or_404


logger = logging.getLogger(__name__)

WORKOUTS = "workouts"
EXERCISES = "exercises"
STRENGTH_FIELDS = ("reps", "weight", "sets")


def _present_exercise(exercise: dict) -> dict:
    if exercise.get("type") == "cardio":
        return {**exercise, "duration_display": format_time(exercise.get("duration") or 0)}
    return exercise


def exercise_values(exercise_type: str, reps=None, weight=None, sets=None, duration=None) -> dict:
    """Columns for one exercise; fields belonging to the other type are nulled."""
    if exercise_type == "strength":
        return {"reps": reps, "weight": weight, "sets": sets, "duration": None}
    return {"reps": None, "weight": None, "sets": None, "duration": duration}


def group_by_date(workouts: list[dict]) -> list[dict]:
    groups: dict[str, list[dict]] = {}
    for workout in workouts:
        groups.setdefault(workout["date"], []).append(workout)
    return [{"date": day, "workouts": groups[day]} for day in sorted(groups, reverse=True)]


def list_workouts(supabase: Client, user_id: str) -> list[dict]:
    workouts = execute(
        supabase.table(WORKOUTS).select("*").eq("user_id", user_id).order("date", desc=True),
        "fetch workouts",
    )
    if not workouts:
        return []

    exercises = execute(
        supabase.table(EXERCISES)
        .select("*")
        .in_("workout_id", [w["id"] for w in workouts])
        .order("created_at"),
        "fetch exercises",
    )
    by_workout: dict[str, list[dict]] = {}
    for exercise in exercises:
        by_workout.setdefault(exercise["workout_id"], []).append(_present_exercise(exercise))

    return group_by_date([{**w, "exercises": by_workout.get(w["id"], [])} for w in workouts])


def get_workout(supabase: Client, user_id: str, workout_id: str) -> dict:
    rows = execute(
        supabase.table(WORKOUTS).select("*").eq("id", workout_id).eq("user_id", user_id),
        f"fetch workout {workout_id}",
    )
    return first_or_404(rows, "Workout not found")


def create_workout(supabase: Client, user_id: str, title: str, workout_date: Optional[date] = None) -> dict:
    rows = execute(
        supabase.table(WORKOUTS).insert({
            "title": title,
            "date": (workout_date or date.today()).isoformat(),
            "user_id": user_id,
        }),
        "create workout",
    )
    return {**first_or_404(rows, "Workout not created"), "exercises": []}


def delete_workout(supabase: Client, user_id: str, workout_id: str) -> None:
    get_workout(supabase, user_id, workout_id)

    execute(
        supabase.table(EXERCISES).delete().eq("workout_id", workout_id),
        f"delete exercises of workout {workout_id}",
    )
    rows = execute(
        supabase.table(WORKOUTS).delete().eq("id", workout_id).eq("user_id", user_id),
        f"delete workout {workout_id}",
    )
    first_or_404(rows, "Workout not found")


def add_exercise(supabase: Client, user_id: str, workout_id: str, exercise: dict) -> dict:
    get_workout(supabase, user_id, workout_id)

    exercise_type = exercise["type"]
    values = exercise_values(
        exercise_type,
        reps=exercise.get("reps"),
        weight=exercise.get("weight"),
        sets=exercise.get("sets"),
        duration=exercise.get("duration"),
    )
    rows = execute(
        supabase.table(EXERCISES).insert({
            "workout_id": workout_id,
            "user_id": user_id,
            "name": exercise["name"],
            "type": exercise_type,
            **values,
        }),
        f"add exercise to workout {workout_id}",
    )
    return _present_exercise(first_or_404(rows, "Exercise not created"))


def update_exercise(supabase: Client, user_id: str, exercise_id: str, changes: dict) -> dict:
    rows = execute(
        supabase.table(EXERCISES).select("*").eq("id", exercise_id).eq("user_id", user_id),
        f"fetch exercise {exercise_id}",
    )
    current = first_or_404(rows, "Exercise not found")

    # The type of an exercise never changes on edit.
    exercise_type = current["type"]
    if exercise_type == "strength" and (changes.get("reps") is None or changes.get("weight") is None):
        raise HTTPException(status_code=400, detail="Strength exercises require reps and weight")

    values = exercise_values(
        exercise_type,
        reps=changes.get("reps"),
        weight=changes.get("weight"),
        sets=changes.get("sets"),
        duration=changes.get("duration"),
    )
    rows = execute(
        supabase.table(EXERCISES)
        .update({"name": changes["name"], **values})
        .eq("id", exercise_id)
        .eq("user_id", user_id),
        f"update exercise {exercise_id}",
    )
    return _present_exercise(first_or_404(rows, "Exercise not found"))


def delete_exercise(supabase: Client, user_id: str, exercise_id: str) -> None:
    rows = execute(
        supabase.table(EXERCISES).delete().eq("id", exercise_id).eq("user_id", user_id),
        f"delete exercise {exercise_id}",
    )
    first_or_404(rows, "Exercise not found")
