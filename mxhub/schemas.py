"""Request and response bodies for the MX Hub API."""

from datetime import date as Date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value.strip()


# Auth

class Credentials(StrictModel):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=6, max_length=128)


# Checklists

RIDING_CHECKLIST_ITEMS = (
    "chain_tension",
    "chain_lube",
    "tire_type",
    "tire_pressure",
    "riding_gear",
    "tools",
    "food",
    "water",
    "fluids",
    "fork_pressure",
    "axle_nuts",
    "linkage_nuts",
    "sprocket_bolts",
)

MOTO_CHECKLIST_ITEMS = (
    "fluids",
    "fork_pressure",
    "chain_lube",
    "chain_tension",
    "tire_pressure",
    "axle_nuts",
    "linkage_nuts",
    "sprocket_bolts",
)


class ChecklistCreate(StrictModel):
    date: Date


class ChecklistUpdate(StrictModel):
    chain_tension: Optional[bool] = None
    chain_lube: Optional[bool] = None
    tire_type: Optional[bool] = None
    tire_pressure: Optional[bool] = None
    riding_gear: Optional[bool] = None
    tools: Optional[bool] = None
    food: Optional[bool] = None
    water: Optional[bool] = None
    fluids: Optional[bool] = None
    fork_pressure: Optional[bool] = None
    axle_nuts: Optional[bool] = None
    linkage_nuts: Optional[bool] = None
    sprocket_bolts: Optional[bool] = None


class MotoUpdate(StrictModel):
    fluids: Optional[bool] = None
    fork_pressure: Optional[bool] = None
    chain_lube: Optional[bool] = None
    chain_tension: Optional[bool] = None
    tire_pressure: Optional[bool] = None
    axle_nuts: Optional[bool] = None
    linkage_nuts: Optional[bool] = None
    sprocket_bolts: Optional[bool] = None


# Lap times

class LapIn(StrictModel):
    number: int = Field(ge=1)
    time: int = Field(ge=0)
    split_time: int = Field(ge=0)


class LapSessionCreate(StrictModel):
    track_id: str
    total_time: int = Field(ge=0)
    laps: List[LapIn] = Field(default_factory=list)
    date: Optional[Date] = None

    @model_validator(mode="after")
    def check_splits(self) -> "LapSessionCreate":
        running_total = 0
        for index, lap in enumerate(self.laps, start=1):
            if lap.number != index:
                raise ValueError(f"laps must be numbered consecutively from 1 (got {lap.number} at position {index})")
            running_total += lap.time
            if lap.split_time != running_total:
                raise ValueError(f"lap {lap.number} split_time must equal the sum of lap times ({running_total})")
        if self.total_time < running_total:
            raise ValueError("total_time must not be shorter than the last split")
        return self


class LapTrackCreate(StrictModel):
    name: str = Field(max_length=120)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return _not_blank(value)


class TimerStart(StrictModel):
    track_id: str


# Tracks

class TrackCreate(StrictModel):
    name: str = Field(max_length=120)
    description: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return _not_blank(value)


# Workouts

ExerciseType = Literal["cardio", "strength"]


class WorkoutCreate(StrictModel):
    title: str = Field(max_length=200)
    date: Optional[Date] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str) -> str:
        return _not_blank(value)


class ExerciseCreate(StrictModel):
    name: str = Field(max_length=200)
    type: ExerciseType
    reps: Optional[int] = Field(default=None, ge=0)
    weight: Optional[float] = Field(default=None, ge=0)
    sets: Optional[int] = Field(default=None, ge=0)
    duration: Optional[int] = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return _not_blank(value)

    @model_validator(mode="after")
    def check_strength_fields(self) -> "ExerciseCreate":
        if self.type == "strength" and (self.reps is None or self.weight is None):
            raise ValueError("strength exercises require reps and weight")
        return self


class ExerciseUpdate(StrictModel):
    name: str = Field(max_length=200)
    reps: Optional[int] = Field(default=None, ge=0)
    weight: Optional[float] = Field(default=None, ge=0)
    sets: Optional[int] = Field(default=None, ge=0)
    duration: Optional[int] = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return _not_blank(value)


# Suspension

class SuspensionSettingIn(StrictModel):
    fork_compression: Optional[int] = None
    fork_rebound: Optional[int] = None
    shock_high_speed_compression: Optional[int] = None
    shock_low_speed_compression: Optional[int] = None
    shock_rebound: Optional[int] = None
    sag: Optional[float] = Field(default=None, ge=0)
    notes: str = ""


# Notes

class NoteIn(StrictModel):
    content: str = Field(max_length=10000)
