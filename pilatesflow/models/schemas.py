"""
Studio schemas

Pydantic models at the store boundary. Incoming payloads are normalized here
(blank strings and blank numbers become ``None``, levels and statuses are
checked) and every record leaving a store is one of the read models below,
built from the ORM row with ``from_attributes``.
"""

from typing import List, Optional, Any
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


LEVELS = ("Básico", "Intermedio", "Avanzado", "Todos los niveles")

DISCIPLINES = (
    "Mat",
    "Reformer",
    "Suelo",
    "Aparatos",
    "Embarazo",
    "Postparto",
    "Estiramiento",
    "Fuerza y centro",
)


class ClassStatus(str, Enum):
    """Publish status of a class"""
    DRAFT = "draft"
    PUBLISHED = "published"


class TemporalStatus(str, Enum):
    """Status derived at read time from start time and video"""
    UPCOMING = "upcoming"
    PAST = "past"
    ON_DEMAND = "on-demand"


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class _ClassFields(BaseModel):
    discipline: Optional[str] = None
    description: Optional[str] = None
    start_at: Optional[datetime] = None
    duration_minutes: Optional[int] = Field(default=None, ge=0)
    capacity: Optional[int] = Field(default=None, ge=0)
    instructor_email: Optional[str] = None
    video_url: Optional[str] = None

    @field_validator(
        "discipline",
        "description",
        "start_at",
        "duration_minutes",
        "capacity",
        "instructor_email",
        "video_url",
        mode="before",
    )
    @classmethod
    def _normalize_blank(cls, v):
        v = _blank_to_none(v)
        if isinstance(v, str):
            return v.strip()
        return v


class ClassCreate(_ClassFields):
    title: str
    level: str = "Básico"
    status: ClassStatus = ClassStatus.PUBLISHED

    @field_validator("title")
    @classmethod
    def _title_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("El título es obligatorio")
        return v

    @field_validator("level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        v = (v or "").strip()
        if v not in LEVELS:
            raise ValueError(f"Nivel desconocido: {v}")
        return v

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, v):
        return _blank_to_none(v) or ClassStatus.PUBLISHED


class ClassUpdate(_ClassFields):
    """Partial update; only the fields present in the payload are applied."""

    title: Optional[str] = None
    level: Optional[str] = None
    status: Optional[ClassStatus] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("El título no puede quedar vacío")
        return v

    @field_validator("level")
    @classmethod
    def _known_level(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if v not in LEVELS:
            raise ValueError(f"Nivel desconocido: {v}")
        return v


class ClassRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    level: str
    discipline: Optional[str] = None
    description: Optional[str] = None
    start_at: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    capacity: Optional[int] = None
    instructor_email: Optional[str] = None
    video_url: Optional[str] = None
    status: ClassStatus = ClassStatus.PUBLISHED
    created_at: Optional[datetime] = None


class BookingRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    class_id: str
    user_email: str
    created_at: Optional[datetime] = None


class ProgressRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_email: str
    class_id: str
    completed_at: Optional[datetime] = None


class ProfileRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    email: str
    role: str
    plan: str = "free"


class ToggleRequest(BaseModel):
    class_id: str = Field(min_length=1)


class PlanUpdate(BaseModel):
    plan: str

    @field_validator("plan")
    @classmethod
    def _known_plan(cls, v: str) -> str:
        v = (v or "").strip().lower()
        if v not in ("free", "activa"):
            raise ValueError(f"Plan desconocido: {v}")
        return v


class SessionExchange(BaseModel):
    access_token: str = Field(min_length=1)


class MonthBucket(BaseModel):
    month: str
    count: int
    minutes: int


class ProgressSummary(BaseModel):
    total_completed: int
    estimated_minutes: int
    last_completed_at: Optional[datetime] = None
    current_streak: int
    months: List[MonthBucket] = []
