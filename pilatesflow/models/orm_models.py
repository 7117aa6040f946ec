import uuid
from typing import Optional
from datetime import datetime, timezone

from sqlalchemy import (
    Integer,
    String,
    Text,
    DateTime,
    Index,
    CheckConstraint,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


# --- Perfiles ---


class Profile(Base):
    __tablename__ = "profiles"

    email: Mapped[str] = mapped_column(String(320), primary_key=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, server_default="alumna")
    plan: Mapped[str] = mapped_column(String(20), nullable=False, server_default="free")
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utcnow_naive, server_default=func.current_timestamp()
    )

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'instructor', 'alumna')", name="ck_profiles_role"),
        CheckConstraint("plan IN ('free', 'activa')", name="ck_profiles_plan"),
    )


# --- Clases ---


class StudioClass(Base):
    __tablename__ = "classes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    level: Mapped[str] = mapped_column(String(50), nullable=False)
    discipline: Mapped[Optional[str]] = mapped_column(String(100))
    description: Mapped[Optional[str]] = mapped_column(Text)
    start_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    duration_minutes: Mapped[Optional[int]] = mapped_column(Integer)
    capacity: Mapped[Optional[int]] = mapped_column(Integer)
    instructor_email: Mapped[Optional[str]] = mapped_column("instructorEmail", String(320))
    video_url: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), nullable=False, server_default="published")
    # Reservas activas; sólo lo modifica BookingService con updates condicionales
    booked_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utcnow_naive, server_default=func.current_timestamp()
    )

    __table_args__ = (
        CheckConstraint("status IN ('draft', 'published')", name="ck_classes_status"),
        CheckConstraint("booked_count >= 0", name="ck_classes_booked_count_positive"),
        CheckConstraint("capacity IS NULL OR capacity >= 0", name="ck_classes_capacity_positive"),
        Index("idx_classes_created_at", "created_at"),
    )


# --- Reservas ---


class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    # Sin FK a classes: borrar una clase no borra sus reservas
    class_id: Mapped[str] = mapped_column("classId", String(36), nullable=False)
    user_email: Mapped[str] = mapped_column("userEmail", String(320), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utcnow_naive, server_default=func.current_timestamp()
    )

    __table_args__ = (
        UniqueConstraint("classId", "userEmail", name="bookings_classid_useremail_key"),
        Index("idx_bookings_class_id", "classId"),
        Index("idx_bookings_user_email", "userEmail"),
    )


# --- Progreso ---


class ClassProgress(Base):
    __tablename__ = "class_progress"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_email: Mapped[str] = mapped_column("useremail", String(320), nullable=False)
    class_id: Mapped[str] = mapped_column("classid", String(36), nullable=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, default=_utcnow_naive, server_default=func.current_timestamp()
    )

    __table_args__ = (
        UniqueConstraint("useremail", "classid", name="class_progress_useremail_classid_key"),
        Index("idx_class_progress_user_completed", "useremail", text("completed_at DESC")),
    )


__all__ = [
    "Base",
    "Profile",
    "StudioClass",
    "Booking",
    "ClassProgress",
]
