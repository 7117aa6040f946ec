"""
Booking Service - SQLAlchemy ORM Implementation

Reservations linking a user (by email) to a class. ``toggle`` reserves or
cancels; the capacity check and the insert run in one transaction where the
check is a conditional increment of the class's ``booked_count``, so two
concurrent reservations cannot both take the last seat. One booking per
(class, user) is guaranteed by a unique constraint.
"""

import logging
from enum import Enum
from typing import List, Dict, Optional, Iterable

from sqlalchemy import select, update, or_, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pilatesflow.services.base import BaseService
from pilatesflow.models.orm_models import Booking, StudioClass
from pilatesflow.models.schemas import BookingRecord
from pilatesflow.utils import now_utc_naive

logger = logging.getLogger(__name__)


class BookingToggleResult(str, Enum):
    RESERVED = "reserved"
    CANCELLED = "cancelled"
    FULL = "full"
    ERROR = "error"


class BookingService(BaseService):
    """Service for class bookings.

    ``bookings`` caches whichever view was loaded last: ``list_for_user`` and
    ``list_for_class`` each replace it, they are never merged.
    """

    def __init__(self, db: Session):
        super().__init__(db)
        self.bookings: List[BookingRecord] = []

    def _load(self, stmt, action: str) -> List[BookingRecord]:
        self.error = None
        try:
            rows = self.db.scalars(stmt).all()
        except Exception as e:
            self._fail(action, e)
            return self.bookings
        self.bookings = [BookingRecord.model_validate(r) for r in rows]
        return self.bookings

    def list_for_user(self, user_email: str) -> List[BookingRecord]:
        stmt = (
            select(Booking)
            .where(Booking.user_email == user_email)
            .order_by(Booking.created_at.asc())
        )
        return self._load(stmt, f"loading bookings for {user_email}")

    def list_for_class(self, class_id: str) -> List[BookingRecord]:
        stmt = (
            select(Booking)
            .where(Booking.class_id == class_id)
            .order_by(Booking.created_at.asc())
        )
        return self._load(stmt, f"loading bookings for class {class_id}")

    def count_for_classes(self, class_ids: Iterable[str]) -> Dict[str, int]:
        """Booking count per class id in one grouped query; ``{}`` on failure."""
        ids = [c for c in class_ids if c]
        if not ids:
            return {}
        try:
            stmt = (
                select(Booking.class_id, func.count(Booking.id))
                .where(Booking.class_id.in_(ids))
                .group_by(Booking.class_id)
            )
            rows = self.db.execute(stmt).all()
        except Exception as e:
            self._fail("counting bookings", e)
            return {}
        return {class_id: int(n) for class_id, n in rows}

    def count_active_for_user(self, user_email: str) -> Optional[int]:
        """Bookings the user holds on classes that still exist; None on failure."""
        self.error = None
        try:
            stmt = (
                select(func.count(Booking.id))
                .join(StudioClass, StudioClass.id == Booking.class_id)
                .where(Booking.user_email == user_email)
            )
            return int(self.db.scalar(stmt) or 0)
        except Exception as e:
            self._fail(f"counting bookings for {user_email}", e)
            return None

    def _find(self, class_id: str, user_email: str) -> Optional[BookingRecord]:
        for b in self.bookings:
            if b.class_id == class_id and b.user_email == user_email:
                return b
        # The cache may hold another view; storage has the last word
        row = self.db.scalar(
            select(Booking).where(
                Booking.class_id == class_id, Booking.user_email == user_email
            )
        )
        return BookingRecord.model_validate(row) if row else None

    def toggle(self, class_id: str, user_email: str) -> BookingToggleResult:
        """Cancel the user's booking for the class if it exists, otherwise reserve.

        The cache is only touched after the database confirms the change.
        """
        self.error = None
        try:
            existing = self._find(class_id, user_email)
        except Exception as e:
            self._fail("looking up booking", e)
            return BookingToggleResult.ERROR

        if existing:
            return self._cancel(existing)
        return self._reserve(class_id, user_email)

    def _cancel(self, booking: BookingRecord) -> BookingToggleResult:
        try:
            res = self.db.execute(
                Booking.__table__.delete().where(Booking.__table__.c.id == booking.id)
            )
            if (res.rowcount or 0) > 0:
                self.db.execute(
                    update(StudioClass)
                    .where(StudioClass.id == booking.class_id, StudioClass.booked_count > 0)
                    .values(booked_count=StudioClass.booked_count - 1)
                    .execution_options(synchronize_session=False)
                )
            self.db.commit()
        except Exception as e:
            self._fail("cancelling booking", e)
            return BookingToggleResult.ERROR

        self.bookings = [b for b in self.bookings if b.id != booking.id]
        return BookingToggleResult.CANCELLED

    def _reserve(self, class_id: str, user_email: str) -> BookingToggleResult:
        try:
            if self.db.get(StudioClass, class_id) is None:
                self.error = f"Clase {class_id} no encontrada"
                logger.error(f"Error reserving: class {class_id} not found")
                return BookingToggleResult.ERROR

            # Take a seat only while seats remain; unlimited when capacity is NULL
            seat = self.db.execute(
                update(StudioClass)
                .where(
                    StudioClass.id == class_id,
                    or_(
                        StudioClass.capacity.is_(None),
                        StudioClass.booked_count < StudioClass.capacity,
                    ),
                )
                .values(booked_count=StudioClass.booked_count + 1)
                .execution_options(synchronize_session=False)
            )
            if (seat.rowcount or 0) == 0:
                self.db.rollback()
                logger.info(f"Class {class_id} is full, booking refused for {user_email}")
                return BookingToggleResult.FULL

            booking = Booking(
                class_id=class_id,
                user_email=user_email,
                created_at=now_utc_naive(),
            )
            self.db.add(booking)
            self.db.commit()
            self.db.refresh(booking)
        except IntegrityError as e:
            logger.warning(f"Duplicate booking for {user_email} in class {class_id}")
            self._fail("creating booking", e)
            return BookingToggleResult.ERROR
        except Exception as e:
            self._fail("creating booking", e)
            return BookingToggleResult.ERROR

        self.bookings = self.bookings + [BookingRecord.model_validate(booking)]
        return BookingToggleResult.RESERVED
