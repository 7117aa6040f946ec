"""
Progress Service - SQLAlchemy ORM Implementation

Completion records (user, class, completed_at). ``toggle`` marks or unmarks a
class as completed; ``summary`` derives the analytics shown on the alumna
dashboard from the loaded records.
"""

import logging
from datetime import date, tzinfo
from enum import Enum
from typing import List, Optional, Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pilatesflow.services.base import BaseService
from pilatesflow.services import progress_analytics
from pilatesflow.models.orm_models import ClassProgress
from pilatesflow.models.schemas import ProgressRecord, ProgressSummary, ClassRecord
from pilatesflow.utils import now_utc_naive

logger = logging.getLogger(__name__)


class ProgressToggleResult(str, Enum):
    COMPLETED = "completed"
    REMOVED = "removed"
    ERROR = "error"


class ProgressService(BaseService):
    """Service for class completion records."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.items: List[ProgressRecord] = []

    def fetch_for_user(self, user_email: str) -> List[ProgressRecord]:
        """Load the user's completions, newest first, replacing the cache."""
        self.error = None
        try:
            stmt = (
                select(ClassProgress)
                .where(ClassProgress.user_email == user_email)
                .order_by(ClassProgress.completed_at.desc())
            )
            rows = self.db.scalars(stmt).all()
        except Exception as e:
            self._fail(f"loading progress for {user_email}", e)
            return self.items
        self.items = [ProgressRecord.model_validate(r) for r in rows]
        return self.items

    def toggle(self, class_id: str, user_email: str) -> ProgressToggleResult:
        self.error = None
        try:
            existing = self.db.scalar(
                select(ClassProgress).where(
                    ClassProgress.user_email == user_email,
                    ClassProgress.class_id == class_id,
                )
            )
            if existing:
                removed_id = existing.id
                self.db.delete(existing)
                self.db.commit()
                self.items = [p for p in self.items if p.id != removed_id]
                return ProgressToggleResult.REMOVED

            record = ClassProgress(
                user_email=user_email,
                class_id=class_id,
                completed_at=now_utc_naive(),
            )
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except IntegrityError as e:
            logger.warning(f"Duplicate progress for {user_email} in class {class_id}")
            self._fail("toggling progress", e)
            return ProgressToggleResult.ERROR
        except Exception as e:
            self._fail("toggling progress", e)
            return ProgressToggleResult.ERROR

        self.items = [ProgressRecord.model_validate(record)] + self.items
        return ProgressToggleResult.COMPLETED

    def summary(
        self,
        user_email: str,
        classes: Iterable[ClassRecord],
        today: Optional[date] = None,
        month: Optional[str] = None,
        tz: Optional[tzinfo] = None,
    ) -> ProgressSummary:
        """Analytics over the user's completions.

        ``month`` (``YYYY-MM``) narrows the totals and buckets to that month;
        the streak is always computed over every completion.
        """
        items = self.fetch_for_user(user_email)
        return progress_analytics.build_summary(
            items, classes, today=today, month=month, tz=tz
        )
