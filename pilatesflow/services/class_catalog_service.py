"""
Class Catalog Service - SQLAlchemy ORM Implementation

Owns the class collection: list/create/update/delete against the database
plus a local cache of the last successful listing. Filtering, temporal status
and pagination are plain functions over the in-memory list.
"""

import re
import logging
from datetime import datetime
from typing import List, Dict, Any, Optional, Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from pilatesflow.services.base import BaseService
from pilatesflow.models.orm_models import StudioClass
from pilatesflow.models.schemas import (
    ClassCreate,
    ClassUpdate,
    ClassRecord,
    ClassStatus,
    TemporalStatus,
)
from pilatesflow.utils import now_utc_naive, as_utc_naive

logger = logging.getLogger(__name__)

ALL_LEVELS = "Todos"

_REQUIRED_FIELDS = ("title", "level", "status")

_YOUTUBE_RE = re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/)([A-Za-z0-9_-]+)")


class ClassCatalogService(BaseService):
    """Service for the class catalog."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.classes: List[ClassRecord] = []

    def list(self) -> List[ClassRecord]:
        """Fetch every class, newest first, and replace the cache.

        On failure the previous cache is kept as is and ``error`` is set.
        """
        self.error = None
        try:
            stmt = select(StudioClass).order_by(StudioClass.created_at.desc())
            rows = self.db.scalars(stmt).all()
        except Exception as e:
            self._fail("loading classes", e)
            return self.classes
        self.classes = [ClassRecord.model_validate(r) for r in rows]
        return self.classes

    def get(self, class_id: str) -> Optional[ClassRecord]:
        self.error = None
        for c in self.classes:
            if c.id == class_id:
                return c
        try:
            row = self.db.get(StudioClass, class_id)
        except Exception as e:
            self._fail(f"loading class {class_id}", e)
            return None
        return ClassRecord.model_validate(row) if row else None

    def create(self, data: ClassCreate) -> Optional[ClassRecord]:
        self.error = None
        try:
            clase = StudioClass(
                title=data.title,
                level=data.level,
                discipline=data.discipline,
                description=data.description,
                start_at=as_utc_naive(data.start_at),
                duration_minutes=data.duration_minutes,
                capacity=data.capacity,
                instructor_email=data.instructor_email,
                video_url=data.video_url,
                status=(data.status or ClassStatus.PUBLISHED).value,
                created_at=now_utc_naive(),
            )
            self.db.add(clase)
            self.db.commit()
            self.db.refresh(clase)
        except Exception as e:
            self._fail("creating class", e)
            return None
        created = ClassRecord.model_validate(clase)
        self.classes = [created] + self.classes
        return created

    def update(self, class_id: str, patch: ClassUpdate) -> Optional[ClassRecord]:
        """Apply only the fields present in ``patch``; ``None`` if missing or failed."""
        self.error = None
        changes: Dict[str, Any] = patch.model_dump(exclude_unset=True)
        try:
            clase = self.db.get(StudioClass, class_id)
            if not clase:
                return None
            for field, value in changes.items():
                if field in _REQUIRED_FIELDS and value is None:
                    continue
                if field == "status":
                    value = ClassStatus(value).value
                if field == "start_at":
                    value = as_utc_naive(value)
                setattr(clase, field, value)
            self.db.commit()
            self.db.refresh(clase)
        except Exception as e:
            self._fail(f"updating class {class_id}", e)
            return None
        updated = ClassRecord.model_validate(clase)
        self.classes = [updated if c.id == class_id else c for c in self.classes]
        return updated

    def delete(self, class_id: str) -> bool:
        """Delete a class. Its bookings and progress records are left in place."""
        self.error = None
        try:
            clase = self.db.get(StudioClass, class_id)
            if not clase:
                return False
            self.db.delete(clase)
            self.db.commit()
        except Exception as e:
            self._fail(f"deleting class {class_id}", e)
            return False
        self.classes = [c for c in self.classes if c.id != class_id]
        return True


def temporal_status(record: ClassRecord, now: Optional[datetime] = None) -> TemporalStatus:
    """upcoming / past / on-demand, computed from start time and video."""
    now = as_utc_naive(now) or now_utc_naive()
    has_video = bool(record.video_url)
    start = as_utc_naive(record.start_at)
    if start is None:
        return TemporalStatus.ON_DEMAND if has_video else TemporalStatus.UPCOMING
    if start >= now:
        return TemporalStatus.UPCOMING
    return TemporalStatus.ON_DEMAND if has_video else TemporalStatus.PAST


def filter_classes(
    classes: Iterable[ClassRecord],
    level: Optional[str] = ALL_LEVELS,
    search: Optional[str] = "",
    discipline: Optional[str] = None,
    status: Optional[str] = None,
    temporal: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[ClassRecord]:
    term = (search or "").strip().lower()
    level = level or ALL_LEVELS
    disc = (discipline or "").strip().lower()
    result = []
    for c in classes:
        if level != ALL_LEVELS and c.level != level:
            continue
        if term:
            text = f"{c.title} {c.description or ''}".lower()
            if term not in text:
                continue
        if disc and (c.discipline or "").strip().lower() != disc:
            continue
        if status and c.status.value != status:
            continue
        if temporal and temporal_status(c, now).value != temporal:
            continue
        result.append(c)
    return result


def paginate(items: List[Any], page: int = 1, page_size: int = 12) -> Dict[str, Any]:
    page_size = max(1, int(page_size))
    total = len(items)
    pages = max(1, (total + page_size - 1) // page_size)
    page = min(max(1, int(page)), pages)
    start = (page - 1) * page_size
    return {
        "items": items[start:start + page_size],
        "page": page,
        "page_size": page_size,
        "total": total,
        "pages": pages,
    }


def video_embed_url(url: Optional[str]) -> Optional[str]:
    """YouTube watch/short links become embed URLs; anything else is returned as is."""
    if not url:
        return None
    m = _YOUTUBE_RE.search(url)
    if m:
        return f"https://www.youtube.com/embed/{m.group(1)}"
    return url
