import logging
from typing import Optional

from sqlalchemy.orm import Session

from pilatesflow.services.base import BaseService
from pilatesflow.models.orm_models import Profile
from pilatesflow.models.schemas import ProfileRecord
from pilatesflow.security.policy import ROLE_ALUMNA, PLAN_FREE, normalize_plan
from pilatesflow.utils import now_utc_naive

logger = logging.getLogger(__name__)


class ProfileService(BaseService):
    """Role and plan per user email."""

    def __init__(self, db: Session):
        super().__init__(db)

    def get(self, email: str) -> Optional[ProfileRecord]:
        self.error = None
        try:
            row = self.db.get(Profile, email)
        except Exception as e:
            self._fail(f"loading profile {email}", e)
            return None
        return ProfileRecord.model_validate(row) if row else None

    def get_or_create(self, email: str) -> Optional[ProfileRecord]:
        """Existing profile, or a new ``alumna`` on the ``free`` plan."""
        existing = self.get(email)
        if existing or self.error:
            return existing
        try:
            row = Profile(
                email=email,
                role=ROLE_ALUMNA,
                plan=PLAN_FREE,
                created_at=now_utc_naive(),
            )
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except Exception as e:
            self._fail(f"creating profile {email}", e)
            return None
        logger.info(f"Profile created for {email}")
        return ProfileRecord.model_validate(row)

    def update_plan(self, email: str, plan: str) -> Optional[ProfileRecord]:
        self.error = None
        try:
            row = self.db.get(Profile, email)
            if not row:
                return None
            row.plan = normalize_plan(plan)
            self.db.commit()
            self.db.refresh(row)
        except Exception as e:
            self._fail(f"updating plan for {email}", e)
            return None
        return ProfileRecord.model_validate(row)
