import logging
from typing import Optional

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class BaseService:
    """Common state for the record stores: the session and the last error."""

    def __init__(self, db: Session):
        self.db = db
        self.error: Optional[str] = None

    def _fail(self, action: str, e: Exception) -> None:
        """Roll back, log and keep the message for the caller."""
        logging.getLogger(type(self).__module__).error(f"Error {action}: {e}")
        try:
            self.db.rollback()
        except Exception as rb:
            logger.error(f"Rollback failed after {action}: {rb}")
        self.error = str(e)
