"""
PilatesFlow API Dependencies
FastAPI dependency injection: database session, record stores and session guards
"""

import logging
from typing import Generator, Dict, Any

from fastapi import Request, HTTPException, status, Depends
from sqlalchemy.orm import Session

from pilatesflow.database.connection import SessionLocal
from pilatesflow.security.session_claims import claims_from_session
from pilatesflow.security.policy import ROLE_ALUMNA, can_manage_classes, can_delete_classes
from pilatesflow.services.class_catalog_service import ClassCatalogService
from pilatesflow.services.booking_service import BookingService
from pilatesflow.services.progress_service import ProgressService
from pilatesflow.services.profile_service import ProfileService
from pilatesflow.services.auth_service import AuthProviderClient

logger = logging.getLogger(__name__)


def get_db_session() -> Generator[Session, None, None]:
    """Session per request, closed when the response is sent."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def get_class_catalog_service(session: Session = Depends(get_db_session)) -> ClassCatalogService:
    """Get ClassCatalogService instance with current session."""
    return ClassCatalogService(session)


def get_booking_service(session: Session = Depends(get_db_session)) -> BookingService:
    """Get BookingService instance with current session."""
    return BookingService(session)


def get_progress_service(session: Session = Depends(get_db_session)) -> ProgressService:
    """Get ProgressService instance with current session."""
    return ProgressService(session)


def get_profile_service(session: Session = Depends(get_db_session)) -> ProfileService:
    """Get ProfileService instance with current session."""
    return ProfileService(session)


def get_auth_client() -> AuthProviderClient:
    return AuthProviderClient()


def get_session_claims(request: Request) -> Dict[str, Any]:
    return claims_from_session(request.session)


async def require_user(claims: Dict[str, Any] = Depends(get_session_claims)) -> Dict[str, Any]:
    """Require a session identity (any role)."""
    if not claims.get("authenticated"):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return claims


async def require_staff(claims: Dict[str, Any] = Depends(require_user)) -> Dict[str, Any]:
    """Require admin or instructor."""
    if not can_manage_classes(claims.get("role")):
        logger.warning(f"AUTH FAILED: role {claims.get('role')} is not staff")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return claims


async def require_admin(claims: Dict[str, Any] = Depends(require_user)) -> Dict[str, Any]:
    if not can_delete_classes(claims.get("role")):
        logger.warning(f"AUTH FAILED: role {claims.get('role')} is not admin")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return claims


async def require_alumna(claims: Dict[str, Any] = Depends(require_user)) -> Dict[str, Any]:
    if claims.get("role") != ROLE_ALUMNA:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return claims
