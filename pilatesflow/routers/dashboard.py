"""
Dashboard Router - role redirect and the alumna overview
"""
import logging
from typing import Dict, Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from pilatesflow.dependencies import (
    get_booking_service,
    get_class_catalog_service,
    get_progress_service,
    get_session_claims,
    require_alumna,
)
from pilatesflow.routers.classes import class_payload
from pilatesflow.security.policy import booking_limit_for_plan, dashboard_path_for_role, plan_label
from pilatesflow.services.booking_service import BookingService
from pilatesflow.services.class_catalog_service import ClassCatalogService
from pilatesflow.services.progress_service import ProgressService
from pilatesflow.utils import now_utc_naive

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/dashboard")
async def api_dashboard(claims: Dict[str, Any] = Depends(get_session_claims)):
    """Where the caller's role lands; ``/login`` without a session."""
    return {"redirect": dashboard_path_for_role(claims.get("role"))}


@router.get("/api/dashboard/alumna")
async def api_dashboard_alumna(
    claims: Dict[str, Any] = Depends(require_alumna),
    bookings_svc: BookingService = Depends(get_booking_service),
    catalog: ClassCatalogService = Depends(get_class_catalog_service),
    progress_svc: ProgressService = Depends(get_progress_service),
):
    email = claims["email"]
    classes = catalog.list()
    bookings = bookings_svc.list_for_user(email)
    error = catalog.error or bookings_svc.error
    if error:
        return JSONResponse({"error": error}, status_code=500)

    by_id = {c.id: c for c in classes}
    booked_ids = [b.class_id for b in bookings]
    counts = bookings_svc.count_for_classes(booked_ids)
    now = now_utc_naive()

    booked = []
    for b in bookings:
        clase = by_id.get(b.class_id)
        if not clase:
            # Booking for a deleted class
            continue
        item = class_payload(clase, now)
        item["booked_count"] = counts.get(clase.id, 0)
        item["booking_id"] = b.id
        booked.append(item)

    summary = progress_svc.summary(email, classes)
    if progress_svc.error:
        return JSONResponse({"error": progress_svc.error}, status_code=500)

    limit = booking_limit_for_plan(claims.get("plan"))
    return {
        "email": email,
        "plan": claims.get("plan"),
        "plan_label": plan_label(claims.get("plan")),
        "booking_limit": limit,
        "active_bookings": len(booked),
        "remaining_bookings": max(0, limit - len(booked)),
        "booked_classes": booked,
        "completed_class_ids": [p.class_id for p in progress_svc.items],
        "progress": summary,
    }
