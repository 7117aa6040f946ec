"""
Bookings Router - reservations, per-class counts and the reserve/cancel toggle
"""
import logging
from typing import Dict, Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from pilatesflow.dependencies import (
    get_booking_service,
    get_class_catalog_service,
    require_user,
    require_staff,
)
from pilatesflow.models.schemas import ClassStatus, ToggleRequest
from pilatesflow.security.policy import booking_limit_for_plan
from pilatesflow.services.booking_service import BookingService, BookingToggleResult
from pilatesflow.services.class_catalog_service import ClassCatalogService

router = APIRouter()
logger = logging.getLogger(__name__)

LIMIT_OUTCOME = "limit"


@router.get("/api/bookings/me")
async def api_my_bookings(
    claims: Dict[str, Any] = Depends(require_user),
    svc: BookingService = Depends(get_booking_service),
):
    bookings = svc.list_for_user(claims["email"])
    if svc.error:
        return JSONResponse({"error": svc.error}, status_code=500)
    return {"bookings": bookings}


@router.get("/api/bookings/counts")
async def api_booking_counts(
    class_ids: str = "",
    _=Depends(require_user),
    svc: BookingService = Depends(get_booking_service),
):
    """Bookings per class for ``class_ids`` (comma separated); missing ids count 0."""
    ids = [c.strip() for c in class_ids.split(",") if c.strip()]
    counts = svc.count_for_classes(ids)
    if svc.error:
        return JSONResponse({"error": svc.error}, status_code=500)
    return {"counts": {cid: counts.get(cid, 0) for cid in ids}}


@router.get("/api/classes/{class_id}/bookings")
async def api_class_bookings(
    class_id: str,
    _=Depends(require_staff),
    svc: BookingService = Depends(get_booking_service),
):
    bookings = svc.list_for_class(class_id)
    if svc.error:
        return JSONResponse({"error": svc.error}, status_code=500)
    return {"bookings": bookings, "count": len(bookings)}


@router.post("/api/bookings/toggle")
async def api_booking_toggle(
    body: ToggleRequest,
    claims: Dict[str, Any] = Depends(require_user),
    svc: BookingService = Depends(get_booking_service),
    catalog: ClassCatalogService = Depends(get_class_catalog_service),
):
    """Reserve or cancel the caller's seat in a class.

    A new reservation is refused with outcome ``limit`` once the caller holds
    as many bookings as the plan allows; cancelling is always possible.
    """
    email = claims["email"]
    mine = svc.list_for_user(email)
    if svc.error:
        return JSONResponse({"error": svc.error, "outcome": BookingToggleResult.ERROR.value}, status_code=500)

    has_booking = any(b.class_id == body.class_id for b in mine)
    if not has_booking:
        clase = catalog.get(body.class_id)
        if catalog.error:
            return JSONResponse({"error": catalog.error, "outcome": BookingToggleResult.ERROR.value}, status_code=500)
        if not clase or (clase.status != ClassStatus.PUBLISHED and not claims.get("is_staff")):
            raise HTTPException(status_code=404, detail="Clase no encontrada")
        # Bookings left behind by deleted classes do not use up the plan
        active = svc.count_active_for_user(email)
        if active is None:
            return JSONResponse({"error": svc.error, "outcome": BookingToggleResult.ERROR.value}, status_code=500)
        limit = booking_limit_for_plan(claims.get("plan"))
        if active >= limit:
            logger.info(f"Plan limit reached for {email}: {active}/{limit}")
            return {"outcome": LIMIT_OUTCOME, "limit": limit, "active": active}

    outcome = svc.toggle(body.class_id, email)
    if outcome == BookingToggleResult.ERROR:
        return JSONResponse({"error": svc.error, "outcome": outcome.value}, status_code=500)
    return {
        "outcome": outcome.value,
        "booked": outcome == BookingToggleResult.RESERVED,
        "active": svc.count_active_for_user(email) or 0,
    }
