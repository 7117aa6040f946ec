"""
Classes Router - catalog listing with filters/pagination and staff CRUD
"""
import logging
from datetime import datetime
from typing import Optional, Dict, Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from pilatesflow.dependencies import (
    get_class_catalog_service,
    get_session_claims,
    require_staff,
    require_admin,
)
from pilatesflow.models.schemas import (
    DISCIPLINES,
    LEVELS,
    ClassCreate,
    ClassUpdate,
    ClassRecord,
    ClassStatus,
    TemporalStatus,
)
from pilatesflow.services.class_catalog_service import (
    ALL_LEVELS,
    ClassCatalogService,
    filter_classes,
    paginate,
    temporal_status,
    video_embed_url,
)
from pilatesflow.security.policy import ROLE_INSTRUCTOR
from pilatesflow.utils import now_utc_naive

router = APIRouter()
logger = logging.getLogger(__name__)


def class_payload(record: ClassRecord, now: Optional[datetime] = None) -> Dict[str, Any]:
    data = record.model_dump(mode="json")
    data["temporal_status"] = temporal_status(record, now).value
    data["embed_url"] = video_embed_url(record.video_url)
    return data


@router.get("/api/classes")
async def api_classes(
    level: str = ALL_LEVELS,
    search: str = "",
    discipline: Optional[str] = None,
    status_filter: Optional[ClassStatus] = Query(default=None, alias="status"),
    temporal: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=12, ge=1, le=100),
    claims: Dict[str, Any] = Depends(get_session_claims),
    svc: ClassCatalogService = Depends(get_class_catalog_service),
):
    """List classes; drafts are only visible to staff."""
    classes = svc.list()
    if svc.error:
        return JSONResponse({"error": svc.error}, status_code=500)

    wanted_status = status_filter.value if status_filter else None
    if not claims.get("is_staff"):
        wanted_status = ClassStatus.PUBLISHED.value

    now = now_utc_naive()
    filtered = filter_classes(
        classes,
        level=level,
        search=search,
        discipline=discipline,
        status=wanted_status,
        temporal=temporal,
        now=now,
    )
    result = paginate(filtered, page=page, page_size=page_size)
    result["items"] = [class_payload(c, now) for c in result["items"]]
    return result


@router.get("/api/classes/options")
async def api_class_options():
    """Values offered by the class form and the catalog filters."""
    return {
        "levels": list(LEVELS),
        "level_filter": [ALL_LEVELS] + list(LEVELS),
        "disciplines": list(DISCIPLINES),
        "statuses": [s.value for s in ClassStatus],
        "temporal": [t.value for t in TemporalStatus],
    }


@router.get("/api/classes/{class_id}")
async def api_class_get(
    class_id: str,
    claims: Dict[str, Any] = Depends(get_session_claims),
    svc: ClassCatalogService = Depends(get_class_catalog_service),
):
    clase = svc.get(class_id)
    if svc.error:
        return JSONResponse({"error": svc.error}, status_code=500)
    if not clase or (clase.status != ClassStatus.PUBLISHED and not claims.get("is_staff")):
        raise HTTPException(status_code=404, detail="Clase no encontrada")
    return class_payload(clase)


@router.post("/api/classes", status_code=status.HTTP_201_CREATED)
async def api_class_create(
    payload: ClassCreate,
    claims: Dict[str, Any] = Depends(require_staff),
    svc: ClassCatalogService = Depends(get_class_catalog_service),
):
    if not payload.instructor_email and claims.get("role") == ROLE_INSTRUCTOR:
        payload.instructor_email = claims.get("email")
    created = svc.create(payload)
    if not created:
        return JSONResponse({"error": svc.error or "No se pudo crear la clase"}, status_code=500)
    logger.info(f"Class {created.id} created by {claims.get('email')}")
    return class_payload(created)


@router.put("/api/classes/{class_id}")
async def api_class_update(
    class_id: str,
    patch: ClassUpdate,
    _=Depends(require_staff),
    svc: ClassCatalogService = Depends(get_class_catalog_service),
):
    updated = svc.update(class_id, patch)
    if updated:
        return class_payload(updated)
    if svc.error:
        return JSONResponse({"error": svc.error}, status_code=500)
    raise HTTPException(status_code=404, detail="Clase no encontrada")


@router.delete("/api/classes/{class_id}")
async def api_class_delete(
    class_id: str,
    claims: Dict[str, Any] = Depends(require_admin),
    svc: ClassCatalogService = Depends(get_class_catalog_service),
):
    if svc.delete(class_id):
        logger.info(f"Class {class_id} deleted by {claims.get('email')}")
        return {"ok": True}
    if svc.error:
        return JSONResponse({"error": svc.error}, status_code=500)
    raise HTTPException(status_code=404, detail="Clase no encontrada")
