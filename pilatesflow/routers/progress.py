"""
Progress Router - completion toggle and practice summary
"""
import re
import logging
from typing import Optional, Dict, Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from pilatesflow.dependencies import (
    get_progress_service,
    get_class_catalog_service,
    require_user,
)
from pilatesflow.models.schemas import ToggleRequest
from pilatesflow.services.progress_service import ProgressService, ProgressToggleResult
from pilatesflow.services.class_catalog_service import ClassCatalogService

router = APIRouter()
logger = logging.getLogger(__name__)

_MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


@router.get("/api/progress/me")
async def api_my_progress(
    claims: Dict[str, Any] = Depends(require_user),
    svc: ProgressService = Depends(get_progress_service),
):
    items = svc.fetch_for_user(claims["email"])
    if svc.error:
        return JSONResponse({"error": svc.error}, status_code=500)
    return {"items": items}


@router.post("/api/progress/toggle")
async def api_progress_toggle(
    body: ToggleRequest,
    claims: Dict[str, Any] = Depends(require_user),
    svc: ProgressService = Depends(get_progress_service),
):
    outcome = svc.toggle(body.class_id, claims["email"])
    if outcome == ProgressToggleResult.ERROR:
        return JSONResponse({"error": svc.error, "outcome": outcome.value}, status_code=500)
    return {"outcome": outcome.value, "completed": outcome == ProgressToggleResult.COMPLETED}


@router.get("/api/progress/summary")
async def api_progress_summary(
    month: Optional[str] = None,
    claims: Dict[str, Any] = Depends(require_user),
    svc: ProgressService = Depends(get_progress_service),
    catalog: ClassCatalogService = Depends(get_class_catalog_service),
):
    if month and not _MONTH_RE.match(month):
        raise HTTPException(status_code=422, detail="Mes inválido, usa YYYY-MM")
    classes = catalog.list()
    if catalog.error:
        return JSONResponse({"error": catalog.error}, status_code=500)
    summary = svc.summary(claims["email"], classes, month=month)
    if svc.error:
        return JSONResponse({"error": svc.error}, status_code=500)
    return summary
