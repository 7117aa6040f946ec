"""
Profile Router - role/plan of the signed-in user and the demo plan switch
"""
import logging
from typing import Dict, Any

from fastapi import APIRouter, Request, Depends, HTTPException
from fastapi.responses import JSONResponse

from pilatesflow.dependencies import get_profile_service, require_user
from pilatesflow.models.schemas import PlanUpdate, ProfileRecord
from pilatesflow.security.policy import booking_limit_for_plan, plan_label, role_label
from pilatesflow.security.session_claims import store_session
from pilatesflow.services.profile_service import ProfileService

router = APIRouter()
logger = logging.getLogger(__name__)


def profile_payload(profile: ProfileRecord) -> Dict[str, Any]:
    return {
        "email": profile.email,
        "role": profile.role,
        "role_label": role_label(profile.role),
        "plan": profile.plan,
        "plan_label": plan_label(profile.plan),
        "booking_limit": booking_limit_for_plan(profile.plan),
    }


@router.get("/api/profile")
async def api_profile(
    claims: Dict[str, Any] = Depends(require_user),
    svc: ProfileService = Depends(get_profile_service),
):
    profile = svc.get_or_create(claims["email"])
    if not profile:
        return JSONResponse({"error": svc.error or "No se pudo cargar el perfil"}, status_code=500)
    return profile_payload(profile)


@router.put("/api/profile/plan")
async def api_profile_plan(
    body: PlanUpdate,
    request: Request,
    claims: Dict[str, Any] = Depends(require_user),
    svc: ProfileService = Depends(get_profile_service),
):
    """Switch between the free and activa plans (no payment involved)."""
    profile = svc.update_plan(claims["email"], body.plan)
    if not profile:
        if svc.error:
            return JSONResponse({"error": svc.error}, status_code=500)
        raise HTTPException(status_code=404, detail="Perfil no encontrado")
    store_session(request, profile.email, profile.role, profile.plan)
    logger.info(f"Plan for {profile.email} changed to {profile.plan}")
    return profile_payload(profile)
