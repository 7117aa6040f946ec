import logging
from typing import Dict, Any

from fastapi import APIRouter, Request, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from pilatesflow.dependencies import get_auth_client, get_profile_service, get_session_claims
from pilatesflow.models.schemas import SessionExchange
from pilatesflow.security.policy import dashboard_path_for_role
from pilatesflow.security.session_claims import store_session
from pilatesflow.services.auth_service import AuthProviderClient
from pilatesflow.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/auth/session")
async def api_auth_session_create(
    body: SessionExchange,
    request: Request,
    client: AuthProviderClient = Depends(get_auth_client),
    svc: ProfileService = Depends(get_profile_service),
):
    """Exchange an auth provider access token for a session cookie."""
    if not client.configured:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Auth provider not configured")

    email = client.resolve_email(body.access_token)
    if not email:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    profile = svc.get_or_create(email)
    if not profile:
        return JSONResponse({"error": svc.error or "No se pudo cargar el perfil"}, status_code=500)

    store_session(request, profile.email, profile.role, profile.plan)
    logger.info(f"Session started for {profile.email} ({profile.role})")
    return {
        "email": profile.email,
        "role": profile.role,
        "plan": profile.plan,
        "redirect": dashboard_path_for_role(profile.role),
    }


@router.get("/api/auth/session")
async def api_auth_session(claims: Dict[str, Any] = Depends(get_session_claims)):
    return {**claims, "redirect": dashboard_path_for_role(claims.get("role"))}


@router.post("/api/auth/logout")
async def api_auth_logout(request: Request):
    request.session.clear()
    return {"ok": True}
