from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Request

from pilatesflow.security.policy import (
    STAFF_ROLES,
    ROLE_ADMIN,
    ROLE_ALUMNA,
    normalize_role,
    normalize_plan,
)


def normalize_email(email: Any) -> Optional[str]:
    try:
        e = str(email or "").strip().lower()
    except Exception:
        return None
    return e or None


def claims_from_session(session: Dict[str, Any]) -> Dict[str, Any]:
    email = normalize_email(session.get("email"))
    role = normalize_role(session.get("role")) if email else ""
    plan = normalize_plan(session.get("plan")) if email else None

    return {
        "email": email,
        "role": role or None,
        "plan": plan,
        "authenticated": bool(email),
        "is_admin": role == ROLE_ADMIN,
        "is_staff": role in STAFF_ROLES,
        "is_alumna": role == ROLE_ALUMNA,
    }


def store_session(request: Request, email: str, role: str, plan: Optional[str]) -> None:
    request.session.clear()
    request.session["email"] = normalize_email(email)
    request.session["role"] = normalize_role(role)
    request.session["plan"] = normalize_plan(plan)
