"""
Plan / role policy

Static lookups consulted by the routers: how many simultaneous bookings a plan
allows and which dashboard a role lands on. These are hints for the UI and the
booking flow; row-level access rules live in the database.
"""

from typing import Any, Optional


ROLE_ADMIN = "admin"
ROLE_INSTRUCTOR = "instructor"
ROLE_ALUMNA = "alumna"

STAFF_ROLES = {ROLE_ADMIN, ROLE_INSTRUCTOR}

PLAN_FREE = "free"
PLAN_ACTIVA = "activa"

PLAN_BOOKING_LIMITS = {
    PLAN_FREE: 4,
    PLAN_ACTIVA: 12,
}

_ROLE_LABELS = {
    ROLE_ADMIN: "Administrador/a",
    ROLE_INSTRUCTOR: "Instructor/a",
    ROLE_ALUMNA: "Alumna",
}

_PLAN_LABELS = {
    PLAN_FREE: "Free",
    PLAN_ACTIVA: "Activa",
}


def normalize_role(role: Any) -> str:
    return str(role or "").strip().lower()


def normalize_plan(plan: Any) -> str:
    p = str(plan or "").strip().lower()
    return p if p in PLAN_BOOKING_LIMITS else PLAN_FREE


def booking_limit_for_plan(plan: Optional[str]) -> int:
    """Max simultaneous bookings; unknown or missing plans get the free limit."""
    return PLAN_BOOKING_LIMITS[normalize_plan(plan)]


def dashboard_path_for_role(role: Optional[str]) -> str:
    r = normalize_role(role)
    if r == ROLE_ALUMNA:
        return "/dashboard/alumna"
    if r in STAFF_ROLES:
        return "/dashboard/classes"
    return "/login"


def role_label(role: Optional[str]) -> str:
    return _ROLE_LABELS.get(normalize_role(role), "")


def plan_label(plan: Optional[str]) -> str:
    return _PLAN_LABELS[normalize_plan(plan)]


def can_manage_classes(role: Optional[str]) -> bool:
    return normalize_role(role) in STAFF_ROLES


def can_delete_classes(role: Optional[str]) -> bool:
    return normalize_role(role) == ROLE_ADMIN
