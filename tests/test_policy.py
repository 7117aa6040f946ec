import pytest

from pilatesflow.security.policy import (
    PLAN_BOOKING_LIMITS,
    booking_limit_for_plan,
    can_delete_classes,
    can_manage_classes,
    dashboard_path_for_role,
    plan_label,
    role_label,
)
from pilatesflow.security.session_claims import claims_from_session


@pytest.mark.unit
class TestPlanPolicy:
    def test_limits(self):
        assert PLAN_BOOKING_LIMITS == {"free": 4, "activa": 12}
        assert booking_limit_for_plan("activa") == 12
        assert booking_limit_for_plan(" ACTIVA ") == 12

    def test_unknown_plan_gets_free_limit(self):
        assert booking_limit_for_plan(None) == 4
        assert booking_limit_for_plan("premium") == 4

    def test_labels(self):
        assert plan_label("activa") == "Activa"
        assert plan_label(None) == "Free"
        assert role_label("instructor") == "Instructor/a"
        assert role_label("admin") == "Administrador/a"
        assert role_label("unknown") == ""


@pytest.mark.unit
class TestRolePolicy:
    @pytest.mark.parametrize(
        "role,path",
        [
            ("alumna", "/dashboard/alumna"),
            ("instructor", "/dashboard/classes"),
            ("Admin", "/dashboard/classes"),
            (None, "/login"),
            ("visitante", "/login"),
        ],
    )
    def test_dashboard_redirect(self, role, path):
        assert dashboard_path_for_role(role) == path

    def test_mutation_rights(self):
        assert can_manage_classes("instructor") and can_manage_classes("admin")
        assert not can_manage_classes("alumna")
        assert can_delete_classes("admin")
        assert not can_delete_classes("instructor")


@pytest.mark.unit
class TestSessionClaims:
    def test_claims_from_session(self):
        claims = claims_from_session({"email": " Ana@Example.com ", "role": "alumna", "plan": "activa"})
        assert claims["email"] == "ana@example.com"
        assert claims["authenticated"] is True
        assert claims["is_alumna"] is True
        assert claims["is_staff"] is False
        assert claims["plan"] == "activa"

    def test_anonymous_session(self):
        claims = claims_from_session({"role": "admin"})
        assert claims["authenticated"] is False
        assert claims["role"] is None
        assert claims["is_admin"] is False
