import pytest
from pydantic import ValidationError

from pilatesflow.models.schemas import ClassCreate, ClassUpdate, ClassStatus, PlanUpdate, ToggleRequest


@pytest.mark.unit
class TestClassCreate:
    def test_blank_optionals_become_none(self):
        data = ClassCreate(
            title="Mat",
            discipline="  ",
            description="",
            start_at="",
            duration_minutes="",
            capacity="",
            video_url=" ",
        )
        assert data.discipline is None
        assert data.description is None
        assert data.start_at is None
        assert data.duration_minutes is None
        assert data.capacity is None
        assert data.video_url is None

    def test_defaults(self):
        data = ClassCreate(title="Mat")
        assert data.level == "Básico"
        assert data.status == ClassStatus.PUBLISHED

    def test_blank_status_defaults_to_published(self):
        assert ClassCreate(title="Mat", status="").status == ClassStatus.PUBLISHED

    @pytest.mark.parametrize("title", ["", "   "])
    def test_title_required(self, title):
        with pytest.raises(ValidationError):
            ClassCreate(title=title)

    def test_unknown_level_rejected(self):
        with pytest.raises(ValidationError):
            ClassCreate(title="Mat", level="Experto")

    def test_negative_capacity_rejected(self):
        with pytest.raises(ValidationError):
            ClassCreate(title="Mat", capacity=-1)

    def test_numeric_strings_are_parsed(self):
        assert ClassCreate(title="Mat", capacity="8").capacity == 8


@pytest.mark.unit
class TestClassUpdate:
    def test_only_sent_fields_are_set(self):
        patch = ClassUpdate(title="Nuevo")
        assert patch.model_dump(exclude_unset=True) == {"title": "Nuevo"}

    def test_blank_title_rejected(self):
        with pytest.raises(ValidationError):
            ClassUpdate(title="  ")


@pytest.mark.unit
def test_plan_update_normalizes_and_validates():
    assert PlanUpdate(plan=" Activa ").plan == "activa"
    with pytest.raises(ValidationError):
        PlanUpdate(plan="gold")


@pytest.mark.unit
def test_toggle_request_requires_class_id():
    with pytest.raises(ValidationError):
        ToggleRequest(class_id="")
