"""
Progress store: completion toggle, ordering and summary
"""

from datetime import date, datetime, timezone

import pytest

from pilatesflow.models.orm_models import ClassProgress
from pilatesflow.services.class_catalog_service import ClassCatalogService
from pilatesflow.services.progress_service import ProgressService, ProgressToggleResult


@pytest.mark.integration
class TestProgressService:
    def test_mark_then_unmark_leaves_nothing(self, db_session, make_class):
        cid = make_class()
        svc = ProgressService(db_session)

        assert svc.toggle(cid, "ana@example.com") == ProgressToggleResult.COMPLETED
        assert len(svc.items) == 1
        assert svc.items[0].completed_at is not None

        assert svc.toggle(cid, "ana@example.com") == ProgressToggleResult.REMOVED
        assert svc.items == []
        assert db_session.query(ClassProgress).count() == 0

    def test_fetch_is_newest_first(self, db_session, make_class):
        c1, c2, c3 = make_class(), make_class(), make_class()
        db_session.add_all([
            ClassProgress(user_email="ana@example.com", class_id=c1, completed_at=datetime(2025, 3, 1, 12)),
            ClassProgress(user_email="ana@example.com", class_id=c2, completed_at=datetime(2025, 4, 1, 12)),
            ClassProgress(user_email="ana@example.com", class_id=c3, completed_at=datetime(2025, 3, 15, 12)),
            ClassProgress(user_email="eva@example.com", class_id=c1, completed_at=datetime(2025, 5, 1, 12)),
        ])
        db_session.commit()

        items = ProgressService(db_session).fetch_for_user("ana@example.com")
        assert [i.class_id for i in items] == [c2, c3, c1]

    def test_completion_prepends_to_cache(self, db_session, make_class):
        c1, c2 = make_class(), make_class()
        svc = ProgressService(db_session)
        svc.toggle(c1, "ana@example.com")
        svc.toggle(c2, "ana@example.com")
        assert [i.class_id for i in svc.items] == [c2, c1]

    def test_duplicate_insert_is_rejected_by_storage(self, db_session, make_class, monkeypatch):
        cid = make_class()
        svc = ProgressService(db_session)
        svc.toggle(cid, "ana@example.com")

        # Existence check misses the row, as a concurrent writer would
        monkeypatch.setattr(db_session, "scalar", lambda *args, **kwargs: None)
        assert svc.toggle(cid, "ana@example.com") == ProgressToggleResult.ERROR
        assert len(svc.items) == 1

    def test_storage_failure_reports_error(self, mock_database):
        svc = ProgressService(mock_database)
        assert svc.toggle("c1", "ana@example.com") == ProgressToggleResult.ERROR
        assert svc.error == "connection lost"
        assert svc.items == []

    def test_summary_with_month(self, db_session, make_class):
        short = make_class(duration_minutes=20)
        long_ = make_class(duration_minutes=45)
        db_session.add_all([
            ClassProgress(user_email="ana@example.com", class_id=short, completed_at=datetime(2025, 3, 10, 15)),
            ClassProgress(user_email="ana@example.com", class_id=long_, completed_at=datetime(2025, 4, 10, 15)),
        ])
        db_session.commit()
        classes = ClassCatalogService(db_session).list()

        svc = ProgressService(db_session)
        full = svc.summary("ana@example.com", classes, today=date(2025, 4, 10), tz=timezone.utc)
        march = svc.summary("ana@example.com", classes, today=date(2025, 4, 10), month="2025-03", tz=timezone.utc)

        assert full.total_completed == 2
        assert full.estimated_minutes == 65
        assert full.current_streak == 1
        assert [m.month for m in full.months] == ["2025-04", "2025-03"]

        assert march.total_completed == 1
        assert march.estimated_minutes == 20
        assert march.current_streak == 1
        assert [m.month for m in march.months] == ["2025-03"]
