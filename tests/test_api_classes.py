"""
HTTP surface: class catalog
"""

import pytest


@pytest.mark.api
class TestClassesApi:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_staff_create_and_get(self, client):
        client.login("ines@example.com", role="instructor")
        resp = client.post("/api/classes", json={
            "title": "Reformer AM",
            "level": "Intermedio",
            "discipline": "Reformer",
            "capacity": 6,
            "duration_minutes": "",
            "video_url": "https://youtu.be/abc",
        })
        assert resp.status_code == 201
        body = resp.json()
        assert body["duration_minutes"] is None
        assert body["instructor_email"] == "ines@example.com"
        assert body["embed_url"] == "https://www.youtube.com/embed/abc"
        assert body["temporal_status"] == "on-demand"

        got = client.get(f"/api/classes/{body['id']}")
        assert got.status_code == 200
        assert got.json()["title"] == "Reformer AM"

    def test_create_requires_staff(self, client):
        assert client.post("/api/classes", json={"title": "X"}).status_code == 401
        client.login("ana@example.com", role="alumna")
        assert client.post("/api/classes", json={"title": "X"}).status_code == 403

    def test_create_validation(self, client):
        client.login("admin@example.com", role="admin")
        assert client.post("/api/classes", json={"title": "  "}).status_code == 422
        assert client.post("/api/classes", json={"title": "X", "level": "Experto"}).status_code == 422

    def test_non_staff_only_see_published(self, client, make_class):
        published = make_class(title="Publicada")
        draft = make_class(title="Borrador", status="draft")

        client.login("ana@example.com", role="alumna")
        ids = [c["id"] for c in client.get("/api/classes").json()["items"]]
        assert ids == [published]
        assert client.get(f"/api/classes/{draft}").status_code == 404

        client.login("ines@example.com", role="instructor")
        ids = [c["id"] for c in client.get("/api/classes").json()["items"]]
        assert ids == [draft, published]
        assert client.get(f"/api/classes/{draft}").status_code == 200

    def test_filters_and_pagination(self, client, make_class):
        for i in range(5):
            make_class(title=f"Mat {i}", level="Básico", discipline="Mat")
        make_class(title="Prenatal", level="Todos los niveles", description="Suave para embarazo")

        resp = client.get("/api/classes", params={"level": "Básico", "page_size": 2, "page": 3})
        body = resp.json()
        assert body["total"] == 5
        assert body["pages"] == 3
        assert len(body["items"]) == 1

        found = client.get("/api/classes", params={"search": "EMBARAZO"}).json()["items"]
        assert [c["title"] for c in found] == ["Prenatal"]

    def test_update_and_delete_permissions(self, client, make_class):
        cid = make_class(title="Antes", capacity=4)

        client.login("ines@example.com", role="instructor")
        resp = client.put(f"/api/classes/{cid}", json={"title": "Después"})
        assert resp.status_code == 200
        assert resp.json()["title"] == "Después"
        assert resp.json()["capacity"] == 4
        assert client.put("/api/classes/missing", json={"title": "X"}).status_code == 404
        assert client.delete(f"/api/classes/{cid}").status_code == 403

        client.login("admin@example.com", role="admin")
        assert client.delete(f"/api/classes/{cid}").json() == {"ok": True}
        assert client.delete(f"/api/classes/{cid}").status_code == 404

    def test_options(self, client):
        body = client.get("/api/classes/options").json()
        assert body["level_filter"][0] == "Todos"
        assert "Todos los niveles" in body["levels"]
        assert "Reformer" in body["disciplines"]
        assert body["temporal"] == ["upcoming", "past", "on-demand"]
