from datetime import datetime, timedelta, timezone

from reweara.models.promotion import Banner, PromotionalPopup

API = "/api/v1"


def iso(delta: timedelta) -> str:
    return (datetime.now(timezone.utc) + delta).isoformat()


class TestPublicReads:

    def test_active_popups_prefiltered_by_flag_and_window(self, client, db):
        now = datetime.now(timezone.utc)
        db.add(PromotionalPopup(title="Live", priority=2))
        db.add(PromotionalPopup(title="Off", is_active=False))
        db.add(PromotionalPopup(title="Ended", end_date=now - timedelta(days=1)))
        db.add(PromotionalPopup(title="Upcoming", start_date=now + timedelta(days=1)))
        db.commit()

        body = client.get(f"{API}/promotional-popups/active").json()

        assert [p["title"] for p in body] == ["Live"]
        assert body[0]["show_frequency"] == "once"
        assert body[0]["target_pages"] == []

    def test_popups_ordered_by_priority(self, client, db):
        db.add(PromotionalPopup(title="Low", priority=1))
        db.add(PromotionalPopup(title="High", priority=9))
        db.commit()

        titles = [p["title"] for p in client.get(f"{API}/promotional-popups/active").json()]

        assert titles == ["High", "Low"]

    def test_active_banners(self, client, db):
        db.add(Banner(image_url="a.jpg", title="Second", sort_order=1))
        db.add(Banner(image_url="b.jpg", title="First", sort_order=5))
        db.add(Banner(image_url="c.jpg", title="Hidden", is_active=False))
        db.commit()

        titles = [b["title"] for b in client.get(f"{API}/banners").json()]

        assert titles == ["First", "Second"]


class TestAdminPopups:

    def test_crud(self, client, admin_headers):
        payload = {
            "title": "Exit offer",
            "trigger": "exit_intent",
            "show_frequency": "weekly",
            "target_pages": [" /shop ", "/shop", "*"],
            "priority": 3,
        }

        created = client.post(f"{API}/admin/promotional-popups", json=payload, headers=admin_headers)
        assert created.status_code == 201
        popup = created.json()
        assert popup["target_pages"] == ["/shop", "*"]

        updated = client.patch(
            f"{API}/admin/promotional-popups/{popup['id']}",
            json={"is_active": False},
            headers=admin_headers,
        )
        assert updated.json()["is_active"] is False
        assert client.get(f"{API}/promotional-popups/active").json() == []

        assert client.get(f"{API}/admin/promotional-popups", headers=admin_headers).status_code == 200
        assert client.delete(
            f"{API}/admin/promotional-popups/{popup['id']}", headers=admin_headers
        ).status_code == 204
        assert client.get(
            f"{API}/admin/promotional-popups/{popup['id']}", headers=admin_headers
        ).status_code == 404

    def test_rejects_unknown_trigger(self, client, admin_headers):
        response = client.post(
            f"{API}/admin/promotional-popups",
            json={"title": "Bad", "trigger": "on_scroll"},
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_rejects_inverted_window(self, client, admin_headers):
        response = client.post(
            f"{API}/admin/promotional-popups",
            json={
                "title": "Backwards",
                "start_date": iso(timedelta(days=2)),
                "end_date": iso(timedelta(days=1)),
            },
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_update_cannot_invert_window(self, client, admin_headers):
        popup = client.post(
            f"{API}/admin/promotional-popups",
            json={"title": "Window", "start_date": iso(timedelta(days=1))},
            headers=admin_headers,
        ).json()

        response = client.patch(
            f"{API}/admin/promotional-popups/{popup['id']}",
            json={"end_date": iso(timedelta(hours=1))},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_requires_admin(self, client, user_headers):
        response = client.post(
            f"{API}/admin/promotional-popups", json={"title": "x"}, headers=user_headers
        )
        assert response.status_code == 403


class TestAdminBanners:

    def test_crud(self, client, admin_headers):
        created = client.post(
            f"{API}/admin/banners",
            json={"image_url": "https://cdn/b.jpg", "title": "Swap week", "sort_order": 2},
            headers=admin_headers,
        )
        assert created.status_code == 201
        banner_id = created.json()["id"]

        assert [b["id"] for b in client.get(f"{API}/banners").json()] == [banner_id]

        updated = client.patch(
            f"{API}/admin/banners/{banner_id}", json={"sort_order": 7}, headers=admin_headers
        )
        assert updated.json()["sort_order"] == 7

        assert client.delete(f"{API}/admin/banners/{banner_id}", headers=admin_headers).status_code == 204
        assert client.get(f"{API}/banners").json() == []
