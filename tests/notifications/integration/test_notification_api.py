"""Integration tests for Notifications API endpoints."""

from datetime import UTC, datetime, timedelta

from fastapi.testclient import TestClient
from notifications.notification.notification import Notification
from notifications.preference.preference import NotificationPreference, find_preference
from protean import current_domain

CLIENT_ID = "65f1a0c2b3d4e5f60718293b"
OTHER_ID = "65f1a0c2b3d4e5f6071829ff"
HEADERS = {"X-User-Id": CLIENT_ID}


def _get_test_client():
    """Build a minimal FastAPI test client with notifications routes."""
    from fastapi import FastAPI
    from notifications.api.routes import router

    app = FastAPI()
    app.include_router(router)
    return TestClient(app)


def _create_notification(recipient_id=CLIENT_ID, **overrides):
    defaults = {
        "recipient_id": recipient_id,
        "notification_type": "booking_reminder",
        "title": "notifications:booking_reminder.title",
        "message": "notifications:booking_reminder.message",
        "data": {"bookingId": "b-1"},
        "references": {"bookingId": "b-1"},
    }
    defaults.update(overrides)
    n = Notification.create(**defaults)
    current_domain.repository_for(Notification).add(n)
    return str(n.id)


def _get(nid):
    return current_domain.repository_for(Notification).get(nid)


# ---------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------
class TestCaller:
    def test_missing_header_is_unauthorized(self):
        client = _get_test_client()
        assert client.get("/notifications").status_code == 401
        assert client.post("/notifications/read", json={}).status_code == 401

    def test_purge_needs_no_caller(self):
        client = _get_test_client()
        assert client.post("/notifications/maintenance/purge-trash", json={}).status_code == 200


# ---------------------------------------------------------------
# Inbox
# ---------------------------------------------------------------
class TestListAPI:
    def test_lists_own_active_notifications(self):
        nid = _create_notification()
        _create_notification(recipient_id=OTHER_ID)
        client = _get_test_client()

        resp = client.get("/notifications", headers=HEADERS)

        assert resp.status_code == 200
        body = resp.json()
        assert body["total"] == 1
        assert body["unread_count"] == 1
        assert body["page"] == 1
        (item,) = body["notifications"]
        assert item["notification_id"] == nid
        assert item["booking_id"] == "b-1"
        assert item["data"] == {"bookingId": "b-1"}
        assert item["is_read"] is False

    def test_filters_by_status(self):
        nid = _create_notification()
        _get_test_client().put(f"/notifications/{nid}/status", json={"status": "archived"}, headers=HEADERS)

        client = _get_test_client()
        assert client.get("/notifications", headers=HEADERS).json()["total"] == 0
        assert client.get("/notifications", params={"status": "archived"}, headers=HEADERS).json()["total"] == 1

    def test_deleted_status_rejected(self):
        resp = _get_test_client().get("/notifications", params={"status": "deleted"}, headers=HEADERS)
        assert resp.status_code == 400

    def test_limit_too_large(self):
        resp = _get_test_client().get("/notifications", params={"limit": 500}, headers=HEADERS)
        assert resp.status_code == 400


# ---------------------------------------------------------------
# Read state
# ---------------------------------------------------------------
class TestReadAPI:
    def test_mark_one_read(self):
        nid = _create_notification()
        resp = _get_test_client().put(f"/notifications/{nid}/read", headers=HEADERS)

        assert resp.status_code == 200
        assert resp.json()["is_read"] is True
        assert resp.json()["read_at"] is not None
        assert _get(nid).is_read is True

    def test_foreign_notification_is_not_found(self):
        nid = _create_notification(recipient_id=OTHER_ID)
        resp = _get_test_client().put(f"/notifications/{nid}/read", headers=HEADERS)
        assert resp.status_code == 404
        assert _get(nid).is_read is False

    def test_unknown_notification(self):
        resp = _get_test_client().put("/notifications/nope/read", headers=HEADERS)
        assert resp.status_code == 404

    def test_batch_read(self):
        ids = [_create_notification() for _ in range(2)]
        resp = _get_test_client().post("/notifications/read", json={"notification_ids": ids[:1]}, headers=HEADERS)

        assert resp.json()["modified"] == 1
        assert _get(ids[1]).is_read is False

    def test_read_all(self):
        for _ in range(3):
            _create_notification()
        resp = _get_test_client().post("/notifications/read", json={}, headers=HEADERS)
        assert resp.status_code == 200
        assert resp.json()["modified"] == 3

    def test_read_all_with_explicit_null_ids(self):
        for _ in range(2):
            _create_notification()
        client = _get_test_client()
        resp = client.post("/notifications/read", json={"notification_ids": None}, headers=HEADERS)
        assert resp.status_code == 200
        assert resp.json()["modified"] == 2
        assert client.post("/notifications/read", json={}, headers=HEADERS).json()["modified"] == 0


# ---------------------------------------------------------------
# Status
# ---------------------------------------------------------------
class TestStatusAPI:
    def test_trash_one(self):
        nid = _create_notification()
        resp = _get_test_client().put(f"/notifications/{nid}/status", json={"status": "trash"}, headers=HEADERS)

        assert resp.status_code == 200
        assert resp.json()["status"] == "trash"

    def test_invalid_status(self):
        nid = _create_notification()
        resp = _get_test_client().put(f"/notifications/{nid}/status", json={"status": "deleted"}, headers=HEADERS)
        assert resp.status_code == 400

    def test_invalid_transition(self):
        nid = _create_notification()
        client = _get_test_client()
        client.put(f"/notifications/{nid}/status", json={"status": "trash"}, headers=HEADERS)
        resp = client.put(f"/notifications/{nid}/status", json={"status": "archived"}, headers=HEADERS)
        assert resp.status_code == 400

    def test_batch_status(self):
        ids = [_create_notification() for _ in range(2)]
        resp = _get_test_client().put(
            "/notifications/status",
            json={"notification_ids": ids, "status": "archived"},
            headers=HEADERS,
        )
        assert resp.json()["modified"] == 2

    def test_actioned(self):
        nid = _create_notification()
        resp = _get_test_client().put(f"/notifications/{nid}/actioned", headers=HEADERS)
        assert resp.status_code == 200
        assert resp.json()["status"] == "actioned"


# ---------------------------------------------------------------
# Trash
# ---------------------------------------------------------------
class TestTrashAPI:
    def test_empty_trash(self):
        nid = _create_notification()
        client = _get_test_client()
        client.put(f"/notifications/{nid}/status", json={"status": "trash"}, headers=HEADERS)

        resp = client.delete("/notifications/trash", headers=HEADERS)

        assert resp.json()["modified"] == 1
        assert _get(nid).status == "deleted"
        assert client.get("/notifications", params={"status": "trash"}, headers=HEADERS).json()["total"] == 0

    def test_purge_expired(self):
        n = Notification.create(
            recipient_id=CLIENT_ID,
            notification_type="booking_reminder",
            title="notifications:booking_reminder.title",
            message="notifications:booking_reminder.message",
        )
        n.move_to_trash(trashed_at=datetime.now(UTC) - timedelta(days=31))
        current_domain.repository_for(Notification).add(n)

        resp = _get_test_client().post("/notifications/maintenance/purge-trash", json={})

        assert resp.json()["purged"] == 1
        assert _get(str(n.id)).status == "deleted"

    def test_purge_as_of(self):
        n = Notification.create(
            recipient_id=CLIENT_ID,
            notification_type="booking_reminder",
            title="notifications:booking_reminder.title",
            message="notifications:booking_reminder.message",
        )
        n.move_to_trash()
        current_domain.repository_for(Notification).add(n)

        as_of = (datetime.now(UTC) + timedelta(days=31)).isoformat()
        resp = _get_test_client().post("/notifications/maintenance/purge-trash", json={"as_of": as_of})
        assert resp.json()["purged"] == 1


# ---------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------
class TestPreferencesAPI:
    def test_defaults_when_none_saved(self):
        resp = _get_test_client().get("/notifications/preferences", headers=HEADERS)

        assert resp.status_code == 200
        data = resp.json()
        assert data["user_id"] == CLIENT_ID
        assert data["email_enabled"] is True
        assert data["email_categories"] == {}

    def test_returns_saved_preferences(self):
        pref = NotificationPreference.create_default(user_id=CLIENT_ID, language="en")
        current_domain.repository_for(NotificationPreference).add(pref)

        data = _get_test_client().get("/notifications/preferences", headers=HEADERS).json()
        assert data["language"] == "en"

    def test_update(self):
        resp = _get_test_client().put(
            "/notifications/preferences",
            json={"email_enabled": False, "email_categories": {"payment": False}, "language": "it"},
            headers=HEADERS,
        )

        assert resp.status_code == 200
        data = resp.json()
        assert data["email_enabled"] is False
        assert data["email_categories"] == {"payment": False}
        assert data["language"] == "it"
        assert find_preference(CLIENT_ID).language == "it"

    def test_master_toggle_only(self):
        resp = _get_test_client().put("/notifications/preferences", json={"email_enabled": False}, headers=HEADERS)

        assert resp.status_code == 200
        assert resp.json()["email_enabled"] is False
        assert find_preference(CLIENT_ID).email_enabled is False

    def test_nothing_to_update(self):
        resp = _get_test_client().put("/notifications/preferences", json={}, headers=HEADERS)
        assert resp.status_code == 400

    def test_unknown_category(self):
        resp = _get_test_client().put(
            "/notifications/preferences",
            json={"email_categories": {"gossip": False}},
            headers=HEADERS,
        )
        assert resp.status_code == 400

    def test_unsupported_language(self):
        resp = _get_test_client().put("/notifications/preferences", json={"language": "xx"}, headers=HEADERS)
        assert resp.status_code == 400
