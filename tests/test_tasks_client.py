import pytest

from ohmytasks.normalization import is_temporary_id
from ohmytasks.tasks_client import get_tasks_client
from ohmytasks.upstream import UpstreamClient, UpstreamError, UpstreamNotConfigured

ENDPOINT = "https://tasks.example.com/api/tasks"

ROWS = [
    {"id": 1, "title": "Buy milk", "urgent": 1, "completed": 0, "email": "a@example.com"},
    {"id": 2, "title": "Pay rent", "urgent": 0, "completed": 1, "email": "a@example.com"},
]


class TestUpstreamClient:
    def test_requires_endpoint(self):
        with pytest.raises(UpstreamNotConfigured):
            UpstreamClient("")

    def test_sends_api_key_header(self, session):
        UpstreamClient(ENDPOINT, api_key="secret", session=session).get(params={"email": "a@example.com"})
        call = session.calls[0]
        assert call["url"] == ENDPOINT
        assert call["headers"]["x-api-key"] == "secret"
        assert call["params"] == {"email": "a@example.com"}

    def test_no_api_key_header_when_unset(self, session):
        UpstreamClient(ENDPOINT, session=session).get()
        assert "x-api-key" not in session.calls[0]["headers"]

    def test_http_error_carries_status_and_body(self, session):
        session.reply("GET", 500, {"error": "boom"})
        with pytest.raises(UpstreamError) as info:
            UpstreamClient(ENDPOINT, session=session).get()
        assert info.value.status_code == 500
        assert info.value.body == {"error": "boom"}

    def test_transport_error(self, session, connection_error):
        session.error = connection_error
        with pytest.raises(UpstreamError) as info:
            UpstreamClient(ENDPOINT, session=session).get()
        assert info.value.status_code is None

    def test_non_json_body_is_text(self, session):
        session.reply("GET", 200, "plain text")
        assert UpstreamClient(ENDPOINT, session=session).get() == "plain text"


class TestFetchTasks:
    def test_second_read_is_served_from_cache(self, tasks_client, session):
        session.reply("GET", 200, {"success": True, "tasks": ROWS})
        first = tasks_client.fetch_tasks("a@example.com")
        second = tasks_client.fetch_tasks("a@example.com")
        assert first.source == "network"
        assert second.source == "cache"
        assert second.tasks == first.tasks
        assert second.cached_at is not None
        assert session.count("GET") == 1

    def test_normalizes_rows(self, tasks_client, session):
        session.reply("GET", 200, {"data": {"items": ROWS}})
        tasks = tasks_client.fetch_tasks("a@example.com").tasks
        assert [t["name"] for t in tasks] == ["Buy milk", "Pay rent"]
        assert tasks[0]["isUrgent"] is True
        assert tasks[1]["completed"] is True

    def test_bypass_cache(self, tasks_client, session):
        session.reply("GET", 200, ROWS)
        tasks_client.fetch_tasks("a@example.com")
        result = tasks_client.fetch_tasks("a@example.com", use_cache=False)
        assert result.source == "network"
        assert session.count("GET") == 2

    def test_unrecognized_payload_is_empty(self, tasks_client, session):
        session.reply("GET", 200, {"success": True, "message": "nothing here"})
        assert tasks_client.fetch_tasks("a@example.com").tasks == []

    def test_errors_propagate(self, tasks_client, session):
        session.reply("GET", 503, {"error": "down"})
        with pytest.raises(UpstreamError) as info:
            tasks_client.fetch_tasks("a@example.com")
        assert info.value.status_code == 503


class TestMutations:
    def test_create_invalidates_cache(self, tasks_client, session):
        session.reply("GET", 200, ROWS)
        session.reply("POST", 200, {"success": True, "task": {"id": 3, "title": "New", "urgent": 1}})
        tasks_client.fetch_tasks("a@example.com")
        created = tasks_client.create_task("a@example.com", {"name": "New", "isUrgent": True})
        assert created["id"] == 3
        assert created["isUrgent"] is True
        assert created["email"] == "a@example.com"

        post = [c for c in session.calls if c["method"] == "POST"][0]
        assert post["json"]["title"] == "New"
        assert post["json"]["urgent"] == 1

        assert tasks_client.fetch_tasks("a@example.com").source == "network"
        assert session.count("GET") == 2

    def test_create_with_empty_reply_gets_temporary_id(self, tasks_client, session):
        session.reply("POST", 200, {"success": True})
        created = tasks_client.create_task("a@example.com", {"name": "Offline"})
        assert is_temporary_id(created["id"])
        assert created["name"] == "Offline"

    def test_create_rejected_by_upstream(self, tasks_client, session):
        session.reply("POST", 200, {"success": False, "error": "Duplicate"})
        with pytest.raises(UpstreamError, match="Duplicate"):
            tasks_client.create_task("a@example.com", {"name": "Dup"})

    def test_create_requires_email(self, tasks_client):
        with pytest.raises(ValueError):
            tasks_client.create_task("", {"name": "x"})

    def test_update(self, tasks_client, session):
        session.reply("PUT", 200, {"success": True, "updatedTask": {"id": 1, "title": "Buy oat milk"}})
        updated = tasks_client.update_task("a@example.com", 1, {"name": "Buy oat milk", "completed": True})
        assert updated["id"] == 1
        assert updated["name"] == "Buy oat milk"
        put = [c for c in session.calls if c["method"] == "PUT"][0]
        assert put["params"] == {"id": 1, "email": "a@example.com"}
        assert put["json"]["completed"] == 1

    def test_create_returns_the_upstream_record(self, tasks_client, session):
        session.reply("POST", 200, {"success": True, "task": {"id": 3, "title": "Buy milk (renamed)", "urgent": 0}})
        created = tasks_client.create_task("a@example.com", {"name": "Buy milk", "isUrgent": True})
        assert created["name"] == created["title"] == "Buy milk (renamed)"
        assert created["isUrgent"] is False
        assert created["urgent"] is False
        assert created["email"] == "a@example.com"

    def test_update_returns_the_upstream_record(self, tasks_client, session):
        session.reply("PUT", 200, {"success": True, "task": {"title": "Server name"}})
        updated = tasks_client.update_task("a@example.com", 4, {"name": "Client name"})
        assert updated["name"] == updated["title"] == "Server name"
        assert updated["id"] == 4

    def test_update_with_empty_reply_uses_submitted_fields(self, tasks_client, session):
        session.reply("PUT", 200, {"success": True})
        updated = tasks_client.update_task("a@example.com", 4, {"name": "Client name"})
        assert updated["id"] == 4
        assert updated["name"] == updated["title"] == "Client name"

    def test_update_requires_id(self, tasks_client):
        with pytest.raises(ValueError):
            tasks_client.update_task("a@example.com", "", {"completed": True})

    def test_delete_invalidates_cache(self, tasks_client, session):
        session.reply("GET", 200, ROWS)
        tasks_client.fetch_tasks("a@example.com")
        assert tasks_client.delete_task("a@example.com", 2) is True
        assert tasks_client.cache.get("a@example.com") is None

    def test_failed_delete_keeps_cache(self, tasks_client, session):
        session.reply("GET", 200, ROWS)
        session.reply("DELETE", 404, {"error": "not found"})
        tasks_client.fetch_tasks("a@example.com")
        with pytest.raises(UpstreamError) as info:
            tasks_client.delete_task("a@example.com", 99)
        assert info.value.status_code == 404
        assert tasks_client.cache.get("a@example.com") is not None


class TestTasksClientFactory:
    def test_requests_share_one_session(self, monkeypatch):
        monkeypatch.setenv("TASKS_API_ENDPOINT", ENDPOINT)
        first = get_tasks_client()
        second = get_tasks_client()
        assert first.upstream.session is second.upstream.session
        assert first.cache is second.cache
