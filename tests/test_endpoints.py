"""HTTP scenarios against the full application."""

import re

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from todo_server.core.config import Settings
from todo_server.main import create_app
from todo_server.models.todos import TaskCount, ViewState


def _task_ids(html: str) -> list[str]:
    return re.findall(r'<li id="task-([\w-]+)"', html)


def _opening_tag(html: str, element_id: str) -> str:
    match = re.search(rf'<\w+ id="{element_id}"[^>]*>', html)
    assert match is not None, f"#{element_id} not rendered"
    return match.group(0)


class TestIndex:
    """Test the full page endpoint."""

    def test_empty_store_shows_empty_state(self, client, app_store):
        resp = client.get("/")

        assert resp.status_code == 200, resp.text
        assert resp.headers["content-type"].startswith("text/html")
        assert "No tasks yet" in resp.text
        assert " hidden" not in _opening_tag(resp.text, "no-tasks")
        assert app_store.counts() == TaskCount(total=0, incomplete=0)

    def test_missing_cookie_is_defaulted_and_persisted(self, client):
        resp = client.get("/")

        header = resp.headers["set-cookie"]
        assert header.startswith("View=ALL")
        assert "Max-Age=86400" in header
        assert "Path=/" in header

    def test_existing_cookie_is_not_rewritten(self, client):
        client.cookies.set("View", "ALL")

        resp = client.get("/")

        assert "set-cookie" not in resp.headers

    def test_unknown_path_is_404(self, client):
        resp = client.get("/nope")

        assert resp.status_code == 404
        assert resp.headers["content-type"].startswith("text/plain")
        assert resp.text == "Not Found"

    def test_page_uses_static_base(self, client):
        resp = client.get("/")

        assert 'href="/assets/css/app.css"' in resp.text


class TestCreateTask:
    """Test POST /todos."""

    def test_creates_incomplete_task(self, client, app_store):
        resp = client.post("/todos", data={"task": "Buy milk"})

        assert resp.status_code == 200, resp.text
        assert len(_task_ids(resp.text)) == 1
        assert 'data-completed="false"' in resp.text
        assert "Buy milk" in resp.text
        assert 'id="no-tasks" class="no-tasks" hx-swap-oob="true"' in resp.text
        assert 'id="view-toggle" class="view-toggle" hx-swap-oob="true"' in resp.text

        tasks = app_store.list_tasks(ViewState.ALL)
        assert [t.text for t in tasks] == ["Buy milk"]
        assert tasks[0].completed is False

    def test_created_task_appears_on_the_page(self, client):
        created = client.post("/todos", data={"task": "Buy milk"})
        task_id = _task_ids(created.text)[0]

        page = client.get("/")

        assert _task_ids(page.text) == [task_id]
        assert "Buy milk" in page.text

    def test_missing_field_creates_empty_task(self, client, app_store):
        resp = client.post("/todos")

        assert resp.status_code == 200, resp.text
        assert [t.text for t in app_store.list_tasks()] == [""]

    def test_sets_default_cookie_without_prior_page_load(self, client):
        resp = client.post("/todos", data={"task": "Buy milk"})

        assert resp.headers["set-cookie"].startswith("View=ALL")


class TestPatchTask:
    """Test PATCH /todos/{id}."""

    def test_completing_under_incomplete_view_drops_task_from_list(self, client, app_store):
        task = app_store.create_task("Buy milk")
        client.cookies.set("View", "INCOMPLETE")
        before = app_store.count(ViewState.INCOMPLETE)

        resp = client.patch(f"/todos/{task.id}", params={"completed": "true"})

        assert resp.status_code == 200, resp.text
        list_tag = _opening_tag(resp.text, "todo-list")
        assert 'hx-swap-oob="true"' in list_tag
        assert task.id not in _task_ids(resp.text)
        assert app_store.count(ViewState.INCOMPLETE) == before - 1

    def test_completing_under_all_view_returns_updated_item(self, client, app_store):
        task = app_store.create_task("Buy milk")
        client.get("/")

        resp = client.patch(f"/todos/{task.id}", params={"completed": "true"})

        assert _task_ids(resp.text) == [task.id]
        assert 'data-completed="true"' in resp.text
        assert app_store.get_task(task.id).completed is True

    def test_unparseable_value_means_false(self, client, app_store):
        task = app_store.create_task("Buy milk")
        app_store.set_completed(task.id, True)

        resp = client.patch(f"/todos/{task.id}", params={"completed": "maybe"})

        assert resp.status_code == 200, resp.text
        assert app_store.get_task(task.id).completed is False

    def test_missing_value_means_false(self, client, app_store):
        task = app_store.create_task("Buy milk")
        app_store.set_completed(task.id, True)

        resp = client.patch(f"/todos/{task.id}")

        assert resp.status_code == 200, resp.text
        assert app_store.get_task(task.id).completed is False

    def test_unknown_id_still_answers(self, client, app_store):
        app_store.create_task("Buy milk")

        resp = client.patch("/todos/missing", params={"completed": "true"})

        assert resp.status_code == 200, resp.text
        assert _task_ids(resp.text) == []
        assert app_store.counts() == TaskCount(total=1, incomplete=1)


class TestDeleteTask:
    """Test DELETE /todos/{id}."""

    def test_deleting_last_task_shows_empty_state(self, client, app_store):
        task = app_store.create_task("Buy milk")
        client.get("/")

        resp = client.delete(f"/todos/{task.id}")

        assert resp.status_code == 200, resp.text
        assert "No tasks yet" in resp.text
        assert " hidden" not in _opening_tag(resp.text, "no-tasks")
        assert app_store.count(ViewState.ALL) == 0

    def test_unknown_id_does_not_change_count(self, client, app_store):
        app_store.create_task("Buy milk")

        resp = client.delete("/todos/missing")

        assert resp.status_code == 200, resp.text
        assert app_store.count(ViewState.ALL) == 1


class TestShowView:
    """Test /todos/show/{filter}."""

    def _seed(self, store):
        done = store.create_task("done")
        open_task = store.create_task("open")
        store.set_completed(done.id, True)
        return done, open_task

    def test_incomplete_view_lists_one_and_sets_cookie(self, client, app_store):
        _, open_task = self._seed(app_store)

        resp = client.get("/todos/show/INCOMPLETE")

        assert resp.status_code == 200, resp.text
        assert _task_ids(resp.text) == [open_task.id]
        assert resp.headers["set-cookie"].startswith("View=INCOMPLETE")
        assert client.cookies.get("View") == "INCOMPLETE"

    def test_view_sticks_for_the_page(self, client, app_store):
        _, open_task = self._seed(app_store)
        client.get("/todos/show/INCOMPLETE")

        page = client.get("/")

        assert _task_ids(page.text) == [open_task.id]

    def test_any_method_is_accepted(self, client, app_store):
        self._seed(app_store)

        resp = client.post("/todos/show/ALL")

        assert resp.status_code == 200, resp.text
        assert len(_task_ids(resp.text)) == 2

    def test_unknown_view_is_stored_verbatim_and_lists_all(self, client, app_store):
        self._seed(app_store)

        resp = client.get("/todos/show/bogus")

        assert len(_task_ids(resp.text)) == 2
        assert resp.headers["set-cookie"].startswith("View=bogus")


class TestHealth:
    """Test health endpoints."""

    def test_health(self, client):
        resp = client.get("/health")

        assert resp.status_code == 200
        assert resp.json() == {"status": "healthy"}

    def test_ready(self, client):
        resp = client.get("/ready")

        assert resp.status_code == 200
        assert resp.json() == {"status": "ready"}

    def test_not_ready_when_database_fails(self, client, app_store, monkeypatch):
        def _fail() -> None:
            raise OperationalError("SELECT 1", {}, Exception("database is locked"))

        monkeypatch.setattr(app_store, "ping", _fail)

        resp = client.get("/ready")

        assert resp.status_code == 503
        assert resp.text == "Database unavailable"


class TestServerErrors:
    """Test conversion of failures into plain-text 500 responses."""

    def test_storage_error_mid_request(self, client, app_store, monkeypatch):
        def _fail(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(app_store, "list_tasks", _fail)

        resp = client.get("/")

        assert resp.status_code == 500
        assert resp.headers["content-type"].startswith("text/plain")
        assert "storage" in resp.text

    def test_template_error(self, database_url, tmp_path):
        templates = tmp_path / "templates"
        templates.mkdir()
        settings = Settings(_env_file=None, DATABASE_URL=database_url, TEMPLATES_DIR=str(templates))

        with TestClient(create_app(settings)) as client:
            resp = client.get("/")

        assert resp.status_code == 500
        assert resp.headers["content-type"].startswith("text/plain")
        assert "index.html" in resp.text


class TestStaticAssets:
    """Test the static-asset switch."""

    def test_assets_served_when_enabled(self, client):
        resp = client.get("/assets/css/app.css")

        assert resp.status_code == 200
        assert ".todo-app" in resp.text

    def test_assets_not_served_by_default(self, database_url):
        settings = Settings(_env_file=None, DATABASE_URL=database_url)

        with TestClient(create_app(settings)) as client:
            assert client.get("/assets/css/app.css").status_code == 404
            assert 'href="/static/css/app.css"' in client.get("/").text
