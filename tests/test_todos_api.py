import os
from datetime import datetime

from fastapi.testclient import TestClient

# Ensure we default to memory backend for tests to avoid filesystem dependencies
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from doubles import FIXED_NOW, FailingRepository, RejectingRepository, counting_ids, fixed_clock  # noqa: E402
from todo_api.main import app  # noqa: E402
from todo_api.models import new_todo  # noqa: E402
from todo_api.repositories import InMemoryRepository, get_repository  # noqa: E402
from todo_api.seed import STARTER_TITLES  # noqa: E402
from todo_api.service import get_clock, get_id_factory  # noqa: E402

client = TestClient(app)


def use_repository(repo):
    app.dependency_overrides[get_repository] = lambda: repo
    app.dependency_overrides[get_clock] = lambda: fixed_clock
    ids = counting_ids()
    app.dependency_overrides[get_id_factory] = lambda: ids
    return repo


def create(title="Test Task"):
    return client.post("/todo/CreateTodo", params={"todoTitle": title})


def assert_todo_shape(todo: dict):
    assert set(todo) == {"id", "title", "dateCreated", "dateCompleted", "isComplete"}
    assert isinstance(todo["id"], str) and todo["id"]
    assert isinstance(todo["title"], str)
    assert isinstance(todo["isComplete"], bool)
    datetime.fromisoformat(todo["dateCreated"])
    if todo["dateCompleted"] is not None:
        datetime.fromisoformat(todo["dateCompleted"])


class _ApiTest:
    def setup_method(self):
        self.repo = use_repository(InMemoryRepository())

    def teardown_method(self):
        app.dependency_overrides.clear()


class TestHealth:
    def test_health_check(self):
        res = client.get("/")
        assert res.status_code == 200
        data = res.json()
        assert data["message"] == "Healthy"
        assert data["backend"] in ("memory", "sqlite")


class TestStartup:
    def test_startup_seeds_empty_store(self, monkeypatch):
        monkeypatch.setenv("PERSISTENCE_BACKEND", "memory")
        monkeypatch.setenv("SEED_ON_STARTUP", "true")
        get_repository.cache_clear()
        try:
            with TestClient(app) as started:
                res = started.get("/todo")
                assert res.status_code == 200
                titles = sorted(t["title"] for t in res.json())
                assert titles == sorted(STARTER_TITLES)
        finally:
            get_repository.cache_clear()


class TestListTodos(_ApiTest):
    def test_empty_store_returns_empty_array(self):
        res = client.get("/todo")
        assert res.status_code == 200
        assert res.json() == []

    def test_list_count_matches_store(self):
        created = create("Only one").json()
        res = client.get("/todo")
        assert res.status_code == 200
        items = res.json()
        assert len(items) == 1
        assert items[0] == created

        create("Second")
        create("Third")
        assert len(client.get("/todo").json()) == 3


class TestCreateTodo(_ApiTest):
    def test_create_returns_201_with_generated_id(self):
        res = client.post("/todo/CreateTodo?todoTitle=Buy%20milk")
        assert res.status_code == 201
        todo = res.json()
        assert_todo_shape(todo)
        assert todo["id"] == "todo-1"
        assert todo["title"] == "Buy milk"
        assert todo["isComplete"] is False
        assert todo["dateCompleted"] is None
        assert datetime.fromisoformat(todo["dateCreated"]) == FIXED_NOW

    def test_location_header_points_at_get_by_id(self):
        res = create("Read book")
        todo_id = res.json()["id"]
        location = res.headers["location"]
        assert location.endswith(f"/todo/{todo_id}")

        res_get = client.get(location)
        assert res_get.status_code == 200
        assert res_get.json()["id"] == todo_id

    def test_missing_title_defaults_to_empty_string(self):
        res = client.post("/todo/CreateTodo")
        assert res.status_code == 201
        assert res.json()["title"] == ""

    def test_ids_are_unique(self):
        ids = {create(f"Task {i}").json()["id"] for i in range(5)}
        assert len(ids) == 5
        assert all(ids)

    def test_default_id_factory_generates_distinct_ids(self):
        app.dependency_overrides.pop(get_id_factory)
        first = create("A").json()["id"]
        second = create("B").json()["id"]
        assert first and second
        assert first != second

    def test_rejected_insert_returns_400_problem(self):
        use_repository(RejectingRepository())
        res = create("Never saved")
        assert res.status_code == 400
        body = res.json()
        assert body["title"] == "Problem saving todo to database"
        assert body["status"] == 400
        assert "location" not in res.headers

    def test_storage_failure_returns_500(self):
        use_repository(FailingRepository())
        res = create("Boom")
        assert res.status_code == 500
        assert res.json()["detail"] == "database is unavailable"


class TestGetTodo(_ApiTest):
    def test_create_then_get_round_trip(self):
        created = create("Walk the dog").json()
        res = client.get(f"/todo/{created['id']}")
        assert res.status_code == 200
        fetched = res.json()
        assert fetched["id"] == created["id"]
        assert fetched["title"] == "Walk the dog"

    def test_unknown_id_returns_404_with_empty_body(self):
        res = client.get("/todo/unknown-id")
        assert res.status_code == 404
        assert res.content == b""

    def test_storage_failure_returns_500(self):
        use_repository(FailingRepository("disk I/O error"))
        res = client.get("/todo/anything")
        assert res.status_code == 500
        body = res.json()
        assert body["title"] == "Storage failure"
        assert body["type"] == "StorageError"
        assert body["detail"] == "disk I/O error"


class TestDeleteTodo(_ApiTest):
    def test_delete_twice_returns_200_then_404(self):
        todo_id = create("ToDelete").json()["id"]

        res_del = client.delete(f"/todo/{todo_id}")
        assert res_del.status_code == 200
        assert res_del.content == b""

        assert client.get(f"/todo/{todo_id}").status_code == 404

        res_again = client.delete(f"/todo/{todo_id}")
        assert res_again.status_code == 404
        assert res_again.content == b""

    def test_delete_unknown_id_returns_404(self):
        assert client.delete("/todo/does-not-exist").status_code == 404

    def test_delete_leaves_other_records(self):
        keep = create("Keep").json()
        drop = create("Drop").json()
        client.delete(f"/todo/{drop['id']}")
        assert client.get("/todo").json() == [keep]

    def test_delete_removing_zero_rows_returns_404(self):
        repo = use_repository(RejectingRepository())
        todo = new_todo("Stuck", clock=fixed_clock, id_factory=lambda: "stuck-1")
        InMemoryRepository.insert(repo, todo)

        res = client.delete("/todo/stuck-1")
        assert res.status_code == 404
        assert res.content == b""

    def test_storage_failure_returns_500(self):
        use_repository(FailingRepository())
        assert client.delete("/todo/anything").status_code == 500


class TestStorageFailureOnList(_ApiTest):
    def test_list_storage_failure_returns_500_with_error_detail(self):
        use_repository(FailingRepository("connection refused"))
        res = client.get("/todo")
        assert res.status_code == 500
        body = res.json()
        assert body["status"] == 500
        assert "connection refused" in body["detail"]
