import itertools
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from config.settings import settings
from dependencies.store import get_snapshot_service, get_store
from services.auth import hash_password, issue_student_token
from services.snapshot import SnapshotService
from services.store_client import RemoteStoreClient

ADMIN_PIN = "1234"


class FakePostgrest:
    """
    students / tests 두 테이블만 가진 인메모리 PostgREST.
    httpx.MockTransport 핸들러로 쓰며, eq 필터만 이해함.
    """

    def __init__(self):
        self.tables = {"students": [], "tests": []}
        self.ids = itertools.count(1)
        self.requests = []
        self.fail_with = None  # (status_code, body)
        self.fail_reads = False  # GET 만 실패

    def seed(self, table, *rows):
        created = []
        for row in rows:
            row = {"id": next(self.ids), **row}
            self.tables[table].append(row)
            created.append(row)
        return created

    def _matches(self, row, params):
        for key, value in params.multi_items():
            if key == "select":
                continue
            assert value.startswith("eq."), value
            if str(row.get(key)) != value[3:]:
                return False
        return True

    def _violates_unique(self, table, new_rows, ignore=()):
        # students.login_id 에 unique 제약
        if table != "students":
            return False
        taken = [r.get("login_id") for r in self.tables[table] if r not in ignore]
        incoming = [r["login_id"] for r in new_rows if r.get("login_id")]
        return any(login_id in taken for login_id in incoming) or len(incoming) != len(set(incoming))

    def _conflict(self):
        return httpx.Response(409, json={"code": "23505", "message": "duplicate key value violates unique constraint"})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with:
            status, body = self.fail_with
            return httpx.Response(status, text=body)
        if self.fail_reads and request.method == "GET":
            return httpx.Response(503, text="read replica down")

        table = request.url.path.rsplit("/", 1)[-1]
        rows = self.tables[table]
        params = request.url.params

        if request.method == "GET":
            found = [r for r in rows if self._matches(r, params)]
            columns = params.get("select", "*")
            if columns != "*":
                keep = columns.split(",")
                found = [{k: r.get(k) for k in keep} for r in found]
            return httpx.Response(200, json=found)

        if request.method == "POST":
            new_rows = json.loads(request.content)
            if self._violates_unique(table, new_rows):
                return self._conflict()
            created = self.seed(table, *new_rows)
            return httpx.Response(201, json=created)

        if request.method == "PATCH":
            data = json.loads(request.content)
            targets = [r for r in rows if self._matches(r, params)]
            if self._violates_unique(table, [data], ignore=targets):
                return self._conflict()
            updated = []
            for r in rows:
                if self._matches(r, params):
                    r.update(data)
                    updated.append(r)
            return httpx.Response(200, json=updated)

        if request.method == "DELETE":
            removed = [r for r in rows if self._matches(r, params)]
            self.tables[table] = [r for r in rows if r not in removed]
            return httpx.Response(200, json=removed)

        return httpx.Response(405)


@pytest.fixture
def fake():
    return FakePostgrest()


@pytest.fixture
def store(fake):
    return RemoteStoreClient("http://store.test", "anon-key", transport=httpx.MockTransport(fake))


@pytest.fixture
def snapshots(store):
    return SnapshotService(store)


@pytest.fixture
def client(store, snapshots, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PIN", ADMIN_PIN)
    from main import app

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_snapshot_service] = lambda: snapshots
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_PIN}"}


@pytest.fixture
def student_headers():
    def headers(student_id):
        return {"Authorization": f"Bearer {issue_student_token(student_id)}"}
    return headers


@pytest.fixture
def seeded(fake):
    """학생 두 명(김민수, 이지은) + 테스트 결과 세 건"""
    kim, lee = fake.seed(
        "students",
        {"name": "김민수", "login_id": "minsu", "pin": hash_password("1111"), "grade": "고1"},
        {"name": "이지은", "login_id": "jieun", "pin": hash_password("2222"), "grade": "고2"},
    )
    fake.seed(
        "tests",
        {"student_id": kim["id"], "test_name": "Vocab Quiz", "test_date": "2024-01-10",
         "score": 80, "total_score": 100, "retest_date": None, "retest_reason": None},
        {"student_id": lee["id"], "test_name": "Vocab Quiz", "test_date": "2024-01-10",
         "score": None, "total_score": 100, "retest_date": "2024-01-17", "retest_reason": "결시"},
        {"student_id": kim["id"], "test_name": "수학 단원평가", "test_date": "2024-02-05",
         "score": 45, "total_score": 50, "retest_date": None, "retest_reason": None},
    )
    return {"kim": str(kim["id"]), "lee": str(lee["id"])}
