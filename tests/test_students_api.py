from services.auth import check_password


def test_list_students_sorted_with_test_counts(client, seeded, admin_headers):
    r = client.get("/v1/students/", headers=admin_headers)
    assert r.status_code == 200
    data = r.json()["data"]
    assert [s["name"] for s in data] == ["김민수", "이지은"]
    assert [s["test_count"] for s in data] == [2, 1]
    assert all("pin" not in s for s in data)


def test_add_student_hashes_default_password(client, fake, admin_headers):
    r = client.post("/v1/students/", json={"name": " 박서준 ", "login_id": "seojun"}, headers=admin_headers)
    assert r.status_code == 201
    body = r.json()["data"]
    assert body["name"] == "박서준"
    assert body["grade"] == "고1"

    stored = fake.tables["students"][0]
    assert stored["pin"] != "0000"
    assert check_password("0000", stored["pin"])


def test_added_student_can_log_in(client, admin_headers):
    client.post(
        "/v1/students/",
        json={"name": "박서준", "login_id": "seojun", "password": "5555", "grade": "고3"},
        headers=admin_headers,
    )
    r = client.post("/v1/auth/student", json={"login_id": "seojun", "password": "5555"})
    assert r.status_code == 200
    assert r.json()["name"] == "박서준"


def test_duplicate_login_id_is_rejected(client, seeded, fake, admin_headers):
    r = client.post("/v1/students/", json={"name": "다른 학생", "login_id": "minsu"}, headers=admin_headers)
    assert r.status_code == 409
    assert len(fake.tables["students"]) == 2


def test_invalid_grade_and_blank_name_rejected(client, admin_headers):
    assert client.post(
        "/v1/students/", json={"name": "A", "login_id": "a", "grade": "중1"}, headers=admin_headers,
    ).status_code == 422
    assert client.post(
        "/v1/students/", json={"name": "   ", "login_id": "a"}, headers=admin_headers,
    ).status_code == 422


def test_update_fields(client, seeded, fake, admin_headers):
    kim = seeded["kim"]
    r = client.patch(f"/v1/students/{kim}", json={"grade": "고2", "name": "김민준"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["data"]["grade"] == "고2"
    assert r.json()["data"]["name"] == "김민준"

    client.patch(f"/v1/students/{kim}", json={"password": "7777"}, headers=admin_headers)
    assert client.post("/v1/auth/student", json={"login_id": "minsu", "password": "7777"}).status_code == 200


def test_update_login_id_uniqueness(client, seeded, admin_headers):
    kim = seeded["kim"]
    r = client.patch(f"/v1/students/{kim}", json={"login_id": "jieun"}, headers=admin_headers)
    assert r.status_code == 409
    # 자기 자신의 아이디로 다시 저장하는 것은 허용
    r = client.patch(f"/v1/students/{kim}", json={"login_id": "minsu"}, headers=admin_headers)
    assert r.status_code == 200


def test_update_unknown_student(client, seeded, admin_headers):
    r = client.patch("/v1/students/999", json={"name": "없음"}, headers=admin_headers)
    assert r.status_code == 404


def test_delete_student_refreshes_list(client, seeded, admin_headers):
    client.get("/v1/students/", headers=admin_headers)
    r = client.delete(f"/v1/students/{seeded['lee']}", headers=admin_headers)
    assert r.status_code == 200
    names = [s["name"] for s in client.get("/v1/students/", headers=admin_headers).json()["data"]]
    assert names == ["김민수"]


def test_store_unique_constraint_is_final_word_on_login_id(client, seeded, fake, admin_headers, monkeypatch):
    # 사전 조회가 통과해도 (동시에 같은 아이디가 등록된 경우) 저장소의 409 가 그대로 409 로 전달
    monkeypatch.setattr("services.student_service.login_id_taken", lambda *args, **kwargs: False)

    r = client.post("/v1/students/", json={"name": "다른 학생", "login_id": "minsu"}, headers=admin_headers)
    assert r.status_code == 409
    assert len(fake.tables["students"]) == 2

    r = client.patch(f"/v1/students/{seeded['kim']}", json={"login_id": "jieun"}, headers=admin_headers)
    assert r.status_code == 409
    assert {s["login_id"] for s in fake.tables["students"]} == {"minsu", "jieun"}
