import logging
from typing import Optional

from config.settings import settings
from schemas.students import Student, StudentCreate, StudentUpdate
from services.auth import hash_password
from services.store_client import RemoteStoreClient, StoreRequestError

logger = logging.getLogger(__name__)


class DuplicateLoginIdError(ValueError):
    """이미 다른 학생이 쓰고 있는 로그인 아이디"""


class StudentNotFoundError(LookupError):
    pass


def login_id_taken(store: RemoteStoreClient, login_id: str, exclude_id: Optional[str] = None) -> bool:
    rows = store.table("students").select(columns="id", filters={"login_id": login_id})
    return any(str(r["id"]) != exclude_id for r in rows)


def _raise_if_conflict(error: StoreRequestError, login_id: Optional[str]) -> None:
    # 사전 조회와 저장 사이에 다른 요청이 끼어들면 저장소의 unique 제약(409)이 최종 판정
    if error.status_code == 409:
        raise DuplicateLoginIdError(login_id) from error


def add_student(store: RemoteStoreClient, new: StudentCreate) -> Student:
    if login_id_taken(store, new.login_id):
        raise DuplicateLoginIdError(new.login_id)

    row = {
        "name": new.name,
        "login_id": new.login_id,
        "pin": hash_password(new.password or settings.DEFAULT_STUDENT_PASSWORD),
        "grade": new.grade,
    }
    try:
        created = store.table("students").insert(row)
    except StoreRequestError as e:
        _raise_if_conflict(e, new.login_id)
        raise
    logger.info("학생 등록: %s (%s)", new.name, new.login_id)
    return Student.model_validate(created[0])


def update_student(store: RemoteStoreClient, student_id: str, changes: StudentUpdate) -> Student:
    data = changes.model_dump(exclude_none=True)
    if "login_id" in data and login_id_taken(store, data["login_id"], exclude_id=student_id):
        raise DuplicateLoginIdError(data["login_id"])
    if "password" in data:
        data["pin"] = hash_password(data.pop("password"))

    if not data:
        rows = store.table("students").select(filters={"id": student_id})
    else:
        try:
            rows = store.table("students").update(data, {"id": student_id})
        except StoreRequestError as e:
            _raise_if_conflict(e, data.get("login_id"))
            raise
    if not rows:
        raise StudentNotFoundError(student_id)
    logger.info("학생 정보 수정: id=%s fields=%s", student_id, sorted(data))
    return Student.model_validate(rows[0])


def delete_student(store: RemoteStoreClient, student_id: str) -> bool:
    # 해당 학생의 테스트 결과 행은 남겨 둠 (조회 화면에서 건너뜀)
    store.table("students").delete({"id": student_id})
    logger.info("학생 삭제: id=%s", student_id)
    return True
