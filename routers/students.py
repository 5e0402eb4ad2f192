from fastapi import APIRouter, Depends, HTTPException

from dependencies.security import require_admin
from dependencies.store import get_snapshot_service, get_store
from schemas.common import ok
from schemas.students import StudentCreate, StudentOut, StudentUpdate
from services.aggregation import count_tests_by_student, sort_students
from services.snapshot import SnapshotService
from services.store_client import RemoteStoreClient
from services.student_service import (
    DuplicateLoginIdError, StudentNotFoundError,
    add_student, delete_student, update_student,
)

router = APIRouter(prefix="/students", tags=["학생 관리"], dependencies=[Depends(require_admin)])


def to_out(student, test_count: int = 0) -> dict:
    return StudentOut(
        id=student.id, name=student.name, login_id=student.login_id,
        grade=student.grade, test_count=test_count,
    ).model_dump()


# ==========================================================
# [1단계] 조회
# ==========================================================

# ✅ [READ] 학생 목록 (이름순, 테스트 수 포함)
@router.get("/")
def read_students(snapshots: SnapshotService = Depends(get_snapshot_service)):
    snap = snapshots.current()
    counts = count_tests_by_student(snap.tests)
    return ok(
        [to_out(s, counts.get(s.id, 0)) for s in sort_students(snap.students)],
        f"학생 {len(snap.students)}명 조회 완료",
    )


# ==========================================================
# [2단계] 등록 / 수정 / 삭제
# ==========================================================

# ✅ [CREATE] 학생 등록
@router.post("/", status_code=201)
def create_student(
    new: StudentCreate,
    store: RemoteStoreClient = Depends(get_store),
    snapshots: SnapshotService = Depends(get_snapshot_service),
):
    try:
        student = add_student(store, new)
    except DuplicateLoginIdError:
        raise HTTPException(status_code=409, detail="이미 사용 중인 아이디입니다.")
    snapshots.refresh()
    return ok(to_out(student), "학생이 등록되었습니다")


# ✅ [UPDATE] 학생 정보 수정 (이름/아이디/비밀번호/학년)
@router.patch("/{student_id}")
def patch_student(
    student_id: str,
    changes: StudentUpdate,
    store: RemoteStoreClient = Depends(get_store),
    snapshots: SnapshotService = Depends(get_snapshot_service),
):
    try:
        student = update_student(store, student_id, changes)
    except DuplicateLoginIdError:
        raise HTTPException(status_code=409, detail="이미 사용 중인 아이디입니다.")
    except StudentNotFoundError:
        raise HTTPException(status_code=404, detail="학생 정보를 찾을 수 없습니다")
    snapshots.refresh()
    return ok(to_out(student), "학생 정보가 수정되었습니다")


# ✅ [DELETE] 학생 삭제
@router.delete("/{student_id}")
def remove_student(
    student_id: str,
    store: RemoteStoreClient = Depends(get_store),
    snapshots: SnapshotService = Depends(get_snapshot_service),
):
    delete_student(store, student_id)
    snapshots.refresh()
    return ok({"student_id": student_id}, "학생이 삭제되었습니다")
