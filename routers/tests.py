from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from dependencies.security import require_admin
from dependencies.store import get_snapshot_service, get_store
from schemas.common import ok
from schemas.tests import TestInstanceSave
from services.aggregation import ALL_STUDENTS, effective_total, rows_for_instance
from services.snapshot import SnapshotService
from services.store_client import RemoteStoreClient
from services.test_service import UnknownStudentError, delete_instance, save_instance
from services.views import build_instance_views

router = APIRouter(prefix="/tests", tags=["테스트 관리"], dependencies=[Depends(require_admin)])


def _save(store, snapshots, payload, original=None):
    known = [s.id for s in snapshots.current().students]
    try:
        return save_instance(store, payload, original=original, known_student_ids=known)
    except UnknownStudentError as e:
        raise HTTPException(status_code=422, detail=f"등록되지 않은 학생입니다: {e}")


# ==========================================================
# [1단계] 조회
# ==========================================================

# ✅ [READ] 테스트 묶음 목록 (최근 날짜순, 학생 필터)
@router.get("/instances")
def read_instances(
    student_id: str = ALL_STUDENTS,
    limit: Optional[int] = Query(default=None, ge=1),
    snapshots: SnapshotService = Depends(get_snapshot_service),
):
    snap = snapshots.current()
    views = build_instance_views(snap.students, snap.tests, student_id=student_id, limit=limit)
    return ok([v.model_dump() for v in views], f"테스트 {len(views)}건 조회 완료")


# ✅ [READ] 테스트 묶음 상세 (수정 폼 채우기용)
@router.get("/instances/detail")
def read_instance(
    test_name: str,
    test_date: date,
    snapshots: SnapshotService = Depends(get_snapshot_service),
):
    rows = rows_for_instance(snapshots.current().tests, test_name, test_date)
    if not rows:
        raise HTTPException(status_code=404, detail="테스트 정보를 찾을 수 없습니다")
    return ok({
        "test_name": test_name,
        "test_date": test_date,
        "total_score": effective_total(rows[0].total_score),
        "entries": [
            {
                "student_id": r.student_id,
                "score": r.score,
                "retest_date": r.retest_date,
                "retest_reason": r.retest_reason,
            }
            for r in rows
        ],
    }, "테스트 상세 조회 성공")


# ==========================================================
# [2단계] 저장 / 수정 / 삭제
# ==========================================================

# ✅ [CREATE] 새 테스트 저장 (선택 학생마다 한 행)
@router.post("/instances", status_code=201)
def create_instance(
    payload: TestInstanceSave,
    store: RemoteStoreClient = Depends(get_store),
    snapshots: SnapshotService = Depends(get_snapshot_service),
):
    saved = _save(store, snapshots, payload)
    snapshots.refresh()
    return ok([r.model_dump() for r in saved], "테스트가 저장되었습니다")


# ✅ [UPDATE] 테스트 수정 = 원래 묶음 삭제 후 다시 저장
@router.put("/instances")
def replace_instance(
    payload: TestInstanceSave,
    test_name: str,
    test_date: date,
    store: RemoteStoreClient = Depends(get_store),
    snapshots: SnapshotService = Depends(get_snapshot_service),
):
    if not rows_for_instance(snapshots.current().tests, test_name, test_date):
        raise HTTPException(status_code=404, detail="테스트 정보를 찾을 수 없습니다")
    saved = _save(store, snapshots, payload, original=(test_name, test_date))
    snapshots.refresh()
    return ok([r.model_dump() for r in saved], "테스트가 수정되었습니다")


# ✅ [DELETE] 테스트 삭제 (같은 이름/날짜의 모든 행)
@router.delete("/instances")
def remove_instance(
    test_name: str,
    test_date: date,
    store: RemoteStoreClient = Depends(get_store),
    snapshots: SnapshotService = Depends(get_snapshot_service),
):
    delete_instance(store, test_name, test_date)
    snapshots.refresh()
    return ok({"test_name": test_name, "test_date": test_date}, f'"{test_name}" 테스트가 삭제되었습니다')
