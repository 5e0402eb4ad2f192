from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from dependencies.security import require_student
from dependencies.store import get_snapshot_service
from schemas.common import ok
from services.aggregation import recent_results, upcoming_retests
from services.snapshot import SnapshotService, StoreSnapshot
from services.views import build_calendar_view, result_view

router = APIRouter(prefix="/students", tags=["학생 화면"], dependencies=[Depends(require_student)])


def _student_or_404(snap: StoreSnapshot, student_id: str):
    student = snap.student(student_id)
    if student is None:
        raise HTTPException(status_code=404, detail="학생 정보를 찾을 수 없습니다")
    return student


# ✅ [READ] 월간 달력 (시험일/재시험일 표시)
@router.get("/{student_id}/calendar")
def read_calendar(
    student_id: str,
    year: Optional[int] = Query(default=None, ge=1, le=9999),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    today: Optional[date] = None,
    snapshots: SnapshotService = Depends(get_snapshot_service),
):
    snap = snapshots.current()
    _student_or_404(snap, student_id)
    today = today or date.today()
    view = build_calendar_view(year or today.year, month or today.month, snap.tests_for(student_id), today)
    return ok(view.model_dump(), f"{view.year}년 {view.month}월 달력")


# ✅ [READ] 최근 테스트 결과 (점수 입력된 것 5건)
@router.get("/{student_id}/results/recent")
def read_recent_results(
    student_id: str,
    limit: int = Query(default=5, ge=1, le=50),
    snapshots: SnapshotService = Depends(get_snapshot_service),
):
    snap = snapshots.current()
    _student_or_404(snap, student_id)
    rows = recent_results(snap.tests_for(student_id), limit=limit)
    return ok([result_view(r).model_dump() for r in rows], "최근 테스트 결과")


# ✅ [READ] 다가오는 재시험 (오늘 포함)
@router.get("/{student_id}/retests/upcoming")
def read_upcoming_retests(
    student_id: str,
    today: Optional[date] = None,
    snapshots: SnapshotService = Depends(get_snapshot_service),
):
    snap = snapshots.current()
    _student_or_404(snap, student_id)
    rows = upcoming_retests(snap.tests_for(student_id), today or date.today())
    return ok([result_view(r).model_dump() for r in rows], "다가오는 재시험")


# ✅ [READ] 테스트 결과 상세
@router.get("/{student_id}/results/{test_id}")
def read_result(
    student_id: str,
    test_id: str,
    snapshots: SnapshotService = Depends(get_snapshot_service),
):
    snap = snapshots.current()
    _student_or_404(snap, student_id)
    row = next((t for t in snap.tests_for(student_id) if t.id == test_id), None)
    if row is None:
        raise HTTPException(status_code=404, detail="테스트 결과를 찾을 수 없습니다")
    return ok(result_view(row).model_dump(), "테스트 결과 상세")
