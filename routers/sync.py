from fastapi import APIRouter, Depends

from config.settings import settings
from dependencies.store import get_snapshot_service
from schemas.common import ok
from services.snapshot import SnapshotService

router = APIRouter(prefix="/sync", tags=["데이터 동기화"])


def _summary(snap) -> dict:
    return {
        "students": len(snap.students),
        "tests": len(snap.tests),
        "fetched_at": snap.fetched_at,
    }


# ✅ [RELOAD] 전체 다시 불러오기 (최초 로딩 / '다시 시도')
# 실패 시 전역 에러 핸들러가 502(retryable) 또는 503 으로 응답
@router.post("/reload")
def reload_snapshot(snapshots: SnapshotService = Depends(get_snapshot_service)):
    snap = snapshots.load()
    return ok(_summary(snap), "데이터를 다시 불러왔습니다")


# ✅ [READ] 현재 스냅샷 상태
@router.get("/status")
def snapshot_status(snapshots: SnapshotService = Depends(get_snapshot_service)):
    snap = snapshots.current()
    return ok({**_summary(snap), "store_configured": settings.STORE_CONFIGURED}, "스냅샷 상태")
