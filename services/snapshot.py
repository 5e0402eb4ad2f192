"""
services/snapshot.py

students / tests 두 컬렉션을 통째로 읽어 둔 스냅샷.
- load(): 최초 로딩/재시도 경로. 실패하면 예외를 그대로 올림
- refresh(): 데이터 변경 후 백그라운드 갱신. 실패해도 이전 스냅샷 유지
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Tuple

from schemas.students import Student
from schemas.tests import TestResult
from services.store_client import RemoteStoreClient, StoreRequestError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreSnapshot:
    students: Tuple[Student, ...]
    tests: Tuple[TestResult, ...]
    fetched_at: datetime

    def student(self, student_id: str) -> Optional[Student]:
        return next((s for s in self.students if s.id == student_id), None)

    def tests_for(self, student_id: str) -> Tuple[TestResult, ...]:
        return tuple(t for t in self.tests if t.student_id == student_id)


class SnapshotService:
    def __init__(self, store: RemoteStoreClient):
        self.store = store
        self._snapshot: Optional[StoreSnapshot] = None

    def fetch(self) -> StoreSnapshot:
        students = self.store.table("students").select()
        tests = self.store.table("tests").select()
        return StoreSnapshot(
            students=tuple(Student.model_validate(s) for s in students),
            tests=tuple(TestResult.model_validate(t) for t in tests),
            fetched_at=datetime.now(timezone.utc),
        )

    def load(self) -> StoreSnapshot:
        # 스냅샷은 참조 교체로만 바뀜
        self._snapshot = self.fetch()
        logger.info(
            "스냅샷 로딩 완료: 학생 %d명, 결과 %d건",
            len(self._snapshot.students), len(self._snapshot.tests),
        )
        return self._snapshot

    def current(self) -> StoreSnapshot:
        if self._snapshot is None:
            return self.load()
        return self._snapshot

    def refresh(self) -> Optional[StoreSnapshot]:
        try:
            return self.load()
        except StoreRequestError as e:
            logger.warning("스냅샷 갱신 실패, 이전 데이터 유지: %s", e)
            return self._snapshot
