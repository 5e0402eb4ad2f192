"""
services/aggregation.py

테스트 결과 행(row) 목록을 화면용 구조로 가공하는 순수 함수 모음.
- 입력만으로 결과가 결정되며 I/O, 캐시, 전역 상태가 없음
- 요청마다 최신 스냅샷에서 다시 계산함
"""

import calendar
from collections import Counter, defaultdict
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from schemas.students import Student
from schemas.tests import TestInstance, TestResult

DEFAULT_TOTAL_SCORE = 100
ALL_STUDENTS = "all"


# ==========================================================
# [1] 테스트 묶음(TestInstance) 그룹화
# ==========================================================

def group_test_instances(rows: Iterable[TestResult]) -> List[TestInstance]:
    """
    (test_name, test_date) 가 같은 행끼리 묶고 날짜 내림차순으로 정렬.
    - total_score 는 먼저 나온 행의 값을 그대로 사용 (행 간 검증 없음)
    - 같은 날짜끼리는 입력 순서를 유지 (stable sort)
    """
    groups: Dict[Tuple[str, date], TestInstance] = {}
    for row in rows:
        key = (row.test_name, row.test_date)
        if key not in groups:
            groups[key] = TestInstance(
                test_name=row.test_name,
                test_date=row.test_date,
                total_score=row.total_score,
                tests=[],
            )
        groups[key].tests.append(row)
    return sorted(groups.values(), key=lambda g: g.test_date, reverse=True)


def rows_for_instance(rows: Iterable[TestResult], test_name: str, test_date: date) -> List[TestResult]:
    return [r for r in rows if r.test_name == test_name and r.test_date == test_date]


# ==========================================================
# [2] 점수 통계
# ==========================================================

class ScoreBand(str, Enum):
    TOP = "top"          # 90% 이상
    SECOND = "second"    # 70% 이상 90% 미만
    THIRD = "third"      # 50% 이상 70% 미만
    BOTTOM = "bottom"    # 50% 미만


def average_score(rows: Iterable[TestResult]) -> Optional[float]:
    """점수가 입력된 행만 평균. 하나도 없으면 None (0 이 아님)"""
    scores = [r.score for r in rows if r.score is not None]
    if not scores:
        return None
    return sum(scores) / len(scores)


def effective_total(total: Optional[float]) -> float:
    return total or DEFAULT_TOTAL_SCORE


def score_percentage(row: TestResult) -> Optional[float]:
    if row.score is None:
        return None
    # 곱셈을 먼저 해야 70/100 같은 경계값이 정확히 떨어짐
    return row.score * 100 / effective_total(row.total_score)


def classify_band(pct: float) -> ScoreBand:
    # 경계값은 위 구간에 포함
    if pct >= 90:
        return ScoreBand.TOP
    if pct >= 70:
        return ScoreBand.SECOND
    if pct >= 50:
        return ScoreBand.THIRD
    return ScoreBand.BOTTOM


def result_band(row: TestResult) -> Optional[ScoreBand]:
    pct = score_percentage(row)
    return None if pct is None else classify_band(pct)


# ==========================================================
# [3] 학생별 필터
# ==========================================================

def is_all(student_id: Optional[str]) -> bool:
    return student_id is None or student_id == ALL_STUDENTS


def filter_rows_for_student(rows: Iterable[TestResult], student_id: Optional[str]) -> List[TestResult]:
    if is_all(student_id):
        return list(rows)
    return [r for r in rows if r.student_id == str(student_id)]


def filter_instances(instances: Sequence[TestInstance], student_id: Optional[str]) -> List[TestInstance]:
    """
    각 그룹의 행을 학생 기준으로 거르고, 남은 행이 없는 그룹은 제외.
    그룹 메타(이름/날짜/만점)는 필터 전 값을 유지.
    """
    if is_all(student_id):
        return list(instances)
    filtered = []
    for g in instances:
        members = filter_rows_for_student(g.tests, student_id)
        if members:
            filtered.append(g.model_copy(update={"tests": members}))
    return filtered


# ==========================================================
# [4] 달력
# ==========================================================

def first_weekday_offset(year: int, month: int) -> int:
    """1일의 요일 (0=일요일 ... 6=토요일)"""
    return (date(year, month, 1).weekday() + 1) % 7


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_grid(year: int, month: int) -> List[Optional[int]]:
    """앞쪽 빈 칸(None) + 1..말일. month 는 1부터 시작"""
    return [None] * first_weekday_offset(year, month) + list(range(1, days_in_month(year, month) + 1))


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def build_calendar_indices(
    rows: Iterable[TestResult],
) -> Tuple[Dict[date, List[TestResult]], Dict[date, List[TestResult]]]:
    """
    날짜 → 시험 행, 날짜 → 재시험 행 두 개의 색인.
    한 행이 두 색인에 모두 들어갈 수 있고, 재시험 색인은 원래 시험 달과 무관함.
    """
    tests_by_date: Dict[date, List[TestResult]] = defaultdict(list)
    retests_by_date: Dict[date, List[TestResult]] = defaultdict(list)
    for r in rows:
        tests_by_date[r.test_date].append(r)
        if r.retest_date:
            retests_by_date[r.retest_date].append(r)
    return dict(tests_by_date), dict(retests_by_date)


def build_calendar(year: int, month: int, rows: Iterable[TestResult], today: date) -> List[Optional[dict]]:
    """달력 칸 목록. 빈 칸은 None, 날짜 칸은 해당일의 시험/재시험 행을 담은 dict"""
    tests_by_date, retests_by_date = build_calendar_indices(rows)
    cells: List[Optional[dict]] = []
    for idx, day in enumerate(month_grid(year, month)):
        if day is None:
            cells.append(None)
            continue
        d = date(year, month, day)
        cells.append({
            "day": day,
            "date": d,
            "weekday": idx % 7,
            "is_today": d == today,
            "tests": tests_by_date.get(d, []),
            "retests": retests_by_date.get(d, []),
        })
    return cells


# ==========================================================
# [5] 재시험 / 최근 결과
# ==========================================================

def upcoming_retests(rows: Iterable[TestResult], today: date) -> List[TestResult]:
    """재시험일이 오늘 이후(오늘 포함)인 행, 재시험일 오름차순"""
    upcoming = [r for r in rows if r.retest_date and r.retest_date >= today]
    return sorted(upcoming, key=lambda r: r.retest_date)


def recent_results(rows: Iterable[TestResult], limit: int = 5) -> List[TestResult]:
    scored = [r for r in rows if r.score is not None]
    return sorted(scored, key=lambda r: r.test_date, reverse=True)[:limit]


# ==========================================================
# [6] 기타 표시용
# ==========================================================

def count_tests_by_student(rows: Iterable[TestResult]) -> Counter:
    return Counter(r.student_id for r in rows)


def sort_students(students: Iterable[Student]) -> List[Student]:
    return sorted(students, key=lambda s: s.name)


def format_date(d: Optional[date]) -> str:
    if not d:
        return ""
    return f"{d.year}.{d.month:02d}.{d.day:02d}"
