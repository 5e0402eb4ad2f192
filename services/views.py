"""
services/views.py

aggregation 결과를 응답 스키마(schemas/views.py)로 조립.
화면 상태(선택된 학생, 조회 월, 오늘 날짜)는 모두 인자로 받음.
"""

from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from schemas.students import Student
from schemas.tests import TestResult
from schemas.views import CalendarCell, CalendarView, InstanceView, ResultView
from services import aggregation as agg


def result_view(row: TestResult, student: Optional[Student] = None) -> ResultView:
    band = agg.result_band(row)
    return ResultView(
        id=row.id,
        student_id=row.student_id,
        student_name=student.name if student else None,
        grade=student.grade if student else None,
        test_name=row.test_name,
        test_date=row.test_date,
        display_date=agg.format_date(row.test_date),
        score=row.score,
        total_score=row.total_score,
        percentage=agg.score_percentage(row),
        band=band.value if band else None,
        retest_date=row.retest_date,
        retest_reason=row.retest_reason,
    )


def build_instance_views(
    students: Sequence[Student],
    tests: Sequence[TestResult],
    student_id: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[InstanceView]:
    """
    관리자 결과 조회.
    - 학생 필터 후 행이 남지 않은 그룹은 제외
    - 삭제된 학생을 가리키는 행은 화면에서 건너뜀 (평균 계산에는 포함)
    """
    by_id: Dict[str, Student] = {s.id: s for s in students}
    instances = agg.filter_instances(agg.group_test_instances(tests), student_id)
    if limit is not None:
        instances = instances[:limit]

    views = []
    for g in instances:
        results = [result_view(t, by_id[t.student_id]) for t in g.tests if t.student_id in by_id]
        views.append(InstanceView(
            test_name=g.test_name,
            test_date=g.test_date,
            display_date=agg.format_date(g.test_date),
            total_score=agg.effective_total(g.total_score),
            average=agg.average_score(g.tests),
            student_count=len(g.tests),
            results=results,
        ))
    return views


def build_calendar_view(year: int, month: int, rows: Iterable[TestResult], today: date) -> CalendarView:
    cells = []
    for cell in agg.build_calendar(year, month, rows, today):
        if cell is None:
            cells.append(None)
            continue
        cells.append(CalendarCell(
            day=cell["day"],
            date=cell["date"],
            weekday=cell["weekday"],
            is_today=cell["is_today"],
            tests=[result_view(t) for t in cell["tests"]],
            retests=[result_view(t) for t in cell["retests"]],
        ))

    prev_year, prev_month = agg.shift_month(year, month, -1)
    next_year, next_month = agg.shift_month(year, month, 1)
    return CalendarView(
        year=year,
        month=month,
        prev_year=prev_year,
        prev_month=prev_month,
        next_year=next_year,
        next_month=next_month,
        first_weekday_offset=agg.first_weekday_offset(year, month),
        days_in_month=agg.days_in_month(year, month),
        cells=cells,
    )
