from pydantic import BaseModel
from typing import List, Optional
from datetime import date


# ✅ 결과 한 줄 (백분율/구간 포함)
class ResultView(BaseModel):
    id: Optional[str] = None
    student_id: str
    student_name: Optional[str] = None       # 관리자 화면에서만 채움
    grade: Optional[str] = None
    test_name: str
    test_date: date
    display_date: str                        # "2024.01.10"
    score: Optional[float] = None
    total_score: Optional[float] = None
    percentage: Optional[float] = None       # 미입력이면 None
    band: Optional[str] = None               # top / second / third / bottom
    retest_date: Optional[date] = None
    retest_reason: Optional[str] = None


# ✅ 테스트 묶음 (관리자 결과 조회)
class InstanceView(BaseModel):
    test_name: str
    test_date: date
    display_date: str
    total_score: Optional[float] = None
    average: Optional[float] = None          # 점수 입력자가 없으면 None
    student_count: int
    results: List[ResultView]


# ✅ 달력 칸 (빈 칸은 None 으로 표현)
class CalendarCell(BaseModel):
    day: int
    date: date
    weekday: int                             # 0=일 ... 6=토
    is_today: bool
    tests: List[ResultView]
    retests: List[ResultView]


class CalendarView(BaseModel):
    year: int
    month: int                               # 1~12
    prev_year: int
    prev_month: int
    next_year: int
    next_month: int
    first_weekday_offset: int
    days_in_month: int
    cells: List[Optional[CalendarCell]]
