from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import date


# ✅ 저장소 행(row): 한 학생이 특정 날짜에 본 특정 테스트 결과
class TestResult(BaseModel):
    id: Optional[str] = None                 # 결과 ID (PK)
    student_id: str                          # 학생 ID (FK)
    test_name: str                           # 테스트 이름
    test_date: date                          # 시험 날짜
    score: Optional[float] = None            # 점수 (None = 미입력)
    total_score: Optional[float] = 100       # 만점 (0/None 이면 100으로 취급)
    retest_date: Optional[date] = None       # 재시험 날짜
    retest_reason: Optional[str] = None      # 재시험 사유

    model_config = ConfigDict(coerce_numbers_to_str=True, extra="ignore")


# ✅ 파생 그룹: (test_name, test_date) 가 같은 결과 묶음. 저장되지 않음
class TestInstance(BaseModel):
    test_name: str
    test_date: date
    total_score: Optional[float] = None      # 첫 번째 행의 값
    tests: List[TestResult] = []


# ✅ 저장 요청 중 학생 한 명분 입력
class TestEntry(BaseModel):
    student_id: str
    score: Optional[float] = Field(default=None, ge=0)
    retest_date: Optional[date] = None
    retest_reason: Optional[str] = None

    model_config = ConfigDict(coerce_numbers_to_str=True)

    @field_validator("score", "retest_date", "retest_reason", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        # 폼에서 빈 문자열로 넘어오는 값은 미입력으로 처리
        if isinstance(v, str) and not v.strip():
            return None
        return v


# ✅ 테스트 저장(신규/수정) 요청
class TestInstanceSave(BaseModel):
    test_name: str = Field(..., min_length=1)
    test_date: date
    total_score: Optional[float] = 100
    entries: List[TestEntry] = Field(..., min_length=1)

    @field_validator("test_name", mode="before")
    @classmethod
    def _strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("entries")
    @classmethod
    def _one_row_per_student(cls, v):
        ids = [e.student_id for e in v]
        if len(ids) != len(set(ids)):
            raise ValueError("같은 학생이 두 번 포함되어 있습니다")
        return v
