from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Literal, Optional

# 학년은 고정된 세 값 중 하나
Grade = Literal["고1", "고2", "고3"]


# ✅ 저장소 행(row) 그대로 (pin = 비밀번호 해시, 응답에 내보내지 않음)
class Student(BaseModel):
    id: str                                  # 학생 ID (PK)
    name: str                                # 이름
    login_id: Optional[str] = None           # 로그인 아이디 (활성 학생 간 고유)
    pin: Optional[str] = None                # 비밀번호 해시
    grade: Optional[str] = None              # 학년

    model_config = ConfigDict(coerce_numbers_to_str=True, extra="ignore")


# ✅ 출력용 (비밀번호 제외)
class StudentOut(BaseModel):
    id: str
    name: str
    login_id: Optional[str] = None
    grade: Optional[str] = None
    test_count: int = 0                      # 등록된 테스트 결과 수


# ✅ 입력용 (POST)
class StudentCreate(BaseModel):
    name: str = Field(..., min_length=1)
    login_id: str = Field(..., min_length=1)
    password: Optional[str] = None           # 비어 있으면 기본 비밀번호 사용
    grade: Grade = "고1"

    @field_validator("name", "login_id", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v


# ✅ 수정용 (PATCH) - 보낸 필드만 반영
class StudentUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    login_id: Optional[str] = Field(default=None, min_length=1)
    password: Optional[str] = Field(default=None, min_length=1)
    grade: Optional[Grade] = None

    @field_validator("name", "login_id", "password", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v
