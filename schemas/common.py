"""
schemas/common.py

- 프로젝트 전반에서 재사용할 공용 스키마 모음
- Pydantic v2 기준
- 포함 내용:
  1) 에러 응답 표준: ErrorDetail, ErrorResponse
  2) 성공 응답 헬퍼: ok()
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field, ConfigDict


# =========================================================
# 1) 에러 응답 표준
# =========================================================

class ErrorDetail(BaseModel):
    """에러 코드/메시지를 담는 최소 단위"""
    code: str = Field(..., description="에러 식별 코드 (예: STORE_REQUEST_FAILED)")
    message: str = Field(..., description="사람이 읽을 수 있는 에러 메시지")

class ErrorResponse(BaseModel):
    """
    전역 에러 핸들러에서 내려주는 표준 에러 응답
    - retryable: 클라이언트가 '다시 시도' 버튼을 보여줄지 여부
      (설정 누락은 재시도로 해결되지 않으므로 False)
    """
    error: ErrorDetail
    retryable: bool = False
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="응답 생성 시각 (UTC)"
    )

    model_config = ConfigDict(extra="ignore")


# =========================================================
# 2) 성공 응답
# =========================================================

def ok(data: Any, message: Optional[str] = None) -> dict:
    """라우터 공통 성공 응답 포맷 {success, data, message}"""
    return {"success": True, "data": data, "message": message}
