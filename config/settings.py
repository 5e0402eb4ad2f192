"""
config/settings.py

- .env에 정의한 환경변수를 읽어 애플리케이션 전역 설정으로 제공합니다.
- pydantic v2 / pydantic-settings v2 사용.
- 원격 저장소(Supabase REST) 접속 정보는 import 시점에 필수로 검사하지 않습니다.
  값이 비어 있으면 첫 사용 시 StoreConfigError 로 드러납니다(복구 불가 오류).
"""

import secrets
from typing import List, Optional, Literal
from pydantic import Field, field_validator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # =========================
    # 앱/런타임
    # =========================
    ENV: Literal["dev", "stage", "prod"] = "dev"
    APP_TITLE: str = "Test Manager API"
    APP_DESCRIPTION: str = "학원 테스트 결과·재시험 일정 관리 백엔드 API"
    APP_VERSION: str = "1.0.0"

    # =========================
    # CORS
    # =========================
    # 콤마(,)로 구분된 문자열 → List[str] 로 파싱
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, v):
        if isinstance(v, str):
            # "a,b , c" → ["a","b","c"]
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    # =========================
    # 원격 저장소 (Supabase REST)
    # =========================
    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[str] = None
    STORE_TIMEOUT: int = 10

    @computed_field  # type: ignore[misc]
    @property
    def STORE_CONFIGURED(self) -> bool:
        """URL과 키가 모두 있어야 저장소에 접속할 수 있음"""
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY)

    # =========================
    # 인증
    # =========================
    ADMIN_PIN: str = "1234"
    DEFAULT_STUDENT_PASSWORD: str = "0000"
    # 학생 토큰 서명 키. 비워 두면 프로세스 시작 시 임의 생성 (재시작하면 기존 토큰 무효)
    SESSION_SECRET: str = Field(default_factory=lambda: secrets.token_hex(32))
    STUDENT_TOKEN_TTL_HOURS: int = 12

    # =========================
    # Logging
    # =========================
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # =========================
    # BaseSettings Config
    # =========================
    model_config = SettingsConfigDict(
        env_file=".env",               # .env에서 값 로드
        env_file_encoding="utf-8",
        case_sensitive=False,          # 환경변수 대소문자 비구분
        extra="ignore",                # 정의되지 않은 키는 무시
    )


# ✅ settings 객체를 통해 어디서든 접근 가능
settings = Settings()
