"""
services/auth.py

비밀번호 해시/검증, 학생 토큰 발급/검증. 평문 비교는 하지 않음.
- 학생 비밀번호는 pbkdf2_sha256 해시로 students.pin 컬럼에 저장
- 해시로 인식되지 않는 값(예전 평문 데이터)은 항상 검증 실패
"""

import hashlib
import hmac
import logging
import time
from typing import Optional

from passlib.context import CryptContext

from config.settings import settings
from schemas.students import Student
from services.store_client import RemoteStoreClient

logger = logging.getLogger(__name__)

pwd_ctx = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_ctx.hash(password)


def check_password(password: str, expected_hash: Optional[str]) -> bool:
    if not expected_hash or pwd_ctx.identify(expected_hash) is None:
        return False
    return pwd_ctx.verify(password, expected_hash)


def check_admin_pin(pin: Optional[str]) -> bool:
    # 타이밍 안전 비교
    return bool(pin) and hmac.compare_digest(pin.encode(), settings.ADMIN_PIN.encode())


def authenticate_student(store: RemoteStoreClient, login_id: str, password: str) -> Optional[Student]:
    """아이디로 학생 한 명을 조회해 서버에서 비밀번호 검증"""
    rows = store.table("students").select(filters={"login_id": login_id.strip()})
    if not rows:
        logger.info("학생 로그인 실패: 없는 아이디 %s", login_id)
        return None
    student = Student.model_validate(rows[0])
    if not check_password(password, student.pin):
        logger.info("학생 로그인 실패: 비밀번호 불일치 %s", login_id)
        return None
    return student


# ==========================================================
# 학생 토큰: "<student_id>.<만료 epoch>.<HMAC-SHA256>"
# ==========================================================

def _sign(payload: str) -> str:
    return hmac.new(settings.SESSION_SECRET.encode(), payload.encode(), hashlib.sha256).hexdigest()


def issue_student_token(student_id: str, now: Optional[float] = None) -> str:
    expires = int((now if now is not None else time.time()) + settings.STUDENT_TOKEN_TTL_HOURS * 3600)
    payload = f"{student_id}.{expires}"
    return f"{payload}.{_sign(payload)}"


def verify_student_token(token: Optional[str], now: Optional[float] = None) -> Optional[str]:
    """서명과 만료를 확인하고 학생 ID 반환. 유효하지 않으면 None"""
    if not token:
        return None
    try:
        student_id, expires, signature = token.rsplit(".", 2)
        expires_at = int(expires)
    except ValueError:
        return None
    if not hmac.compare_digest(signature.encode(), _sign(f"{student_id}.{expires}").encode()):
        return None
    if expires_at < (now if now is not None else time.time()):
        return None
    return student_id
