from typing import Optional, Annotated
from fastapi import Header, HTTPException
from services.auth import check_admin_pin, verify_student_token

AuthHeader = Annotated[Optional[str], Header(alias="Authorization")]

def _bearer(authorization: Optional[str]) -> str:
    if not authorization:
        raise HTTPException(
            status_code=401,
            detail="Missing Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # "Bearer <credential>" 파싱
    try:
        scheme, credential = authorization.split(" ", 1)
    except ValueError:
        raise HTTPException(
            status_code=401,
            detail="Invalid Authorization header format",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if scheme.lower() != "bearer":
        raise HTTPException(
            status_code=401,
            detail="Invalid auth scheme",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credential.strip()

def require_admin(authorization: AuthHeader = None):
    if not check_admin_pin(_bearer(authorization)):
        raise HTTPException(
            status_code=401,
            detail="비밀번호가 올바르지 않습니다.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {"role": "admin"}

# 경로의 student_id 와 토큰의 학생이 같아야 함 (관리자 PIN 은 통과)
def require_student(student_id: str, authorization: AuthHeader = None):
    credential = _bearer(authorization)
    if check_admin_pin(credential):
        return {"role": "admin"}

    token_student = verify_student_token(credential)
    if token_student is None:
        raise HTTPException(
            status_code=401,
            detail="로그인이 만료되었거나 올바르지 않습니다.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if token_student != student_id:
        raise HTTPException(status_code=403, detail="다른 학생의 정보는 볼 수 없습니다.")

    return {"role": "student", "id": token_student}
