from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from dependencies.store import get_store
from services.auth import authenticate_student, check_admin_pin, issue_student_token
from services.store_client import RemoteStoreClient

router = APIRouter(prefix="/auth", tags=["인증"])

# ✅ 요청 형식 정의
class AdminLoginRequest(BaseModel):
    pin: str

class StudentLoginRequest(BaseModel):
    login_id: str
    password: str

# ✅ 응답 형식 정의
class LoginResponse(BaseModel):
    role: str
    id: str | None = None
    name: str | None = None
    token: str | None = None                 # 학생 화면 요청 시 Bearer 로 사용


# ✅ [LOGIN] 원장(관리자) 로그인
@router.post("/admin", response_model=LoginResponse)
def admin_login(request: AdminLoginRequest):
    if check_admin_pin(request.pin):
        return {"role": "admin"}
    raise HTTPException(status_code=401, detail="비밀번호가 올바르지 않습니다.")


# ✅ [LOGIN] 학생 로그인
@router.post("/student", response_model=LoginResponse)
def student_login(request: StudentLoginRequest, store: RemoteStoreClient = Depends(get_store)):
    student = authenticate_student(store, request.login_id, request.password)
    if student is None:
        raise HTTPException(status_code=401, detail="아이디 또는 비밀번호가 올바르지 않습니다.")
    return {
        "role": "student",
        "id": student.id,
        "name": student.name,
        "token": issue_student_token(student.id),
    }
