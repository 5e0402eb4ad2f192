import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from schemas.common import ErrorDetail, ErrorResponse
from services.store_client import StoreConfigError, StoreRequestError

logger = logging.getLogger(__name__)


def _error(status_code: int, code: str, message: str, retryable: bool) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message), retryable=retryable)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def add_error_handlers(app: FastAPI):
    # 설정 누락: 재시도로 해결되지 않음
    @app.exception_handler(StoreConfigError)
    async def store_config_handler(request: Request, exc: StoreConfigError):
        logger.error("저장소 설정 누락: %s", exc)
        return _error(503, "STORE_NOT_CONFIGURED", str(exc), retryable=False)

    # 네트워크/원격 거부: '다시 시도' 가능
    @app.exception_handler(StoreRequestError)
    async def store_request_handler(request: Request, exc: StoreRequestError):
        return _error(502, "STORE_REQUEST_FAILED", f"DB 연결 실패: {exc}", retryable=True)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("처리되지 않은 예외: %s %s", request.method, request.url.path)
        return _error(500, "INTERNAL_ERROR", str(exc), retryable=False)
