"""
services/store_client.py

원격 저장소(Supabase/PostgREST) REST 클라이언트.
- 테이블 단위로 select / insert / update / delete 제공
- 필터는 `field=eq.value` 형식의 완전 일치 조건만 지원
- 실패 응답은 모두 StoreRequestError 로 통일 (메시지 = 원격 응답 본문)
"""

import logging
from typing import Any, Dict, List, Optional, Union

import httpx

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class StoreConfigError(RuntimeError):
    """접속 정보(URL/키)가 없어 저장소를 쓸 수 없음. 재시도로 해결되지 않음."""


class StoreRequestError(RuntimeError):
    """네트워크 오류 또는 원격 측 거부. 재시도 가능."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def eq_filters(match: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """{"id": 3} → {"id": "eq.3"}"""
    return {k: f"eq.{v}" for k, v in (match or {}).items()}


class TableClient:
    def __init__(self, store: "RemoteStoreClient", table: str):
        self.store = store
        self.table = table

    def select(self, columns: str = "*", filters: Optional[Dict[str, Any]] = None) -> List[Row]:
        params = {"select": columns, **eq_filters(filters)}
        return self.store.request("GET", self.table, params=params).json()

    def insert(self, data: Union[Row, List[Row]]) -> List[Row]:
        rows = data if isinstance(data, list) else [data]
        return self.store.request("POST", self.table, json=rows).json()

    def update(self, data: Row, match: Dict[str, Any]) -> List[Row]:
        if not match:
            raise ValueError("update 에는 최소 한 개의 일치 조건이 필요합니다")
        return self.store.request("PATCH", self.table, params=eq_filters(match), json=data).json()

    def delete(self, match: Dict[str, Any]) -> bool:
        if not match:
            raise ValueError("delete 에는 최소 한 개의 일치 조건이 필요합니다")
        self.store.request("DELETE", self.table, params=eq_filters(match))
        return True


class RemoteStoreClient:
    def __init__(
        self,
        base_url: Optional[str],
        api_key: Optional[str],
        timeout: int = 10,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not base_url or not api_key:
            raise StoreConfigError(
                "환경 변수가 설정되지 않았습니다. SUPABASE_URL과 SUPABASE_ANON_KEY를 확인하세요."
            )
        self.base = f"{base_url.rstrip('/')}/rest/v1"
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }
        self.timeout = timeout
        self.transport = transport  # 테스트에서 httpx.MockTransport 주입

    @classmethod
    def from_settings(cls, settings) -> "RemoteStoreClient":
        return cls(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY, timeout=settings.STORE_TIMEOUT)

    def table(self, name: str) -> TableClient:
        return TableClient(self, name)

    def request(self, method: str, table: str, params=None, json=None) -> httpx.Response:
        url = f"{self.base}/{table}"
        logger.debug("%s %s params=%s", method, url, params)
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                r = client.request(method, url, params=params, json=json, headers=self.headers)
        except httpx.HTTPError as e:
            logger.warning("저장소 요청 실패: %s %s (%s)", method, table, e)
            raise StoreRequestError(str(e)) from e

        if r.is_error:
            logger.warning("저장소 응답 오류: %s %s → %s", method, table, r.status_code)
            raise StoreRequestError(r.text, status_code=r.status_code)
        return r
