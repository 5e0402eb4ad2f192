from functools import lru_cache

from config.settings import settings
from services.snapshot import SnapshotService
from services.store_client import RemoteStoreClient


# ✅ 설정이 없으면 StoreConfigError (lru_cache 는 예외를 캐시하지 않음)
@lru_cache
def get_store() -> RemoteStoreClient:
    return RemoteStoreClient.from_settings(settings)


@lru_cache
def get_snapshot_service() -> SnapshotService:
    return SnapshotService(get_store())
