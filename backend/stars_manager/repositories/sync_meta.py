"""Repository for per-user sync bookkeeping (last sync time, snapshot marker)."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel
from pymongo.database import Database

from .base import OwnerScopedRepository


class SyncMeta(BaseModel):
    owner_login: str
    last_sync_at: Optional[datetime] = None
    # Set by every snapshot save, including an empty one
    snapshot_saved_at: Optional[datetime] = None
    snapshot_size: int = 0


class SyncMetaRepository(OwnerScopedRepository[SyncMeta]):
    def __init__(self, db: Database):
        super().__init__(db, "sync_meta", SyncMeta)

    def get_last_sync(self, owner_login: str) -> Optional[datetime]:
        meta = self.find_one_for_owner(owner_login)
        return meta.last_sync_at if meta else None

    def set_last_sync(self, owner_login: str, synced_at: datetime) -> None:
        self.upsert_for_owner(owner_login, {"last_sync_at": synced_at})

    def has_snapshot(self, owner_login: str) -> bool:
        meta = self.find_one_for_owner(owner_login)
        return meta is not None and meta.snapshot_saved_at is not None

    def mark_snapshot_saved(self, owner_login: str, size: int, saved_at: datetime) -> None:
        self.upsert_for_owner(
            owner_login, {"snapshot_saved_at": saved_at, "snapshot_size": size}
        )
