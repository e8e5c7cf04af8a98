"""Repository layer for database operations"""

from .annotation import RepoAnnotationRepository
from .base import OwnerScopedRepository
from .starred_repo import StarredRepoRepository
from .sync_meta import SyncMeta, SyncMetaRepository

__all__ = [
    "OwnerScopedRepository",
    "RepoAnnotationRepository",
    "StarredRepoRepository",
    "SyncMeta",
    "SyncMetaRepository",
]
