"""Repository for the persisted starred-repository snapshot."""

from typing import List

from pymongo import DeleteMany, ReplaceOne
from pymongo.database import Database

from stars_manager.entities.starred_repo import LOCAL_FIELDS, StarredRepo

from .base import OwnerScopedRepository


class StarredRepoRepository(OwnerScopedRepository[StarredRepo]):
    """One document per (owner_login, repo id); `position` keeps snapshot order."""

    def __init__(self, db: Database):
        super().__init__(db, "starred_repos", StarredRepo)

    def find_by_owner(self, owner_login: str) -> List[StarredRepo]:
        return self.find_for_owner(owner_login, sort=[("position", 1)])

    def replace_snapshot(self, owner_login: str, repos: List[StarredRepo]) -> None:
        """Upsert every repo and drop the owner's repos that are no longer present."""
        operations = []
        for position, repo in enumerate(repos):
            # Local fields live in repo_annotations
            doc = repo.model_dump(exclude=set(LOCAL_FIELDS))
            doc["owner_login"] = owner_login
            doc["position"] = position
            operations.append(
                ReplaceOne(self._scoped(owner_login, id=repo.id), doc, upsert=True)
            )
        operations.append(
            DeleteMany(self._scoped(owner_login, id={"$nin": [repo.id for repo in repos]}))
        )
        self.collection.bulk_write(operations, ordered=True)
