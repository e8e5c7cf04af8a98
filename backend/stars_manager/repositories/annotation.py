"""Repository for local repository annotations."""

from typing import Dict, Iterable, Optional

from pymongo.database import Database

from stars_manager.entities.annotation import RepoAnnotation

from .base import OwnerScopedRepository


class RepoAnnotationRepository(OwnerScopedRepository[RepoAnnotation]):
    def __init__(self, db: Database):
        super().__init__(db, "repo_annotations", RepoAnnotation)

    def find_by_repo(self, owner_login: str, repo_id: int) -> Optional[RepoAnnotation]:
        return self.find_one_for_owner(owner_login, id=repo_id)

    def find_map_by_owner(self, owner_login: str) -> Dict[int, RepoAnnotation]:
        return {annotation.id: annotation for annotation in self.find_for_owner(owner_login)}

    def upsert(self, annotation: RepoAnnotation) -> None:
        self.upsert_for_owner(
            annotation.owner_login,
            annotation.model_dump(exclude={"owner_login"}),
            id=annotation.id,
        )

    def delete(self, owner_login: str, repo_id: int) -> bool:
        return self.delete_for_owner(owner_login, id=repo_id) > 0

    def delete_except(self, owner_login: str, keep_ids: Iterable[int]) -> int:
        """Delete the owner's annotations for repos outside `keep_ids`."""
        return self.delete_for_owner(owner_login, id={"$nin": list(keep_ids)})
