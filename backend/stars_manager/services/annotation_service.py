"""Service for the user's local notes on starred repositories."""

import logging
from typing import List

from fastapi import HTTPException, status
from pymongo.database import Database

from stars_manager.dtos.repository import CategoryOption
from stars_manager.entities.annotation import RepoAnnotation
from stars_manager.entities.enums import RepoCategory
from stars_manager.repositories.annotation import RepoAnnotationRepository
from stars_manager.services.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


def list_categories() -> List[CategoryOption]:
    return [CategoryOption(value=c.value, label=c.label) for c in RepoCategory]


class AnnotationService:
    """
    Edits one annotation field at a time.

    A record is created by the first non-empty edit and deleted as soon as
    tag, category and AI description are all empty again.
    """

    def __init__(self, db: Database):
        self.repo = RepoAnnotationRepository(db)

    def update_tag(self, owner_login: str, repo_id: int, tag: str) -> RepoAnnotation:
        return self._update(owner_login, repo_id, tag=tag.strip())

    def update_category(self, owner_login: str, repo_id: int, category: str) -> RepoAnnotation:
        category = category.strip()
        if category and category not in {c.value for c in RepoCategory}:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Unknown category: {category}",
            )
        return self._update(owner_login, repo_id, category=category)

    def update_description(
        self, owner_login: str, repo_id: int, description: str
    ) -> RepoAnnotation:
        return self._update(owner_login, repo_id, ai_description=description.strip())

    def _update(self, owner_login: str, repo_id: int, **fields: str) -> RepoAnnotation:
        with SnapshotStore.lock:
            annotation = self.repo.find_by_repo(owner_login, repo_id) or RepoAnnotation(
                owner_login=owner_login, id=repo_id
            )
            annotation = annotation.model_copy(update=fields)

            if annotation.is_empty():
                self.repo.delete(owner_login, repo_id)
                logger.info(f"Cleared annotation for repo {repo_id} ({owner_login})")
            else:
                self.repo.upsert(annotation)
                logger.info(f"Updated annotation for repo {repo_id} ({owner_login})")
        return annotation
