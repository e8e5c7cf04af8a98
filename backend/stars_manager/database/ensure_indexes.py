"""Database index management for MongoDB collections."""

import logging

from pymongo.database import Database
from pymongo.errors import OperationFailure

logger = logging.getLogger(__name__)


def ensure_indexes(db: Database) -> None:
    """
    Ensure all required indexes exist.

    Called on application startup. Both per-user collections are keyed by
    (owner_login, id) so a re-sync upserts instead of duplicating items.
    """
    _ensure_unique_owner_index(db, "starred_repos", "owner_repo_unique")
    _ensure_unique_owner_index(db, "repo_annotations", "owner_annotation_unique")
    _ensure_starred_order_index(db)
    logger.info("Database indexes ensured successfully")


def _ensure_unique_owner_index(db: Database, collection_name: str, name: str) -> None:
    try:
        db[collection_name].create_index(
            [("owner_login", 1), ("id", 1)],
            unique=True,
            background=True,
            name=name,
        )
        logger.debug(f"Created index: {name}")
    except OperationFailure as e:
        # Index may already exist with different options
        if "already exists" not in str(e):
            logger.warning(f"Failed to create {name} index: {e}")


def _ensure_starred_order_index(db: Database) -> None:
    """Snapshot loads read items back in stored order."""
    try:
        db.starred_repos.create_index(
            [("owner_login", 1), ("position", 1)],
            background=True,
            name="owner_position_idx",
        )
        logger.debug("Created index: owner_position_idx")
    except OperationFailure as e:
        if "already exists" not in str(e):
            logger.warning(f"Failed to create owner_position_idx index: {e}")
