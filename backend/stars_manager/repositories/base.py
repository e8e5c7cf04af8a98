"""Base repository for per-user MongoDB collections"""

from __future__ import annotations

from abc import ABC
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from pydantic import BaseModel
from pymongo.collection import Collection
from pymongo.database import Database

T = TypeVar("T", bound=BaseModel)

# Bookkeeping keys that never reach the models
_STORAGE_KEYS = ("_id", "owner_login", "position")


class OwnerScopedRepository(ABC, Generic[T]):
    """
    Every document carries the GitHub login it belongs to.

    All queries go through `_scoped` so one user's data is never read or
    written on behalf of another.
    """

    def __init__(self, db: Database, collection_name: str, model_class: Type[T]):
        self.db = db
        self.collection: Collection = db[collection_name]
        self.model_class = model_class

    @staticmethod
    def _scoped(owner_login: str, **filters: Any) -> Dict[str, Any]:
        query: Dict[str, Any] = {"owner_login": owner_login}
        query.update(filters)
        return query

    def find_one_for_owner(self, owner_login: str, **filters: Any) -> Optional[T]:
        return self._to_model(self.collection.find_one(self._scoped(owner_login, **filters)))

    def find_for_owner(
        self,
        owner_login: str,
        sort: Optional[Sequence[Tuple[str, int]]] = None,
        **filters: Any,
    ) -> List[T]:
        cursor = self.collection.find(self._scoped(owner_login, **filters))
        if sort:
            cursor = cursor.sort(list(sort))
        return [model for model in map(self._to_model, cursor) if model is not None]

    def delete_for_owner(self, owner_login: str, **filters: Any) -> int:
        """Delete the owner's documents matching `filters`; returns how many went."""
        return self.collection.delete_many(self._scoped(owner_login, **filters)).deleted_count

    def upsert_for_owner(self, owner_login: str, fields: Dict[str, Any], **key: Any) -> None:
        """Set `fields` on the document identified by `key`, creating it if needed."""
        document = dict(fields, owner_login=owner_login)
        self.collection.update_one(
            self._scoped(owner_login, **key), {"$set": document}, upsert=True
        )

    def _to_model(self, doc: Optional[Dict[str, Any]]) -> Optional[T]:
        if not doc:
            return None
        data = {k: v for k, v in doc.items() if k not in _STORAGE_KEYS}
        if "owner_login" in self.model_class.model_fields:
            data["owner_login"] = doc.get("owner_login")
        return self.model_class.model_validate(data)
