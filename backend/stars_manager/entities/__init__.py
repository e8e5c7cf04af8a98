from .annotation import RepoAnnotation
from .enums import RepoCategory
from .starred_repo import LOCAL_FIELDS, StarredRepo

__all__ = [
    "RepoAnnotation",
    "RepoCategory",
    "StarredRepo",
    "LOCAL_FIELDS",
]
