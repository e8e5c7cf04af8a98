"""Reconcile freshly collected repositories with the stored snapshot."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Set

from stars_manager.entities.starred_repo import StarredRepo


def merge_snapshots(
    remote: Sequence[StarredRepo],
    prior: Sequence[StarredRepo],
    on_merged: Optional[Callable[[int, int], None]] = None,
) -> List[StarredRepo]:
    """
    Remote fields always come from `remote`. Local fields come from `prior`
    for repositories it already knows and are empty for new ones. Anything
    in `prior` but not in `remote` is dropped.
    """
    prior_by_id: Dict[int, StarredRepo] = {repo.id: repo for repo in prior}
    merged: List[StarredRepo] = []
    seen: Set[int] = set()
    total = len(remote)

    for index, repo in enumerate(remote, start=1):
        if repo.id not in seen:
            seen.add(repo.id)
            existing = prior_by_id.get(repo.id)
            if existing is None:
                merged.append(repo.without_local_fields())
            else:
                merged.append(
                    repo.with_local_fields(
                        tag=existing.tag,
                        category=existing.category,
                        ai_description=existing.ai_description,
                    )
                )
        if on_merged is not None:
            on_merged(index, total)

    return merged
