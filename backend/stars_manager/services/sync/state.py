"""Ephemeral state of one in-flight synchronization."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SyncPhase(str, Enum):
    IDLE = "idle"
    ESTIMATING = "estimating"
    COLLECTING = "collecting"
    MERGING = "merging"
    PERSISTING = "persisting"
    COMPLETE = "complete"
    ERROR = "error"


_ORDER = [
    SyncPhase.IDLE,
    SyncPhase.ESTIMATING,
    SyncPhase.COLLECTING,
    SyncPhase.MERGING,
    SyncPhase.PERSISTING,
    SyncPhase.COMPLETE,
]


@dataclass
class SyncState:
    """
    Owned by exactly one orchestrator run; never shared between runs.

    `processed` is written by many collector workers, always under the
    progress reporter's lock.
    """

    phase: SyncPhase = SyncPhase.IDLE
    total: Optional[int] = None
    processed: int = 0
    merged_count: Optional[int] = None
    error: Optional[Exception] = None
    failed_phase: Optional[SyncPhase] = None

    def advance(self, phase: SyncPhase) -> None:
        """Move forward one step; states are never re-entered."""
        if self.phase in (SyncPhase.COMPLETE, SyncPhase.ERROR):
            raise RuntimeError(f"Sync already finished ({self.phase.value})")
        if _ORDER.index(phase) != _ORDER.index(self.phase) + 1:
            raise RuntimeError(
                f"Illegal sync transition {self.phase.value} -> {phase.value}"
            )
        self.phase = phase

    def set_total(self, total: int) -> None:
        if self.total is not None:
            raise RuntimeError("Sync total is already known")
        self.total = total

    def complete(self, merged_count: int) -> None:
        self.advance(SyncPhase.COMPLETE)
        self.merged_count = merged_count

    def fail(self, error: Exception) -> None:
        if self.phase in (SyncPhase.COMPLETE, SyncPhase.ERROR):
            raise RuntimeError(f"Sync already finished ({self.phase.value})")
        self.failed_phase = self.phase
        self.phase = SyncPhase.ERROR
        self.error = error

    @property
    def succeeded(self) -> bool:
        return self.phase == SyncPhase.COMPLETE
