"""Errors that abort a sync run."""

from __future__ import annotations

from stars_manager.services.sync.state import SyncPhase


class SyncError(Exception):
    """A hard failure; the run stops and reports this message."""

    phase: SyncPhase = SyncPhase.IDLE

    def __init__(self, message: str, phase: SyncPhase | None = None):
        super().__init__(message)
        if phase is not None:
            self.phase = phase


class EstimationError(SyncError):
    phase = SyncPhase.ESTIMATING


class CollectionError(SyncError):
    phase = SyncPhase.COLLECTING


class PersistenceError(SyncError):
    phase = SyncPhase.PERSISTING
