from .collector import DetailCollector
from .estimator import CountEstimator
from .exceptions import CollectionError, EstimationError, PersistenceError, SyncError
from .merge import merge_snapshots
from .orchestrator import SyncOrchestrator
from .progress import (
    NullProgressSink,
    ProgressSink,
    QueuedProgressSink,
    SyncProgressReporter,
    collection_percentage,
)
from .state import SyncPhase, SyncState

__all__ = [
    "CountEstimator",
    "DetailCollector",
    "SyncOrchestrator",
    "SyncProgressReporter",
    "NullProgressSink",
    "ProgressSink",
    "QueuedProgressSink",
    "collection_percentage",
    "merge_snapshots",
    "SyncPhase",
    "SyncState",
    "SyncError",
    "EstimationError",
    "CollectionError",
    "PersistenceError",
]
