"""Event processing infrastructure: reading the log, dispatching and checkpointing."""

from .checkpoint import Checkpoint, CheckpointBackend, InMemoryCheckpointBackend
from .config import ErrorPolicy, ReactorSettings
from .dispatcher import Dispatcher, Handler
from .log import EventLog, InMemoryEventLog
from .loop import BatchResult, ReactorLoop

__all__ = [
    "Dispatcher",
    "Handler",
    "EventLog",
    "InMemoryEventLog",
    "Checkpoint",
    "CheckpointBackend",
    "InMemoryCheckpointBackend",
    "ReactorSettings",
    "ErrorPolicy",
    "ReactorLoop",
    "BatchResult",
]
