from .fan_in import FanIn
from .record_locks import RecordLockManager

__all__ = ["FanIn", "RecordLockManager"]
