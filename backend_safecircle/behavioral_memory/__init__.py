"""
Behavioral memory: remembers the last low-risk scenario and its safer action.

Public API: MemoryRecord, MemoryStore.
"""

from backend_safecircle.behavioral_memory.models import MemoryRecord
from backend_safecircle.behavioral_memory.store import MemoryStore

__all__ = ["MemoryRecord", "MemoryStore"]
