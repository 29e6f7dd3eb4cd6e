# Catalog store module
from .memory import MemoryStore, PlaybackStats, store, get_store
