from infra.database.memory import MemoryStore, PlaybackStats

class StatsRepository:
    def __init__(self, store: MemoryStore):
        self.store = store

    def get(self) -> PlaybackStats:
        return self.store.stats

    def increment_plays(self) -> int:
        self.store.stats.total_plays += 1
        return self.store.stats.total_plays

    def increment_downloads(self) -> int:
        self.store.stats.total_downloads += 1
        return self.store.stats.total_downloads
