from dataclasses import dataclass, field
from typing import List
from domain.models.track import Track

@dataclass
class PlaybackStats:
    total_plays: int = 0
    total_downloads: int = 0

@dataclass
class MemoryStore:
    """
    プロセス内で唯一のカタログストア。
    永続化はされず、再起動で空になる。複数プロセス構成では外部DBへの置き換えが必要。
    """
    tracks: List[Track] = field(default_factory=list)
    stats: PlaybackStats = field(default_factory=PlaybackStats)

    def clear(self):
        self.tracks.clear()
        self.stats = PlaybackStats()

# アプリケーション全体で共有するインスタンス
store = MemoryStore()

def get_store() -> MemoryStore:
    return store
