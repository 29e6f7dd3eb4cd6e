from typing import List, Optional

from domain.constants import CATEGORY_ALL
from domain.models.track import Track
from infra.database.memory import MemoryStore

def normalize_category(category: str) -> str:
    return category.strip().lower()

class TrackRepository:
    """
    インメモリのカタログ。挿入順を保持し、IDでの検索は線形探索。
    """
    def __init__(self, store: MemoryStore):
        self.store = store

    def find_all(self, category: Optional[str] = None) -> List[Track]:
        if not category or category == CATEGORY_ALL:
            return list(self.store.tracks)

        # 保存側は小文字化済み。フィルタ値はそのまま完全一致で比較する
        return [t for t in self.store.tracks if t.category == category]

    def get_by_id(self, track_id: str) -> Optional[Track]:
        for track in self.store.tracks:
            if track.id == track_id:
                return track
        return None

    def insert(self, track: Track) -> Track:
        self.store.tracks.append(track)
        return track

    def remove(self, track_id: str) -> Optional[Track]:
        for i, track in enumerate(self.store.tracks):
            if track.id == track_id:
                return self.store.tracks.pop(i)
        return None

    def count(self) -> int:
        return len(self.store.tracks)
