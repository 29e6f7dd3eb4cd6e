from infra.database.memory import MemoryStore
from infra.repositories.stats_repository import StatsRepository
from infra.repositories.track_repository import TrackRepository
from domain.models.track import Track

def make_track(name: str, category: str) -> Track:
    return Track(
        name=name,
        artist="Artist",
        category=category,
        local_audio_path=f"/uploads/audio/{name}.mp3",
        local_image_path=f"/uploads/images/{name}.jpg",
    )

def test_find_all_keeps_insertion_order(store: MemoryStore):
    repo = TrackRepository(store)
    for name, category in [("b", "rock"), ("a", "pop"), ("c", "rock")]:
        repo.insert(make_track(name, category))

    assert [t.name for t in repo.find_all()] == ["b", "a", "c"]
    assert [t.name for t in repo.find_all("all")] == ["b", "a", "c"]
    assert [t.name for t in repo.find_all("")] == ["b", "a", "c"]

def test_find_all_filters_by_exact_category(store: MemoryStore):
    repo = TrackRepository(store)
    repo.insert(make_track("b", "rock"))
    repo.insert(make_track("a", "pop"))
    repo.insert(make_track("c", "rock"))

    assert [t.name for t in repo.find_all("rock")] == ["b", "c"]
    # フィルタ値は正規化しない (大文字や空白を含むと一致しない)
    assert repo.find_all("Rock") == []
    assert repo.find_all(" rock ") == []
    assert repo.find_all("ALL") == []
    assert repo.find_all("jazz") == []

def test_get_by_id_and_remove(store: MemoryStore):
    repo = TrackRepository(store)
    t1 = repo.insert(make_track("one", "pop"))
    t2 = repo.insert(make_track("two", "pop"))

    assert repo.get_by_id(t2.id) is t2
    assert repo.get_by_id("missing") is None

    removed = repo.remove(t1.id)
    assert removed is t1
    assert repo.remove(t1.id) is None
    assert repo.count() == 1
    assert [t.id for t in repo.find_all()] == [t2.id]

def test_track_ids_are_unique():
    ids = {make_track(str(i), "pop").id for i in range(200)}
    assert len(ids) == 200

def test_stats_counters_are_monotonic(store: MemoryStore):
    stats = StatsRepository(store)
    assert stats.increment_plays() == 1
    assert stats.increment_plays() == 2
    assert stats.increment_downloads() == 1
    assert stats.get().total_plays == 2
    assert stats.get().total_downloads == 1
