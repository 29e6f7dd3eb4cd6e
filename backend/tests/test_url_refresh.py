import pytest
from datetime import datetime, timedelta
from app.services.url_refresh_app_service import UrlRefreshAppService
from domain.exceptions import BackupStorageError
from domain.models.track import Track

NOW = datetime(2026, 10, 19, 12, 0, 0)

def make_track(days_old: float, refreshed_days_ago: float = None, with_backup: bool = True) -> Track:
    track = Track(
        name="Song",
        artist="Artist",
        category="pop",
        local_audio_path="/uploads/audio/x.mp3",
        local_image_path="/uploads/images/x.jpg",
        uploaded_at=NOW - timedelta(days=days_old),
    )
    if refreshed_days_ago is not None:
        track.url_refreshed_at = NOW - timedelta(days=refreshed_days_ago)
    if with_backup:
        track.backup_audio_key = f"songs/audio/{track.id}.mp3"
        track.backup_image_key = f"songs/images/{track.id}.jpg"
        track.backup_audio_url = "https://old/audio"
        track.backup_image_url = "https://old/image"
    return track

@pytest.fixture
def refresher(backup):
    return UrlRefreshAppService(backup, threshold_days=6, reference="refreshed", clock=lambda: NOW)

def test_is_stale_threshold(refresher):
    assert not refresher.is_stale(make_track(days_old=1))
    assert not refresher.is_stale(make_track(days_old=6))
    assert refresher.is_stale(make_track(days_old=6.5))
    # バックアップが無いレコードは再発行の対象外
    assert not refresher.is_stale(make_track(days_old=30, with_backup=False))

def test_is_stale_measures_from_last_refresh(refresher):
    track = make_track(days_old=20, refreshed_days_ago=1)
    assert not refresher.is_stale(track)

def test_is_stale_legacy_reference_uses_upload_date(backup):
    legacy = UrlRefreshAppService(backup, threshold_days=6, reference="uploaded", clock=lambda: NOW)
    track = make_track(days_old=20, refreshed_days_ago=1)
    assert legacy.is_stale(track)

@pytest.mark.asyncio
async def test_refresh_stale_updates_only_old_records(refresher, backup):
    old = make_track(days_old=7)
    fresh = make_track(days_old=1)

    result = await refresher.refresh_stale([old, fresh])

    assert result == [old, fresh]
    assert old.url_refreshed_at == NOW
    assert old.backup_audio_url.startswith("https://backup.example.com/songs/audio/")
    assert old.backup_image_url.startswith("https://backup.example.com/songs/images/")
    assert fresh.url_refreshed_at is None
    assert fresh.backup_audio_url == "https://old/audio"
    assert sorted(backup.sign_calls) == sorted([old.backup_audio_key, old.backup_image_key])

@pytest.mark.asyncio
async def test_refresh_failure_is_isolated(refresher, backup):
    broken = make_track(days_old=8)
    healthy = make_track(days_old=8)
    backup.fail_sign_keys.add(broken.backup_audio_key)

    await refresher.refresh_stale([broken, healthy])

    assert broken.url_refreshed_at is None
    assert broken.backup_audio_url == "https://old/audio"
    assert broken.backup_image_url == "https://old/image"
    assert healthy.url_refreshed_at == NOW

@pytest.mark.asyncio
async def test_explicit_refresh_is_repeatable(refresher, backup):
    track = make_track(days_old=1)

    await refresher.refresh(track)
    first_url = track.backup_audio_url
    await refresher.refresh(track)

    assert track.backup_audio_url != first_url
    assert track.url_refreshed_at == NOW
    assert len(backup.sign_calls) == 4

@pytest.mark.asyncio
async def test_explicit_refresh_propagates_errors(refresher, backup):
    track = make_track(days_old=1)
    backup.fail_sign_keys.add(track.backup_image_key)

    with pytest.raises(BackupStorageError):
        await refresher.refresh(track)
    assert track.url_refreshed_at is None

@pytest.mark.asyncio
async def test_explicit_refresh_waits_for_sibling_before_failing(refresher, backup):
    track = make_track(days_old=1)
    backup.fail_sign_keys.add(track.backup_audio_key)

    with pytest.raises(BackupStorageError, match="cannot sign"):
        await refresher.refresh(track)

    # 画像側の署名は完了しているが、レコードは一切更新されない
    assert backup.sign_calls == [track.backup_image_key]
    assert track.backup_audio_url == "https://old/audio"
    assert track.backup_image_url == "https://old/image"
    assert track.url_refreshed_at is None

@pytest.mark.asyncio
async def test_explicit_refresh_without_backup_is_noop(refresher, backup):
    track = make_track(days_old=10, with_backup=False)

    assert await refresher.refresh(track) is track
    assert track.url_refreshed_at is None
    assert backup.sign_calls == []
