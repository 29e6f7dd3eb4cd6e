from typing import Any, Dict, List, Optional

from domain.exceptions import TrackNotFoundError
from domain.models.track import Track
from domain.models.upload import DeleteResult
from infra.repositories.stats_repository import StatsRepository
from infra.repositories.track_repository import TrackRepository
from infra.storage.local_file_store import LocalFileStore
from infra.storage.object_storage import BackupStorage
from app.services.url_refresh_app_service import UrlRefreshAppService
from utils.logger import get_logger

logger = get_logger(__name__)

class TrackAppService:
    def __init__(
        self,
        repository: TrackRepository,
        stats_repository: StatsRepository,
        file_store: LocalFileStore,
        backup: BackupStorage,
        url_refresher: Optional[UrlRefreshAppService] = None,
    ):
        self.repository = repository
        self.stats_repository = stats_repository
        self.file_store = file_store
        self.backup = backup
        self.url_refresher = url_refresher or UrlRefreshAppService(backup)

    async def list_tracks(self, category: Optional[str] = None) -> List[Track]:
        tracks = self.repository.find_all(category)
        return await self.url_refresher.refresh_stale(tracks)

    async def get_track(self, track_id: str) -> Track:
        track = self._require(track_id)
        await self.url_refresher.refresh_stale([track])
        return track

    async def refresh_urls(self, track_id: str) -> Track:
        track = self._require(track_id)
        return await self.url_refresher.refresh(track)

    async def delete_track(self, track_id: str) -> DeleteResult:
        """
        ローカルファイルとバックアップをベストエフォートで削除してからカタログから外す。
        途中で失敗してもレコードは削除し、失敗内容を warnings として返す。
        """
        track = self._require(track_id)
        warnings: List[str] = []

        # 1. ローカルファイル (存在しなくてもエラーにしない)
        for public_path in (track.local_audio_path, track.local_image_path):
            try:
                await self.file_store.delete(public_path)
            except Exception as e:
                logger.warning(f"Error deleting local file {public_path}: {e}")
                warnings.append(f"Failed to delete local file {public_path}")

        # 2. バックアップ (キーがある場合のみ)
        for key in (track.backup_audio_key, track.backup_image_key):
            if not key:
                continue
            try:
                await self.backup.delete(key)
            except Exception as e:
                logger.warning(f"Error deleting backup object {key}: {e}")
                warnings.append(f"Failed to delete backup object {key}")

        self.repository.remove(track_id)
        logger.info(f"Song deleted: {track.name} ({track.id})")
        return DeleteResult(track=track, warnings=warnings)

    def record_play(self, track_id: str) -> int:
        # IDの存在確認はしない
        return self.stats_repository.increment_plays()

    def record_download(self, track_id: str) -> str:
        self.stats_repository.increment_downloads()
        track = self._require(track_id)
        return track.local_audio_path

    def get_stats(self) -> Dict[str, Any]:
        stats = self.stats_repository.get()
        return {
            "total_songs": self.repository.count(),
            "total_plays": stats.total_plays,
            "total_downloads": stats.total_downloads,
            # 日別のアップロード数は記録していない
            "today_uploads": 0,
        }

    def _require(self, track_id: str) -> Track:
        track = self.repository.get_by_id(track_id)
        if not track:
            raise TrackNotFoundError(track_id)
        return track
