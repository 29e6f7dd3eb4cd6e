import asyncio
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from config import settings
from domain.models.track import Track
from infra.storage.object_storage import BackupStorage
from utils.logger import get_logger

logger = get_logger(__name__)

class UrlRefreshAppService:
    """
    署名付きURLの期限切れ対策。
    一覧取得時に古くなったレコードのバックアップURLを再発行する。
    """
    def __init__(
        self,
        backup: BackupStorage,
        threshold_days: Optional[float] = None,
        reference: Optional[str] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.backup = backup
        self.threshold = timedelta(days=threshold_days if threshold_days is not None else settings.URL_REFRESH_THRESHOLD_DAYS)
        self.reference = reference or settings.URL_STALENESS_REFERENCE
        self.clock = clock

    def is_stale(self, track: Track, now: Optional[datetime] = None) -> bool:
        if not track.has_backup:
            return False

        now = now or self.clock()
        # "uploaded" はアップロード日時のみを基準にする旧挙動
        if self.reference == "uploaded":
            since = track.uploaded_at
        else:
            since = track.url_refreshed_at or track.uploaded_at
        return now - since > self.threshold

    async def refresh_stale(self, tracks: List[Track]) -> List[Track]:
        """
        古いレコードを並行して再発行する。
        1件の失敗は他のレコードに影響しない (失敗したレコードはそのまま返す)。
        """
        now = self.clock()
        stale = [t for t in tracks if self.is_stale(t, now)]
        if stale:
            await asyncio.gather(*(self._refresh_isolated(t) for t in stale))
        return tracks

    async def refresh(self, track: Track) -> Track:
        """明示的な再発行。何度呼んでも新しいURLが発行されるだけ。エラーは呼び出し元へ"""
        if not track.has_backup:
            return track

        # 片方が失敗しても、もう片方の署名が終わるまで待ってから失敗させる
        results = await asyncio.gather(
            self._sign(track.backup_audio_key),
            self._sign(track.backup_image_key),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        audio_url, image_url = results
        if track.backup_audio_key:
            track.backup_audio_url = audio_url
        if track.backup_image_key:
            track.backup_image_url = image_url
        track.url_refreshed_at = self.clock()
        return track

    async def _refresh_isolated(self, track: Track):
        try:
            await self.refresh(track)
            logger.info(f"Refreshed signed URLs for {track.id}")
        except Exception as e:
            logger.warning(f"Failed to refresh signed URLs for {track.id}: {e}")

    async def _sign(self, key: Optional[str]) -> Optional[str]:
        if not key:
            return None
        return await self.backup.generate_signed_url(key)
