import asyncio
from typing import List, Optional, Tuple

from config import settings
from domain.constants import (
    AUDIO_EXTENSION,
    AUDIO_FOLDER,
    BACKUP_KEY_PREFIX,
    CATEGORY_ALL,
    IMAGE_EXTENSION,
    IMAGE_FOLDER,
)
from domain.exceptions import BackupStorageError, LocalStorageError, ValidationError
from domain.models.track import Track, generate_track_id
from domain.models.upload import StorageOutcome, UploadPayload, UploadResult
from infra.repositories.track_repository import TrackRepository, normalize_category
from infra.storage.local_file_store import LocalFileStore
from infra.storage.object_storage import BackupStorage
from utils.logger import get_logger

logger = get_logger(__name__)

def backup_key(folder: str, filename: str) -> str:
    return f"{BACKUP_KEY_PREFIX}/{folder}/{filename}"

class UploadAppService:
    """
    アップロードパイプライン。
    ローカル保存が正本 (失敗したらアップロード全体が失敗)、
    バックアップはベストエフォート (失敗しても該当フィールドが None になるだけ)。
    """
    def __init__(
        self,
        repository: TrackRepository,
        file_store: LocalFileStore,
        backup: BackupStorage,
        max_upload_size: Optional[int] = None,
    ):
        self.repository = repository
        self.file_store = file_store
        self.backup = backup
        self.max_upload_size = max_upload_size or settings.MAX_UPLOAD_SIZE

    async def upload(
        self,
        audio: Optional[UploadPayload],
        image: Optional[UploadPayload],
        name: Optional[str],
        artist: Optional[str],
        category: Optional[str],
    ) -> UploadResult:
        self._validate(audio, image, name, artist, category)

        track_id = generate_track_id()
        audio_filename = f"{track_id}{AUDIO_EXTENSION}"
        image_filename = f"{track_id}{IMAGE_EXTENSION}"

        # 1. Primary File Store (ここが失敗したらレコードは作らない)
        try:
            local_audio_path, local_image_path = await self._save_locally(
                audio, audio_filename, image, image_filename
            )
        except LocalStorageError as e:
            logger.error(f"Upload failed, local storage error: {e.message}")
            return UploadResult(outcome=StorageOutcome.FAILED, errors=[e.message])

        # 2. Object Storage Backup (ベストエフォート)
        audio_key = backup_key(AUDIO_FOLDER, audio_filename)
        image_key = backup_key(IMAGE_FOLDER, image_filename)
        (audio_url, audio_error), (image_url, image_error) = await asyncio.gather(
            self._backup(audio, audio_key),
            self._backup(image, image_key),
        )
        errors = [e for e in (audio_error, image_error) if e]

        # 3. レコード作成 (全ての書き込みが終わってから一度に挿入する)
        track = Track(
            id=track_id,
            name=name.strip(),
            artist=artist.strip(),
            category=normalize_category(category),
            local_audio_path=local_audio_path,
            local_image_path=local_image_path,
            backup_audio_url=audio_url,
            backup_image_url=image_url,
            backup_audio_key=audio_key if audio_url else None,
            backup_image_key=image_key if image_url else None,
        )
        self.repository.insert(track)

        outcome = StorageOutcome.LOCAL_ONLY if errors else StorageOutcome.FULL
        logger.info(f"Song uploaded: {track.name} ({track.id}), backup={outcome.value}")
        return UploadResult(outcome=outcome, track=track, errors=errors)

    def _validate(self, audio, image, name, artist, category):
        missing = [
            label for label, value in (("songName", name), ("artistName", artist), ("category", category))
            if not value or not value.strip()
        ]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        # "all" は一覧フィルタの予約語
        if normalize_category(category) == CATEGORY_ALL:
            raise ValidationError(f"Category '{CATEGORY_ALL}' is reserved")

        for label, payload in (("songFile", audio), ("songImage", image)):
            if payload is None or payload.size == 0:
                raise ValidationError(f"Missing required file: {label}")
            if payload.size > self.max_upload_size:
                raise ValidationError(
                    f"{label} exceeds the maximum upload size of {self.max_upload_size} bytes"
                )

    async def _save_locally(
        self,
        audio: UploadPayload,
        audio_filename: str,
        image: UploadPayload,
        image_filename: str,
    ) -> Tuple[str, str]:
        results = await asyncio.gather(
            self.file_store.save(audio.data, AUDIO_FOLDER, audio_filename),
            self.file_store.save(image.data, IMAGE_FOLDER, image_filename),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        if not failures:
            return results[0], results[1]

        # 片方だけ書けた場合は後始末してから失敗させる
        saved: List[str] = [r for r in results if isinstance(r, str)]
        for public_path in saved:
            try:
                await self.file_store.delete(public_path)
            except LocalStorageError as e:
                logger.warning(f"Failed to clean up partial upload {public_path}: {e.message}")

        first = failures[0]
        if isinstance(first, LocalStorageError):
            raise first
        raise LocalStorageError(str(first)) from first

    async def _backup(self, payload: UploadPayload, key: str) -> Tuple[Optional[str], Optional[str]]:
        try:
            url = await self.backup.upload(payload.data, key, payload.content_type)
            return url, None
        except BackupStorageError as e:
            logger.warning(f"Backup upload failed for {key}, using local file only: {e.message}")
            return None, e.message
        except Exception as e:
            logger.exception(f"Unexpected backup error for {key}, using local file only")
            return None, str(e)
