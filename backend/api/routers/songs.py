from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from infra.database.memory import MemoryStore, get_store
from infra.repositories.stats_repository import StatsRepository
from infra.repositories.track_repository import TrackRepository
from infra.storage.local_file_store import LocalFileStore, get_file_store
from infra.storage.object_storage import BackupStorage, get_backup_storage
from api.schemas.common import DownloadResponse, SuccessResponse
from api.schemas.track import TrackRead
from app.services.track_app_service import TrackAppService

router = APIRouter()

def get_track_service(
    store: MemoryStore = Depends(get_store),
    file_store: LocalFileStore = Depends(get_file_store),
    backup: BackupStorage = Depends(get_backup_storage),
) -> TrackAppService:
    return TrackAppService(
        repository=TrackRepository(store),
        stats_repository=StatsRepository(store),
        file_store=file_store,
        backup=backup,
    )

@router.get("/api/songs", response_model=List[TrackRead])
async def get_songs(
    category: Optional[str] = Query(None, description="Category name, or 'all'"),
    service: TrackAppService = Depends(get_track_service)
):
    """
    カタログ一覧を取得する。挿入順で返し、期限が近い署名付きURLはここで再発行される。
    """
    tracks = await service.list_tracks(category)
    return [TrackRead.model_validate(t) for t in tracks]

@router.get("/api/songs/{track_id}", response_model=TrackRead)
async def get_song(track_id: str, service: TrackAppService = Depends(get_track_service)):
    track = await service.get_track(track_id)
    return TrackRead.model_validate(track)

@router.post("/api/songs/{track_id}/play", response_model=SuccessResponse)
async def play_song(track_id: str, service: TrackAppService = Depends(get_track_service)):
    service.record_play(track_id)
    return SuccessResponse()

@router.post("/api/songs/{track_id}/download", response_model=DownloadResponse)
async def download_song(track_id: str, service: TrackAppService = Depends(get_track_service)):
    """ダウンロード数を加算し、ローカル音源のURLを返す。存在しないIDは404"""
    download_url = service.record_download(track_id)
    return DownloadResponse(download_url=download_url)
