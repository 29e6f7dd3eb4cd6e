from fastapi import APIRouter, Depends, File, Form, UploadFile
from typing import Optional
from config import settings
from domain.exceptions import LocalStorageError
from domain.models.upload import UploadPayload
from infra.database.memory import MemoryStore, get_store
from infra.repositories.track_repository import TrackRepository
from infra.storage.local_file_store import LocalFileStore, get_file_store
from infra.storage.object_storage import BackupStorage, get_backup_storage
from api.routers.songs import get_track_service
from api.schemas.common import (
    DeleteResponse,
    LoginRequest,
    MessageResponse,
    SongResponse,
    StatsResponse,
    UploadResponse,
)
from api.schemas.track import TrackRead
from app.services.auth_app_service import AuthAppService, CredentialVerifier, get_credential_verifier
from app.services.track_app_service import TrackAppService
from app.services.upload_app_service import UploadAppService

router = APIRouter()

def get_upload_service(
    store: MemoryStore = Depends(get_store),
    file_store: LocalFileStore = Depends(get_file_store),
    backup: BackupStorage = Depends(get_backup_storage),
) -> UploadAppService:
    return UploadAppService(TrackRepository(store), file_store, backup)

async def _read_payload(upload: Optional[UploadFile]) -> Optional[UploadPayload]:
    if upload is None:
        return None
    # 上限+1バイトまで読めば超過判定には十分
    data = await upload.read(settings.MAX_UPLOAD_SIZE + 1)
    return UploadPayload(
        filename=upload.filename or "",
        content_type=upload.content_type,
        data=data,
    )

@router.post("/api/admin/login", response_model=MessageResponse)
async def login(req: LoginRequest, verifier: CredentialVerifier = Depends(get_credential_verifier)):
    message = AuthAppService(verifier).login(req.username, req.password)
    return MessageResponse(success=True, message=message)

@router.post("/api/admin/upload", response_model=UploadResponse)
async def upload_song(
    songName: Optional[str] = Form(None),
    artistName: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    songFile: Optional[UploadFile] = File(None),
    songImage: Optional[UploadFile] = File(None),
    service: UploadAppService = Depends(get_upload_service)
):
    """
    楽曲と画像をアップロードする。
    ローカル保存に失敗した場合は500、バックアップの失敗は backup="local_only" として返す。
    """
    result = await service.upload(
        audio=await _read_payload(songFile),
        image=await _read_payload(songImage),
        name=songName,
        artist=artistName,
        category=category,
    )
    if not result.succeeded:
        raise LocalStorageError(result.errors[0] if result.errors else "Upload failed")

    return UploadResponse(
        song=TrackRead.model_validate(result.track),
        backup=result.outcome,
        warnings=result.errors,
    )

@router.delete("/api/admin/songs/{track_id}", response_model=DeleteResponse)
async def delete_song(track_id: str, service: TrackAppService = Depends(get_track_service)):
    result = await service.delete_track(track_id)
    return DeleteResponse(warnings=result.warnings)

@router.get("/api/admin/stats", response_model=StatsResponse)
async def get_stats(service: TrackAppService = Depends(get_track_service)):
    return StatsResponse(**service.get_stats())

@router.post("/api/admin/songs/{track_id}/refresh-urls", response_model=SongResponse)
async def refresh_song_urls(track_id: str, service: TrackAppService = Depends(get_track_service)):
    """署名付きURLを明示的に再発行する (何度呼んでもよい)"""
    track = await service.refresh_urls(track_id)
    return SongResponse(song=TrackRead.model_validate(track))
