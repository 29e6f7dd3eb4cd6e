from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List
from api.schemas.track import TrackRead
from domain.models.upload import StorageOutcome

class LoginRequest(BaseModel):
    username: str
    password: str

class MessageResponse(BaseModel):
    success: bool
    message: str

class SuccessResponse(BaseModel):
    success: bool = True

class SongResponse(BaseModel):
    success: bool = True
    song: TrackRead

class UploadResponse(BaseModel):
    success: bool = True
    song: TrackRead
    backup: StorageOutcome
    warnings: List[str] = []

class DeleteResponse(BaseModel):
    success: bool = True
    warnings: List[str] = []

class DownloadResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    download_url: str

class StatsResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_songs: int
    total_plays: int
    total_downloads: int
    today_uploads: int = 0

class HealthResponse(BaseModel):
    status: str
    backup_configured: bool
