from typing import Optional
from datetime import datetime
from uuid import uuid4
from sqlmodel import Field, SQLModel

def generate_track_id() -> str:
    return uuid4().hex

class Track(SQLModel):
    """
    カタログの1エントリ (楽曲 + カバー画像)
    ローカルパスは常に存在し、バックアップ側のフィールドはそれぞれ独立してNoneになりうる
    """
    id: str = Field(default_factory=generate_track_id, primary_key=True)

    # メタデータ
    name: str
    artist: str
    category: str

    # Primary File Store (公開URLパス)
    local_audio_path: str
    local_image_path: str

    # Object Storage Backup
    backup_audio_url: Optional[str] = None
    backup_image_url: Optional[str] = None
    backup_audio_key: Optional[str] = None
    backup_image_key: Optional[str] = None

    uploaded_at: datetime = Field(default_factory=datetime.now)
    url_refreshed_at: Optional[datetime] = None

    @property
    def has_backup(self) -> bool:
        return bool(self.backup_audio_key or self.backup_image_key)
