from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class TrackRead(BaseModel):
    # フロントエンド向けに camelCase で返す
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: str
    name: str
    artist: str
    category: str

    local_audio_path: str
    local_image_path: str

    backup_audio_url: Optional[str] = None
    backup_image_url: Optional[str] = None
    backup_audio_key: Optional[str] = None
    backup_image_key: Optional[str] = None

    uploaded_at: datetime
    url_refreshed_at: Optional[datetime] = None
