from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
from domain.models.track import Track

class StorageOutcome(str, Enum):
    # ローカル保存とバックアップの両方が成功
    FULL = "full"
    # ローカル保存は成功、バックアップは一部または全部失敗
    LOCAL_ONLY = "local_only"
    # ローカル保存に失敗 (レコードは作成されない)
    FAILED = "failed"

@dataclass
class UploadPayload:
    filename: str
    content_type: Optional[str]
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

@dataclass
class UploadResult:
    outcome: StorageOutcome
    track: Optional[Track] = None
    errors: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.outcome != StorageOutcome.FAILED

@dataclass
class DeleteResult:
    track: Track
    warnings: List[str] = field(default_factory=list)
