import asyncio
import os
from typing import Optional

from domain.constants import AUDIO_FOLDER, IMAGE_FOLDER, UPLOAD_DIR, UPLOAD_URL_PREFIX
from domain.exceptions import LocalStorageError
from utils.filesystem import ensure_directories, remove_file, write_bytes

class LocalFileStore:
    """
    Primary File Store。アップロードされたメディアの正本をローカルに保存する。
    保存先は <base_dir>/<folder>/<filename>、公開URLは /uploads/<folder>/<filename>。
    """
    def __init__(self, base_dir: str = UPLOAD_DIR, url_prefix: str = UPLOAD_URL_PREFIX):
        self.base_dir = base_dir
        self.url_prefix = url_prefix.rstrip("/")

    def ensure_layout(self):
        ensure_directories(
            os.path.join(self.base_dir, AUDIO_FOLDER),
            os.path.join(self.base_dir, IMAGE_FOLDER),
        )

    def public_path(self, folder: str, filename: str) -> str:
        return f"{self.url_prefix}/{folder}/{filename}"

    def resolve(self, public_path: str) -> Optional[str]:
        """公開URLパスをファイルシステム上のパスに変換する。管理外のパスは None"""
        prefix = f"{self.url_prefix}/"
        if not public_path.startswith(prefix):
            return None

        relative = public_path[len(prefix):]
        base = os.path.abspath(self.base_dir)
        full_path = os.path.abspath(os.path.join(base, relative))
        if os.path.commonpath([base, full_path]) != base:
            return None
        return full_path

    async def save(self, data: bytes, folder: str, filename: str) -> str:
        """保存して公開URLパスを返す。失敗時は LocalStorageError"""
        file_path = os.path.join(self.base_dir, folder, filename)
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._write, file_path, data)
        except OSError as e:
            raise LocalStorageError(f"Failed to save {folder}/{filename}: {e}") from e
        return self.public_path(folder, filename)

    async def delete(self, public_path: str) -> bool:
        """削除できた場合 True。ファイルが存在しない場合は False (エラーではない)"""
        file_path = self.resolve(public_path)
        if not file_path:
            return False

        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, remove_file, file_path)
        except OSError as e:
            raise LocalStorageError(f"Failed to delete {public_path}: {e}") from e

    def exists(self, public_path: str) -> bool:
        file_path = self.resolve(public_path)
        return bool(file_path) and os.path.isfile(file_path)

    def _write(self, file_path: str, data: bytes):
        os.makedirs(os.path.dirname(file_path), exist_ok=True)
        write_bytes(file_path, data)

_file_store: Optional[LocalFileStore] = None

def get_file_store() -> LocalFileStore:
    global _file_store
    if _file_store is None:
        _file_store = LocalFileStore()
    return _file_store
