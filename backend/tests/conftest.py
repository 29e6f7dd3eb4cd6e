import os
import pytest
import sys
import tempfile
from typing import Dict, Generator, List, Optional, Set

# 1. パス解決: backendディレクトリをsys.pathに追加
CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
BACKEND_DIR = os.path.dirname(CURRENT_DIR)
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

# 2. config の読み込み前に、ログ/アップロード先をテスト用の一時ディレクトリへ向ける
TEST_DATA_DIR = tempfile.mkdtemp(prefix="tunebox_test_")
os.environ["TUNEBOX_LOG_DIR"] = os.path.join(TEST_DATA_DIR, "logs")
os.environ["UPLOAD_DIR"] = os.path.join(TEST_DATA_DIR, "uploads")
os.environ.pop("S3_BUCKET_NAME", None)

from domain.exceptions import BackupStorageError
from infra.database.memory import MemoryStore
from infra.storage.local_file_store import LocalFileStore
from infra.storage.object_storage import BackupStorage


class FakeBackupStorage(BackupStorage):
    """呼び出し回数を記録するインメモリのバックアップストレージ"""

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.sign_calls: List[str] = []
        self.deleted: List[str] = []
        self.fail_uploads = False
        self.fail_deletes = False
        self.fail_sign_keys: Set[str] = set()
        self._issued = 0

    @property
    def configured(self) -> bool:
        return True

    async def upload(self, data: bytes, key: str, content_type: Optional[str] = None) -> str:
        if self.fail_uploads:
            raise BackupStorageError("backup unreachable")
        self.objects[key] = data
        return await self.generate_signed_url(key)

    async def generate_signed_url(self, key: str) -> str:
        if key in self.fail_sign_keys:
            raise BackupStorageError(f"cannot sign {key}")
        self.sign_calls.append(key)
        self._issued += 1
        return f"https://backup.example.com/{key}?signature={self._issued}"

    async def delete(self, key: str):
        if self.fail_deletes:
            raise BackupStorageError("delete failed")
        self.deleted.append(key)
        self.objects.pop(key, None)


@pytest.fixture(name="store")
def store_fixture() -> MemoryStore:
    """テストごとに空のカタログ"""
    return MemoryStore()

@pytest.fixture(name="file_store")
def file_store_fixture(tmp_path) -> LocalFileStore:
    file_store = LocalFileStore(base_dir=str(tmp_path / "uploads"))
    file_store.ensure_layout()
    return file_store

@pytest.fixture(name="backup")
def backup_fixture() -> FakeBackupStorage:
    return FakeBackupStorage()

@pytest.fixture(name="client")
def client_fixture(store, file_store, backup) -> Generator:
    """FastAPIのTestClientを提供し、ストア/ストレージをDIで差し替える"""
    from fastapi.testclient import TestClient
    from main import app
    from infra.database.memory import get_store
    from infra.storage.local_file_store import get_file_store
    from infra.storage.object_storage import get_backup_storage
    from app.services.auth_app_service import StaticCredentialVerifier, get_credential_verifier

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_file_store] = lambda: file_store
    app.dependency_overrides[get_backup_storage] = lambda: backup
    app.dependency_overrides[get_credential_verifier] = lambda: StaticCredentialVerifier("admin", "admin123")
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()

@pytest.fixture
def upload_files():
    """アップロード用のダミーファイル (multipart)"""
    return {
        "songFile": ("song.wav", b"RIFF fake audio bytes", "audio/wav"),
        "songImage": ("cover.png", b"\x89PNG fake image bytes", "image/png"),
    }
