import os
from typing import List, Literal
from pydantic_settings import BaseSettings
from pydantic import Field
import platformdirs

APP_NAME = "Tunebox"
APP_AUTHOR = "TuneboxDev"

class Settings(BaseSettings):
    # App Info
    APP_NAME: str = APP_NAME
    APP_AUTHOR: str = APP_AUTHOR
    ENV: str = "prod"

    # Paths
    # デフォルトは platformdirs を使用するが、環境変数 UPLOAD_DIR があればそれを優先する
    USER_DATA_DIR: str = Field(default_factory=lambda: platformdirs.user_data_dir(APP_NAME, APP_AUTHOR))
    UPLOAD_DIR: str | None = None
    FRONTEND_DIR: str | None = None

    # Network
    HOST: str = "127.0.0.1"
    PORT: int = 3000
    CORS_ORIGINS: List[str] = ["*"]

    # Object Storage Backup (S3互換)
    AWS_REGION: str | None = None
    AWS_ACCESS_KEY_ID: str | None = None
    AWS_SECRET_ACCESS_KEY: str | None = None
    S3_BUCKET_NAME: str | None = None
    S3_ENDPOINT_URL: str | None = None

    # Signed URL
    SIGNED_URL_EXPIRES_SECONDS: int = 7 * 24 * 60 * 60
    URL_REFRESH_THRESHOLD_DAYS: float = 6
    URL_STALENESS_REFERENCE: Literal["refreshed", "uploaded"] = "refreshed"

    # Upload
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024

    # Admin (プレースホルダー認証)
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin123"

    # Logging
    TUNEBOX_LOG_DIR: str | None = None
    TUNEBOX_LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

    def model_post_init(self, __context):
        # UPLOAD_DIRが未設定ならデフォルト値を設定
        if not self.UPLOAD_DIR:
            self.UPLOAD_DIR = os.path.join(self.USER_DATA_DIR, "uploads")

        # ログディレクトリ
        if not self.TUNEBOX_LOG_DIR:
            self.TUNEBOX_LOG_DIR = os.path.join(self.USER_DATA_DIR, "logs")

    @property
    def backup_configured(self) -> bool:
        return bool(self.S3_BUCKET_NAME)

    def setup_environment(self):
        """ロガーが参照する環境変数を設定する"""
        if self.TUNEBOX_LOG_DIR:
            os.environ["TUNEBOX_LOG_DIR"] = self.TUNEBOX_LOG_DIR
        os.environ["TUNEBOX_LOG_LEVEL"] = self.TUNEBOX_LOG_LEVEL

settings = Settings()
