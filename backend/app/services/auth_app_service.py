import hmac
from abc import ABC, abstractmethod
from typing import Optional

from config import settings
from domain.exceptions import AuthenticationError
from utils.logger import get_logger

logger = get_logger(__name__)

class CredentialVerifier(ABC):
    """管理者認証の差し替えポイント。ハッシュ化された資格情報ストアなどに置き換え可能"""

    @abstractmethod
    def verify(self, username: str, password: str) -> bool:
        pass

class StaticCredentialVerifier(CredentialVerifier):
    """設定ファイルの固定ユーザー名/パスワードと比較するプレースホルダー実装"""

    def __init__(self, username: Optional[str] = None, password: Optional[str] = None):
        self.username = username if username is not None else settings.ADMIN_USERNAME
        self.password = password if password is not None else settings.ADMIN_PASSWORD

    def verify(self, username: str, password: str) -> bool:
        user_ok = hmac.compare_digest(username.encode("utf-8"), self.username.encode("utf-8"))
        pass_ok = hmac.compare_digest(password.encode("utf-8"), self.password.encode("utf-8"))
        return user_ok and pass_ok

class AuthAppService:
    def __init__(self, verifier: CredentialVerifier):
        self.verifier = verifier

    def login(self, username: str, password: str) -> str:
        if not self.verifier.verify(username, password):
            logger.warning(f"Failed admin login attempt for user '{username}'")
            raise AuthenticationError()
        logger.info(f"Admin login: {username}")
        return "Login successful"

_verifier: Optional[CredentialVerifier] = None

def get_credential_verifier() -> CredentialVerifier:
    global _verifier
    if _verifier is None:
        _verifier = StaticCredentialVerifier()
    return _verifier
