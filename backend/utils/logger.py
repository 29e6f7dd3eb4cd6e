import logging
import os
from logging.handlers import RotatingFileHandler
import sys

# ログ出力先は server.py (settings.setup_environment) が環境変数で渡す
# 未設定なら backend/logs に書く (開発環境)
if "TUNEBOX_LOG_DIR" in os.environ:
    LOG_DIR = os.environ["TUNEBOX_LOG_DIR"]
else:
    BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    LOG_DIR = os.path.join(BASE_DIR, "logs")

LOG_FILE_NAME = "tunebox.log"

# ファイルには呼び出し元まで残す。コンソールは docker logs で読める程度に短く
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s.%(funcName)s:%(lineno)d - %(message)s"
CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"

def resolve_level(value: str | None) -> int:
    """TUNEBOX_LOG_LEVEL の値をloggingのレベルに変換する。不明な値は INFO"""
    if not value:
        return logging.INFO
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else logging.INFO

def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    level = resolve_level(os.environ.get("TUNEBOX_LOG_LEVEL"))
    logger.setLevel(level)
    # uvicorn のルートロガーに二重出力しない
    logger.propagate = False

    try:
        os.makedirs(LOG_DIR, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(LOG_DIR, LOG_FILE_NAME),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)
    except OSError as e:
        print(f"Failed to set up file logging: {e}", file=sys.stderr)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    return logger
