from config import settings

UPLOAD_DIR = settings.UPLOAD_DIR
UPLOAD_URL_PREFIX = "/uploads"

# アップロード形式に関わらず拡張子は固定 (フォーマット判定は行わない)
AUDIO_EXTENSION = ".mp3"
IMAGE_EXTENSION = ".jpg"

AUDIO_FOLDER = "audio"
IMAGE_FOLDER = "images"

# Object Storage上のキー接頭辞
BACKUP_KEY_PREFIX = "songs"

CATEGORY_ALL = "all"
