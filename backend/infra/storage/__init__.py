# Storage adapters
from .local_file_store import LocalFileStore, get_file_store
from .object_storage import BackupStorage, S3BackupStorage, get_backup_storage
