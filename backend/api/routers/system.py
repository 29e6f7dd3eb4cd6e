from fastapi import APIRouter, Depends
from infra.storage.object_storage import BackupStorage, get_backup_storage
from api.schemas.common import HealthResponse

router = APIRouter()

@router.get("/api/health", response_model=HealthResponse)
def health_check(backup: BackupStorage = Depends(get_backup_storage)):
    return HealthResponse(status="ok", backup_configured=backup.configured)
