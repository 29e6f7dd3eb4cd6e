import os
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from api.routers import admin, songs, system
from domain.constants import UPLOAD_URL_PREFIX
from domain.exceptions import TuneboxError
from infra.storage.local_file_store import get_file_store
from utils.logger import get_logger

from config import settings

logger = get_logger(__name__)

# Lifespan event to handle startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    get_file_store().ensure_layout()  # uploads/audio, uploads/images の作成
    if not settings.backup_configured:
        logger.warning("S3_BUCKET_NAME is not set. Uploads will be stored locally only.")
    yield

app = FastAPI(title="Tunebox Backend API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Error handlers: 全て {"success": false, "message": ...} 形式で返す
@app.exception_handler(TuneboxError)
async def handle_tunebox_error(request: Request, exc: TuneboxError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "; ".join(
        f"{'.'.join(str(p) for p in e.get('loc', []))}: {e.get('msg')}" for e in errors
    ) or "Invalid request"
    return JSONResponse(status_code=400, content={"success": False, "message": message})

@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    # 信頼できる環境での利用を前提に、生のエラーメッセージを返す
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"success": False, "message": str(exc)})

# Include Routers
app.include_router(admin.router)
app.include_router(songs.router)
app.include_router(system.router)

# Static files (アップロード済みメディア / フロントエンド)
app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")

if settings.FRONTEND_DIR and os.path.isdir(settings.FRONTEND_DIR):
    app.mount("/", StaticFiles(directory=settings.FRONTEND_DIR, html=True), name="frontend")
