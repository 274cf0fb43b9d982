"""Pricing settings and database backup endpoints."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_database_url, get_db, get_engine
from app.schemas.settings import SettingsResponse, SettingsUpdate, BackupRequest, BackupResponse
from app.services.backup import BackupService, sqlite_path_from_url
from app.services.settings_cache import SettingsService, TTLCache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])
backup_router = APIRouter(prefix="/backup", tags=["backup"])


def get_settings_cache(request: Request) -> TTLCache:
    """The application-wide settings cache created at startup."""
    return request.app.state.settings_cache


def get_backup_service() -> BackupService:
    return BackupService(sqlite_path_from_url(get_database_url()))


@router.get("", response_model=SettingsResponse)
def read_settings(db: Session = Depends(get_db), cache: TTLCache = Depends(get_settings_cache)):
    """Exchange rate and price list margins. Served from cache when fresh."""
    return SettingsService(db, cache).get()


@router.put("", response_model=SettingsResponse)
def update_settings(
    data: SettingsUpdate,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_settings_cache),
):
    return SettingsService(db, cache).update(data)


# ============================================================================
# Backup Endpoints
# ============================================================================


@backup_router.post("/database", response_model=BackupResponse)
def backup_database(
    data: Optional[BackupRequest] = None,
    service: BackupService = Depends(get_backup_service),
):
    """Copy the database file into the backup directory."""
    backup_dir = (data.backup_path if data else None) or get_settings().BACKUP_DIR
    result = service.backup(backup_dir)
    return BackupResponse(
        message="Database backup created",
        path=str(result.path),
        size=result.size,
        timestamp=result.timestamp,
    )


@backup_router.post("/restore", response_model=BackupResponse)
def restore_database(
    request: Request,
    data: Optional[BackupRequest] = None,
    service: BackupService = Depends(get_backup_service),
):
    """
    Replace the database with the newest backup.

    Pooled connections are dropped so later requests read the restored file,
    and the settings cache is cleared.
    """
    backup_dir = (data.backup_path if data else None) or get_settings().BACKUP_DIR
    result = service.restore_latest(backup_dir)
    get_engine().dispose()
    request.app.state.settings_cache.clear()
    logger.warning(f"Database restored from {result.path}")
    return BackupResponse(
        message="Database restored",
        path=str(result.path),
        size=result.size,
        timestamp=result.timestamp,
    )
