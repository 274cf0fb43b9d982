"""File-level backup and restore of the SQLite database."""
import logging
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from sqlalchemy.engine.url import make_url

from app.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "database_"
PRE_RESTORE_PREFIX = "pre_restore_"
BACKUP_SUFFIX = ".sqlite"


@dataclass
class BackupResult:
    path: Path
    size: int
    timestamp: str


def sqlite_path_from_url(url: str) -> Path:
    """Database file behind a SQLite URL. Other backends cannot be file-copied."""
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        raise ValidationError("Backups are only supported for SQLite databases")
    if not parsed.database or parsed.database == ":memory:":
        raise ValidationError("In-memory databases cannot be backed up")
    return Path(parsed.database)


class BackupService:
    """Copies the database file to and from a backup directory."""

    def __init__(self, database_path: Path, clock: Callable[[], datetime] = datetime.utcnow):
        self.database_path = Path(database_path)
        self.clock = clock

    def _timestamp(self) -> str:
        return self.clock().strftime("%Y-%m-%dT%H-%M-%S-%f")

    def backup(self, backup_dir: str | Path) -> BackupResult:
        """Copy the database into ``backup_dir`` as ``database_<timestamp>.sqlite``."""
        if not self.database_path.exists():
            raise NotFoundError(f"Database file {self.database_path} does not exist")

        target_dir = Path(backup_dir)
        target_dir.mkdir(parents=True, exist_ok=True)
        timestamp = self._timestamp()
        target = target_dir / f"{BACKUP_PREFIX}{timestamp}{BACKUP_SUFFIX}"
        shutil.copy2(self.database_path, target)

        size = target.stat().st_size
        logger.info(f"Database backup written to {target} ({size} bytes)")
        return BackupResult(path=target, size=size, timestamp=timestamp)

    def latest_backup(self, backup_dir: str | Path) -> Optional[Path]:
        directory = Path(backup_dir)
        if not directory.is_dir():
            return None
        backups = sorted(
            p for p in directory.iterdir()
            if p.name.startswith(BACKUP_PREFIX) and p.name.endswith(BACKUP_SUFFIX)
        )
        return backups[-1] if backups else None

    def restore_latest(self, backup_dir: str | Path) -> BackupResult:
        """
        Replace the database with the newest ``database_*`` backup in ``backup_dir``.

        The current database is first saved as ``pre_restore_<timestamp>.sqlite``
        in the same directory. Callers must dispose open connections afterwards.
        """
        source = self.latest_backup(backup_dir)
        if source is None:
            raise NotFoundError(f"No backups found in {backup_dir}")

        timestamp = self._timestamp()
        if self.database_path.exists():
            safety_copy = Path(backup_dir) / f"{PRE_RESTORE_PREFIX}{timestamp}{BACKUP_SUFFIX}"
            shutil.copy2(self.database_path, safety_copy)
            logger.info(f"Saved current database to {safety_copy}")

        shutil.copy2(source, self.database_path)
        size = source.stat().st_size
        logger.info(f"Restored database from {source}")
        return BackupResult(path=source, size=size, timestamp=timestamp)
