"""Tests for app/services/backup.py - database file backup and restore."""
from datetime import datetime, timedelta

import pytest

from app.errors import NotFoundError, ValidationError
from app.services.backup import BackupService, sqlite_path_from_url


@pytest.fixture
def database_file(tmp_path):
    path = tmp_path / "database.sqlite"
    path.write_bytes(b"original")
    return path


class Ticker:
    def __init__(self):
        self.now = datetime(2024, 3, 1, 9, 30, 0)

    def __call__(self):
        value = self.now
        self.now = self.now + timedelta(seconds=1)
        return value


class TestSqlitePath:
    def test_file_url(self):
        assert sqlite_path_from_url("sqlite:///./data/app.sqlite").name == "app.sqlite"

    def test_memory_url_rejected(self):
        with pytest.raises(ValidationError):
            sqlite_path_from_url("sqlite:///:memory:")

    def test_other_backends_rejected(self):
        with pytest.raises(ValidationError):
            sqlite_path_from_url("postgresql://user:pw@localhost/db")


class TestBackup:
    def test_backup_copies_file(self, database_file, tmp_path):
        backups = tmp_path / "backups"
        result = BackupService(database_file, clock=Ticker()).backup(backups)

        assert result.path.parent == backups
        assert result.path.name == "database_2024-03-01T09-30-00-000000.sqlite"
        assert result.path.read_bytes() == b"original"
        assert result.size == len(b"original")

    def test_missing_database(self, tmp_path):
        with pytest.raises(NotFoundError):
            BackupService(tmp_path / "nope.sqlite").backup(tmp_path / "backups")

    def test_restore_uses_newest_backup(self, database_file, tmp_path):
        backups = tmp_path / "backups"
        service = BackupService(database_file, clock=Ticker())
        service.backup(backups)
        database_file.write_bytes(b"second")
        newest = service.backup(backups)
        database_file.write_bytes(b"current")

        result = service.restore_latest(backups)

        assert result.path == newest.path
        assert database_file.read_bytes() == b"second"
        safety = list(backups.glob("pre_restore_*.sqlite"))
        assert len(safety) == 1
        assert safety[0].read_bytes() == b"current"

    def test_restore_without_backups(self, database_file, tmp_path):
        with pytest.raises(NotFoundError):
            BackupService(database_file).restore_latest(tmp_path / "empty")

    def test_safety_copy_is_not_restored(self, database_file, tmp_path):
        backups = tmp_path / "backups"
        service = BackupService(database_file, clock=Ticker())
        service.backup(backups)
        service.restore_latest(backups)
        assert service.latest_backup(backups).name.startswith("database_")
