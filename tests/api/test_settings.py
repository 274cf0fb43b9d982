"""Tests for settings and backup API endpoints."""
from decimal import Decimal

from app.api import settings as settings_api
from app.main import app
from app.services.backup import BackupService


class TestSettings:
    def test_get_defaults(self, client, db):
        response = client.get("/api/settings")
        assert response.status_code == 200
        assert Decimal(response.json()["usd_exchange_rate"]) == Decimal("36")

    def test_update(self, client, db):
        response = client.put("/api/settings", json={"list_a_margin": "25"})
        assert response.status_code == 200
        assert Decimal(response.json()["list_a_margin"]) == Decimal("25")
        assert Decimal(client.get("/api/settings").json()["list_a_margin"]) == Decimal("25")

    def test_negative_margin_rejected(self, client, db):
        assert client.put("/api/settings", json={"list_b_margin": "-5"}).status_code == 422


class TestBackup:
    def test_backup_and_restore(self, client, tmp_path):
        database_file = tmp_path / "database.sqlite"
        database_file.write_bytes(b"v1")
        app.dependency_overrides[settings_api.get_backup_service] = lambda: BackupService(database_file)
        backups = tmp_path / "backups"

        response = client.post("/api/backup/database", json={"backup_path": str(backups)})
        assert response.status_code == 200
        assert response.json()["size"] == 2

        database_file.write_bytes(b"v2")
        response = client.post("/api/backup/restore", json={"backup_path": str(backups)})
        assert response.status_code == 200
        assert database_file.read_bytes() == b"v1"

    def test_restore_without_backups(self, client, tmp_path):
        database_file = tmp_path / "database.sqlite"
        database_file.write_bytes(b"v1")
        app.dependency_overrides[settings_api.get_backup_service] = lambda: BackupService(database_file)

        response = client.post("/api/backup/restore", json={"backup_path": str(tmp_path / "none")})
        assert response.status_code == 404


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}
