"""Pydantic schemas for pricing settings and database backups."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    usd_exchange_rate: Decimal
    list_a_margin: Decimal
    list_b_margin: Decimal
    list_c_margin: Decimal
    updated_at: Optional[datetime] = None


class SettingsUpdate(BaseModel):
    """Schema for updating settings. Omitted fields keep their value."""

    usd_exchange_rate: Optional[Decimal] = Field(None, ge=0)
    list_a_margin: Optional[Decimal] = Field(None, ge=0)
    list_b_margin: Optional[Decimal] = Field(None, ge=0)
    list_c_margin: Optional[Decimal] = Field(None, ge=0)


class BackupRequest(BaseModel):
    backup_path: Optional[str] = Field(None, description="Directory; defaults to BACKUP_DIR")


class BackupResponse(BaseModel):
    message: str
    path: str
    size: int
    timestamp: str
