"""Raw material (stock) endpoints."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.database import get_db, transaction
from app.errors import ValidationError
from app.models import RawMaterial, active_only
from app.schemas.stock import (
    RawMaterialCreate,
    RawMaterialUpdate,
    RawMaterialResponse,
    RawMaterialList,
    StockCount,
    PriceUpdateRequest,
    PriceUpdateResponse,
    PriceHistoryEntry,
)
from app.services.catalog import find_by_name, get_live
from app.services.price_ledger import PriceKind, PriceLedger, validate_price

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stock", tags=["stock"])


@router.get("", response_model=RawMaterialList)
def list_stock(
    search: Optional[str] = Query(None, description="Filter by name or code"),
    db: Session = Depends(get_db),
):
    """List live raw materials, newest first."""
    query = active_only(db, RawMaterial)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(RawMaterial.name.ilike(pattern), RawMaterial.code.ilike(pattern)))
    materials = query.order_by(RawMaterial.created_at.desc(), RawMaterial.id.desc()).all()
    return RawMaterialList(stock=materials, count=len(materials))


@router.get("/count", response_model=StockCount)
def count_stock(db: Session = Depends(get_db)):
    return StockCount(total=active_only(db, RawMaterial).count())


@router.get("/{stock_id}", response_model=RawMaterialResponse)
def get_stock(stock_id: int, db: Session = Depends(get_db)):
    return get_live(db, RawMaterial, stock_id, "Raw material")


@router.post("", response_model=RawMaterialResponse, status_code=201)
def create_stock(data: RawMaterialCreate, db: Session = Depends(get_db)):
    """Create a raw material. Names are unique case-insensitively among live rows."""
    name = data.name.strip()
    if find_by_name(db, RawMaterial, name):
        raise ValidationError(f'Raw material "{name}" already exists')

    with transaction(db, "raw material creation"):
        material = RawMaterial(**data.model_dump(exclude={"name"}), name=name)
        db.add(material)

    logger.info(f"Created raw material {material.id} ({material.name})")
    return material


@router.put("/{stock_id}", response_model=RawMaterialResponse)
def update_stock(stock_id: int, data: RawMaterialUpdate, db: Session = Depends(get_db)):
    """
    Update a raw material.

    A changed price is written through the price ledger, so its history is
    recorded and recipes using the material are marked stale. Field edits and
    the price change commit together or not at all.
    """
    material = get_live(db, RawMaterial, stock_id, "Raw material")
    updates = data.model_dump(exclude_unset=True)
    new_price = updates.pop("price", None)
    if new_price is not None:
        new_price = validate_price(new_price)

    if updates.get("name") is not None:
        updates["name"] = updates["name"].strip()
        if find_by_name(db, RawMaterial, updates["name"], exclude_id=stock_id):
            raise ValidationError(f'Raw material "{updates["name"]}" already exists')

    with transaction(db, f"update of raw material {stock_id}"):
        for field, value in updates.items():
            setattr(material, field, value)
        if new_price is not None:
            PriceLedger(db).apply_prices(PriceKind.RAW_MATERIAL, {stock_id: new_price})

    db.refresh(material)
    return material


@router.delete("/{stock_id}", status_code=204)
def delete_stock(stock_id: int, db: Session = Depends(get_db)):
    """Soft delete a raw material. Recipes keep their ingredient snapshots."""
    material = get_live(db, RawMaterial, stock_id, "Raw material")
    with transaction(db, f"deletion of raw material {stock_id}"):
        material.soft_delete()
    logger.info(f"Deleted raw material {stock_id}")
    return None


@router.put("/{stock_id}/price", response_model=PriceUpdateResponse)
def update_stock_price(stock_id: int, data: PriceUpdateRequest, db: Session = Depends(get_db)):
    result = PriceLedger(db).set_prices(PriceKind.RAW_MATERIAL, {stock_id: data.new_price})
    return PriceUpdateResponse(
        item_id=stock_id,
        previous_price=result.previous[stock_id],
        new_price=data.new_price,
        stale_recipes=result.stale_count,
    )


@router.get("/{stock_id}/price-history", response_model=list[PriceHistoryEntry])
def stock_price_history(stock_id: int, db: Session = Depends(get_db)):
    """Price changes of a raw material, newest first."""
    return PriceLedger(db).history(PriceKind.RAW_MATERIAL, stock_id)
