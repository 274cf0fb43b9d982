"""Packaging endpoints."""
import logging
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db, transaction
from app.errors import ValidationError
from app.models import Packaging, active_only
from app.schemas.package import (
    PackagingCreate,
    PackagingUpdate,
    PackagingResponse,
    PackagingList,
    PackagePriceBatchRequest,
    PackagePriceBatchResponse,
)
from app.schemas.stock import PriceUpdateRequest, PriceUpdateResponse, PriceHistoryEntry
from app.services.catalog import get_live
from app.services.price_ledger import PriceKind, PriceLedger, validate_price

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/packages", tags=["packages"])


def _check_package(db: Session, size: Decimal, unit: str, exclude_id: Optional[int] = None) -> None:
    if unit not in Packaging.UNITS:
        raise ValidationError(f"Invalid unit '{unit}'. Must be one of: {', '.join(Packaging.UNITS)}")
    query = active_only(db, Packaging).filter(Packaging.size == size, Packaging.unit == unit)
    if exclude_id is not None:
        query = query.filter(Packaging.id != exclude_id)
    if query.first():
        raise ValidationError(f"Package {size} {unit} already exists")


@router.get("", response_model=PackagingList)
def list_packages(db: Session = Depends(get_db)):
    """List live packages ordered by unit and size."""
    packages = active_only(db, Packaging).order_by(Packaging.unit, Packaging.size).all()
    return PackagingList(packages=packages, count=len(packages))


@router.get("/{package_id}", response_model=PackagingResponse)
def get_package(package_id: int, db: Session = Depends(get_db)):
    return get_live(db, Packaging, package_id, "Package")


@router.post("", response_model=PackagingResponse, status_code=201)
def create_package(data: PackagingCreate, db: Session = Depends(get_db)):
    _check_package(db, data.size, data.unit)
    with transaction(db, "package creation"):
        package = Packaging(**data.model_dump())
        db.add(package)
    logger.info(f"Created package {package.id} ({package.size} {package.unit})")
    return package


@router.put("/{package_id}", response_model=PackagingResponse)
def update_package(package_id: int, data: PackagingUpdate, db: Session = Depends(get_db)):
    """
    Replace a package's size, unit and price.

    The price change goes through the ledger in the same transaction as the
    size and unit, so a failed update leaves the package untouched.
    """
    package = get_live(db, Packaging, package_id, "Package")
    price = validate_price(data.price)
    _check_package(db, data.size, data.unit, exclude_id=package_id)

    with transaction(db, f"update of package {package_id}"):
        package.size = data.size
        package.unit = data.unit
        PriceLedger(db).apply_prices(PriceKind.PACKAGING, {package_id: price})

    db.refresh(package)
    return package


@router.delete("/{package_id}", status_code=204)
def delete_package(package_id: int, db: Session = Depends(get_db)):
    """Soft delete a package. Existing recipe associations are kept."""
    package = get_live(db, Packaging, package_id, "Package")
    with transaction(db, f"deletion of package {package_id}"):
        package.soft_delete()
    logger.info(f"Deleted package {package_id}")
    return None


@router.put("/{package_id}/price", response_model=PriceUpdateResponse)
def update_package_price(package_id: int, data: PriceUpdateRequest, db: Session = Depends(get_db)):
    result = PriceLedger(db).set_prices(PriceKind.PACKAGING, {package_id: data.new_price})
    return PriceUpdateResponse(
        item_id=package_id,
        previous_price=result.previous[package_id],
        new_price=data.new_price,
        stale_recipes=result.stale_count,
    )


@router.post("/prices", response_model=PackagePriceBatchResponse)
def update_package_prices(data: PackagePriceBatchRequest, db: Session = Depends(get_db)):
    """
    Update several package prices at once.

    Either every price is applied or none is: an unknown package or invalid
    price rejects the whole batch.
    """
    prices = {item.package_id: item.price for item in data.prices}
    result = PriceLedger(db).set_prices(PriceKind.PACKAGING, prices)
    return PackagePriceBatchResponse(
        message="Package prices updated",
        updated=result.changed_ids,
        stale_recipes=result.stale_count,
    )


@router.get("/{package_id}/price-history", response_model=list[PriceHistoryEntry])
def package_price_history(package_id: int, db: Session = Depends(get_db)):
    return PriceLedger(db).history(PriceKind.PACKAGING, package_id)
