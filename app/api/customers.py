"""Customer (cari) endpoints."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.database import get_db, transaction
from app.errors import ValidationError
from app.models import Customer, active_only
from app.schemas.customer import (
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
    CustomerList,
    CustomerBulkRequest,
    CustomerBulkResult,
)
from app.services.catalog import find_by_name, get_live, name_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/customers", tags=["customers"])


def _check_type(customer_type: str) -> None:
    if customer_type not in Customer.TYPES:
        raise ValidationError(
            f"Invalid customer type '{customer_type}'. Must be one of: {', '.join(Customer.TYPES)}"
        )


def _check_name(db: Session, name: str, exclude_id: Optional[int] = None) -> None:
    if find_by_name(db, Customer, name, exclude_id=exclude_id):
        raise ValidationError(f'Customer "{name}" already exists')


@router.get("", response_model=CustomerList)
def list_customers(
    search: Optional[str] = Query(None, description="Search name, email or phone"),
    type: Optional[str] = Query(None, description="Filter by customer type"),
    db: Session = Depends(get_db),
):
    """List live customers alphabetically."""
    query = active_only(db, Customer)
    if type:
        _check_type(type)
        query = query.filter(Customer.type == type)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(
            Customer.name.ilike(pattern),
            Customer.email.ilike(pattern),
            Customer.phone.ilike(pattern),
        ))
    customers = query.order_by(Customer.name).all()
    return CustomerList(customers=customers, count=len(customers))


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(customer_id: int, db: Session = Depends(get_db)):
    return get_live(db, Customer, customer_id, "Customer")


@router.post("", response_model=CustomerResponse, status_code=201)
def create_customer(data: CustomerCreate, db: Session = Depends(get_db)):
    name = data.name.strip()
    _check_type(data.type)
    _check_name(db, name)

    with transaction(db, "customer creation"):
        customer = Customer(**data.model_dump(exclude={"name"}), name=name)
        db.add(customer)

    logger.info(f"Created customer {customer.id} ({customer.name})")
    return customer


@router.put("/{customer_id}", response_model=CustomerResponse)
def update_customer(customer_id: int, data: CustomerUpdate, db: Session = Depends(get_db)):
    customer = get_live(db, Customer, customer_id, "Customer")
    name = data.name.strip()
    _check_type(data.type)
    _check_name(db, name, exclude_id=customer_id)

    with transaction(db, f"update of customer {customer_id}"):
        for field, value in data.model_dump(exclude={"name"}).items():
            setattr(customer, field, value)
        customer.name = name
    return customer


@router.delete("/{customer_id}", status_code=204)
def delete_customer(customer_id: int, db: Session = Depends(get_db)):
    """Soft delete a customer. Their recipes and orders are kept."""
    customer = get_live(db, Customer, customer_id, "Customer")
    with transaction(db, f"deletion of customer {customer_id}"):
        customer.soft_delete()
    logger.info(f"Deleted customer {customer_id}")
    return None


@router.post("/bulk", response_model=CustomerBulkResult, status_code=201)
def bulk_create_customers(data: CustomerBulkRequest, db: Session = Depends(get_db)):
    """
    Import several customers at once.

    The batch is rejected as a whole if any entry has an invalid type, clashes
    with an existing customer, or repeats a name within the batch.
    """
    seen = set()
    for entry in data.customers:
        name = entry.name.strip()
        _check_type(entry.type)
        if name_key(name) in seen:
            raise ValidationError(f'Customer "{name}" appears more than once')
        seen.add(name_key(name))
        _check_name(db, name)

    with transaction(db, "bulk customer import"):
        for entry in data.customers:
            db.add(Customer(**entry.model_dump(exclude={"name"}), name=entry.name.strip()))

    logger.info(f"Imported {len(data.customers)} customers")
    return CustomerBulkResult(
        message=f"{len(data.customers)} customers added",
        added=len(data.customers),
    )
