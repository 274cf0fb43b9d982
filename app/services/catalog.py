"""Lookup helpers shared by the catalog endpoints and services."""
from typing import Optional

from sqlalchemy.orm import Session

from app.errors import NotFoundError
from app.models import active_only


def get_live(db: Session, model, item_id: int, label: str):
    """Fetch a live row by id or raise NotFoundError."""
    item = active_only(db, model).filter(model.id == item_id).first()
    if item is None:
        raise NotFoundError(f"{label} {item_id} not found")
    return item


def name_key(name: str) -> str:
    """Comparison key for names: trimmed and Unicode case-folded."""
    return name.strip().casefold()


def find_by_name(db: Session, model, name: str, exclude_id: Optional[int] = None):
    """
    Live row whose name matches case-insensitively, if any.

    Compared in Python because SQLite's lower() only folds ASCII, which would
    let "Öz Tarım" and "öz tarım" through as different names.
    """
    query = active_only(db, model)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    key = name_key(name)
    for item in query.order_by(model.id):
        if name_key(item.name) == key:
            return item
    return None
