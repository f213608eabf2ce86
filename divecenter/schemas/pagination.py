import math
from typing import TypeVar, Generic
from pydantic import BaseModel
from sqlalchemy import Select, select, func
from sqlalchemy.orm import Session

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    items: list[T]
    total: int
    page: int
    pages: int
    size: int


def paginate(db: Session, query: Select, page: int = 1, size: int = 50) -> Page:
    """Run ``query`` for one page; ``pages`` is at least 1 even when empty."""
    total = db.scalar(select(func.count()).select_from(query.order_by(None).subquery()))
    rows = db.scalars(query.offset((page - 1) * size).limit(size)).all()
    return Page(
        items=rows,
        total=total,
        page=page,
        pages=math.ceil(total / size) if total else 1,
        size=size,
    )
