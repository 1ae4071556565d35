# backend/inventory_api/schemas/common.py
from datetime import datetime
from typing import Generic, List, Optional, TypeVar
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python. Either is accepted on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PageResponse(CamelModel, Generic[T]):
    items: List[T]
    total: int
    page: int
    size: int
    total_pages: int


def format_date(value: Optional[datetime]) -> Optional[str]:
    """Dates on order and transaction payloads are rendered dd-MM-yyyy."""
    return value.strftime("%d-%m-%Y") if value else None
