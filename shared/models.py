"""
Record types shared by the catalog, order and gateway services.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Book(BaseModel):
    """A catalog record, owned by whichever catalog replica stores it."""

    id: int = Field(..., description="Unique, immutable book id")
    title: str
    topic: str
    quantity: int = Field(..., ge=0, description="Copies in stock")
    price: float = Field(..., ge=0)


class BookUpdate(BaseModel):
    """Partial update; only the fields present are applied and forwarded."""

    quantity: Optional[int] = Field(None, ge=0)
    price: Optional[float] = Field(None, ge=0)

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)


class OrderStatus(str, Enum):
    """Order status enumeration."""

    COMPLETED = "completed"


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-01-01T12:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Order(BaseModel):
    """An order as created by exactly one order replica; never mutated."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: int
    book_id: int = Field(..., alias="bookId")
    book_title: str = Field(..., alias="bookTitle")
    price: float
    status: OrderStatus = OrderStatus.COMPLETED
    timestamp: str = Field(default_factory=utc_timestamp)

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class ReplicatedOrder(BaseModel):
    """Order payload pushed by the peer replica.

    Accepted as propagated, not re-derived: fields are optional and unknown
    fields are kept so the stored copy matches what the peer created.
    """

    model_config = ConfigDict(extra="allow")

    id: Optional[int] = None
    bookId: Optional[int] = None
    bookTitle: Optional[str] = None
    price: Optional[float] = None
    status: Optional[str] = None
    timestamp: Optional[str] = None

    def to_record(self) -> dict:
        return self.model_dump(exclude_none=True)
