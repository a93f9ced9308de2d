"""
Typed records decoded at the retrieval boundary.

Every raw row, whether it comes from the ORM, a JSON payload or a test
fixture, is validated into one of these frozen models before it reaches the
aggregation code. Joined product relations are normalised here: the store may
hand back a single object, a one-element list, an empty list or nothing.
"""

from datetime import datetime
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


def unwrap_join(value: Any) -> Any:
    """Collapse a joined relation to a single object or None."""
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


class Record(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True, extra="ignore")


class JoinedProduct(Record):
    """Product columns carried along an order-item or favorite join"""
    id: str
    name: str = ""
    images: Tuple[str, ...] = ()
    category_id: Optional[str] = None

    @field_validator("images", mode="before")
    @classmethod
    def _images(cls, v: Any) -> Any:
        return () if v is None else v

    @property
    def thumbnail(self) -> str:
        return self.images[0] if self.images else ""


class OrderRecord(Record):
    id: str
    total_amount: float = Field(default=0.0, ge=0)
    status: str
    payment_method: Optional[str] = None
    created_at: datetime
    user_id: Optional[str] = None

    @field_validator("total_amount", mode="before")
    @classmethod
    def _amount(cls, v: Any) -> Any:
        return 0.0 if v is None else float(v)


class OrderItemRecord(Record):
    order_id: str
    product_id: Optional[str] = None
    quantity: int = Field(gt=0)
    price: float
    product: Optional[JoinedProduct] = None

    @field_validator("product", mode="before")
    @classmethod
    def _product(cls, v: Any) -> Any:
        return unwrap_join(v)

    @field_validator("price", mode="before")
    @classmethod
    def _price(cls, v: Any) -> Any:
        return 0.0 if v is None else float(v)


class ProductRecord(Record):
    id: str
    name: str = ""
    category_id: Optional[str] = None
    stock: int = Field(default=0, ge=0)
    is_featured: bool = False
    is_on_sale: bool = False
    images: Tuple[str, ...] = ()

    @field_validator("images", mode="before")
    @classmethod
    def _images(cls, v: Any) -> Any:
        return () if v is None else v

    @field_validator("is_featured", "is_on_sale", mode="before")
    @classmethod
    def _flags(cls, v: Any) -> Any:
        return False if v is None else v


class CategoryRecord(Record):
    id: str
    name: str


class UserRecord(Record):
    id: str
    created_at: datetime


class FavoriteRecord(Record):
    id: str
    product_id: Optional[str] = None
    user_id: Optional[str] = None
    product: Optional[JoinedProduct] = None

    @field_validator("product", mode="before")
    @classmethod
    def _product(cls, v: Any) -> Any:
        return unwrap_join(v)
