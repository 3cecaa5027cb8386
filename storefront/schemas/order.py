from datetime import datetime
from typing import List

from pydantic import Field, field_validator

from storefront.db.models import OrderStatus
from storefront.schemas.base import CamelModel

# keeps quantity times unit price within a 32-bit total_amount column
MAX_LINE_QUANTITY = 10_000


class OrderItemCreate(CamelModel):
    product_id: int
    quantity: int = Field(ge=1, le=MAX_LINE_QUANTITY)


class OrderCreate(CamelModel):
    address: str
    items: List[OrderItemCreate] = Field(min_length=1)

    @field_validator("address")
    @classmethod
    def address_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Address is required")
        return value


class OrderResponse(CamelModel):
    id: int
    user_id: str
    status: OrderStatus
    total_amount: int
    address: str
    created_at: datetime


class OrderItemResponse(CamelModel):
    id: int
    order_id: int
    product_id: int
    quantity: int
    price: int
