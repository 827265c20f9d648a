from __future__ import annotations
from datetime import datetime
from enum import Enum as PyEnum
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field

from affordances.models.hateoas import Link

# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------
class OrderStatus(str, PyEnum):
    """Status of an order"""
    PLACED = "placed"           # Accepted, not yet shipped
    SHIPPED = "shipped"         # Handed to the carrier
    CANCELLED = "cancelled"     # Cancelled by the customer


# -----------------------------------------------------------------------------
# Pydantic Models
# -----------------------------------------------------------------------------
class OrderBase(BaseModel):
    """Base model definition for an order."""
    item: str = Field(
        ...,
        description="Ordered item"
    )
    quantity: int = Field(
        1,
        ge=1,
        description="Number of items ordered"
    )

    model_config = ConfigDict(from_attributes=True)


class OrderCreate(OrderBase):
    pass


class OrderUpdate(BaseModel):
    """Partial update of an order; ID is taken from path"""
    item: Optional[str] = Field(
        None,
        description="Ordered item"
    )
    quantity: Optional[int] = Field(
        None,
        ge=1,
        description="Number of items ordered"
    )
    status: Optional[OrderStatus] = Field(
        None,
        description="Updated order status"
    )


class Order(OrderBase):
    """Stored order"""
    id: int = Field(
        ...,
        description="Unique identifier for this order"
    )
    status: OrderStatus = Field(
        OrderStatus.PLACED,
        description="Current status of the order"
    )
    created_at: datetime = Field(
        ...,
        description="Timestamp when this order was placed"
    )


class OrderRead(Order):
    """Read information about an order"""
    links: Optional[List[Link]] = Field(
        None,
        description="HATEOAS links."
    )
