from __future__ import annotations

from typing import List

from fastapi import Depends, HTTPException, Request, status
from pydantic import ValidationError

from affordances.models.hateoas import Link
from affordances.models.order import (
    Order,
    OrderCreate,
    OrderRead,
    OrderStatus,
    OrderUpdate,
)
from affordances.services.orders import OrderStore, get_store
from affordances.utils.hateoas import AffordanceBuilder, with_affordances
from affordances.utils.routing import Controller, route


# -----------------------------------------------------------------------------
# HATEOAS
# -----------------------------------------------------------------------------
def build_order_link(request: Request, order: Order) -> Link:
    link = Link(href=str(request.url_for("get_order", id=order.id)), rel="self")

    def configure(affordances: AffordanceBuilder) -> None:
        affordances.declare(OrderController, lambda orders: orders.update_order(order.id))
        # A cancelled order can only be reordered
        if order.status is not OrderStatus.CANCELLED:
            affordances.declare(OrderController, lambda orders: orders.cancel(order.id))
        affordances.declare(OrderController, lambda orders: orders.reorder(order.id))

    return with_affordances(link, configure)


def hateoas_order(request: Request, order: Order) -> OrderRead:
    order_read = OrderRead.model_validate(order.model_dump())
    return order_read.model_copy(update={"links": [build_order_link(request, order)]})


def _load(store: OrderStore, order_id: int) -> Order:
    order = store.get(order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------
class OrderController(Controller):
    prefix = "/orders"
    tags = ("Orders",)

    @route.get("", response_model=List[OrderRead], status_code=200, name="list_orders")
    async def list_orders(self, request: Request, store: OrderStore = Depends(get_store)):
        return [hateoas_order(request, order) for order in store.list()]

    @route.post("", response_model=OrderRead, status_code=201, name="create_order")
    async def create_order(
        self,
        request: Request,
        order_in: OrderCreate,
        store: OrderStore = Depends(get_store),
    ):
        order = store.add(order_in)
        return hateoas_order(request, order)

    @route.get("/{id}", response_model=OrderRead, status_code=200, name="get_order")
    async def get_order(self, id: int, request: Request, store: OrderStore = Depends(get_store)):
        """Get information about a specific order"""
        return hateoas_order(request, _load(store, id))

    @route.patch("/{id}", response_model=OrderRead, status_code=200, name="update_order")
    async def update_order(
        self,
        id: int,
        order_update: OrderUpdate,
        request: Request,
        store: OrderStore = Depends(get_store),
    ):
        """Updates the details of an order"""
        order = _load(store, id)

        update_data = order_update.model_dump(exclude_unset=True)
        if not update_data:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No fields provided for update",
            )

        try:
            updated = Order.model_validate({**order.model_dump(), **update_data})
        except ValidationError as exc:
            fields = ", ".join(str(error["loc"][0]) for error in exc.errors())
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid values for: {fields}",
            )

        order = store.save(updated)
        return hateoas_order(request, order)

    @route.delete("/{id}/cancel", response_model=OrderRead, status_code=200, name="cancel")
    async def cancel(self, id: int, request: Request, store: OrderStore = Depends(get_store)):
        """Cancel an order that has not been cancelled yet"""
        order = _load(store, id)
        if order.status is OrderStatus.CANCELLED:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Order is already cancelled",
            )

        order = store.save(order.model_copy(update={"status": OrderStatus.CANCELLED}))
        return hateoas_order(request, order)

    @route.post("/{id}/reorder", response_model=OrderRead, status_code=201, name="reorder")
    async def reorder(self, id: int, request: Request, store: OrderStore = Depends(get_store)):
        """Place a new order for the same item and quantity"""
        previous = _load(store, id)
        order = store.add(OrderCreate(item=previous.item, quantity=previous.quantity))
        return hateoas_order(request, order)
