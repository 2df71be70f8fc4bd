"""FastAPI routes for the Ordering domain — customer orders, warehouse, admin and products.

Authentication happens upstream: the gateway forwards the caller's id in the
`X-User-Id` header, and staff calls may carry `X-Actor-Id` for the audit log.
"""

from fastapi import APIRouter, Depends, Header, HTTPException
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    AdminUpdateOrderRequest,
    CreateOrderRequest,
    DeliverOrderRequest,
    OrderStatistics,
    OrderStatusView,
    OrderView,
    ProductIdResponse,
    ProductView,
    RegisterProductRequest,
    RestockRequest,
    ShipOrderRequest,
    StatusResponse,
    UpdateProductDetailsRequest,
    UpdateStatusRequest,
)
from ordering.inventory.ledger import InventoryLedger
from ordering.inventory.stocking import RegisterProduct, UpdateProductDetails
from ordering.listing.service import OrderListing
from ordering.workflow.engine import OrderWorkflow


def get_workflow() -> OrderWorkflow:
    return OrderWorkflow()


def get_listing() -> OrderListing:
    return OrderListing()


def get_ledger() -> InventoryLedger:
    return InventoryLedger()


def current_user(x_user_id: str = Header(default="")) -> str:
    if not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()


def current_actor(x_actor_id: str | None = Header(default=None)) -> str | None:
    return x_actor_id.strip() if x_actor_id and x_actor_id.strip() else None


def _status_view(order) -> OrderStatusView:
    return OrderStatusView(
        id=str(order.id),
        status=order.status,
        tracking_number=order.tracking_number,
        shipping_provider=order.shipping_provider,
        estimated_delivery_date=order.estimated_delivery_date,
    )


# ---------------------------------------------------------------------------
# Customer Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderView)
async def create_order(
    body: CreateOrderRequest,
    user_id: str = Depends(current_user),
    workflow: OrderWorkflow = Depends(get_workflow),
) -> dict:
    return workflow.create_order(user_id, body)


@order_router.get("", response_model=list[OrderView])
async def list_my_orders(
    user_id: str = Depends(current_user),
    listing: OrderListing = Depends(get_listing),
) -> list[dict]:
    return listing.list_by_user(user_id)


@order_router.get("/{order_id}", response_model=OrderView)
async def get_my_order(
    order_id: str,
    user_id: str = Depends(current_user),
    listing: OrderListing = Depends(get_listing),
) -> dict:
    return listing.get_order_by_id(user_id, order_id)


# ---------------------------------------------------------------------------
# Warehouse Router
# ---------------------------------------------------------------------------
warehouse_router = APIRouter(prefix="/warehouse/orders", tags=["warehouse"])


@warehouse_router.get("", response_model=list[OrderView])
async def list_warehouse_orders(
    status: str | None = None,
    customer: str | None = None,
    listing: OrderListing = Depends(get_listing),
) -> list[dict]:
    return listing.list_all(status=status, search=customer)


@warehouse_router.patch("/{order_id}/ship", response_model=OrderStatusView)
async def ship_order(
    order_id: str,
    body: ShipOrderRequest,
    workflow: OrderWorkflow = Depends(get_workflow),
) -> OrderStatusView:
    order = workflow.mark_shipped(order_id, body.tracking_number, body.shipping_provider)
    return _status_view(order)


@warehouse_router.patch("/{order_id}/deliver", response_model=OrderStatusView)
async def deliver_order(
    order_id: str,
    body: DeliverOrderRequest,
    workflow: OrderWorkflow = Depends(get_workflow),
) -> OrderStatusView:
    order = workflow.mark_delivered(order_id, body.confirm)
    return _status_view(order)


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin/orders", tags=["admin"])


@admin_router.get("", response_model=list[OrderView])
async def list_all_orders(
    status: str | None = None,
    search: str | None = None,
    listing: OrderListing = Depends(get_listing),
) -> list[dict]:
    return listing.list_all(status=status, search=search)


@admin_router.get("/stats", response_model=OrderStatistics)
async def order_statistics(listing: OrderListing = Depends(get_listing)) -> dict:
    return listing.statistics()


@admin_router.get("/{order_id}", response_model=OrderView)
async def get_any_order(order_id: str, listing: OrderListing = Depends(get_listing)) -> dict:
    return listing.get_order(order_id)


@admin_router.post("/{order_id}/confirm-payment", response_model=OrderStatusView)
async def confirm_payment(
    order_id: str,
    workflow: OrderWorkflow = Depends(get_workflow),
) -> OrderStatusView:
    return _status_view(workflow.confirm_payment(order_id))


@admin_router.put("/{order_id}", response_model=OrderView)
async def update_order(
    order_id: str,
    body: AdminUpdateOrderRequest,
    actor_id: str | None = Depends(current_actor),
    workflow: OrderWorkflow = Depends(get_workflow),
) -> dict:
    order = workflow.admin_update_order(order_id, body, actor_id=actor_id)
    return workflow.listing.get_order(order.id)


@admin_router.patch("/{order_id}/status", response_model=OrderStatusView)
async def override_status(
    order_id: str,
    body: UpdateStatusRequest,
    actor_id: str | None = Depends(current_actor),
    workflow: OrderWorkflow = Depends(get_workflow),
) -> OrderStatusView:
    return _status_view(workflow.update_status(order_id, body.status, actor_id=actor_id))


@admin_router.post("/{order_id}/cancel", response_model=OrderStatusView)
async def cancel_order(
    order_id: str,
    actor_id: str | None = Depends(current_actor),
    workflow: OrderWorkflow = Depends(get_workflow),
) -> OrderStatusView:
    return _status_view(workflow.cancel(order_id, actor_id=actor_id))


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


def _product_view(product) -> ProductView:
    return ProductView(
        id=str(product.id),
        name=product.name,
        sku=product.sku,
        unit_price=product.unit_price,
        available_quantity=product.available_quantity,
        low_stock_threshold=product.low_stock_threshold,
        images=list(product.images or []),
    )


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def register_product(body: RegisterProductRequest) -> ProductIdResponse:
    command = RegisterProduct(
        product_id=body.product_id,
        name=body.name,
        sku=body.sku,
        unit_price=body.unit_price,
        available_quantity=body.available_quantity,
        low_stock_threshold=body.low_stock_threshold,
        images=body.images,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("/{product_id}", response_model=ProductView)
async def get_product(product_id: str, ledger: InventoryLedger = Depends(get_ledger)) -> ProductView:
    return _product_view(ledger.product(product_id))


@product_router.put("/{product_id}/details", response_model=StatusResponse)
async def update_product_details(product_id: str, body: UpdateProductDetailsRequest) -> StatusResponse:
    command = UpdateProductDetails(product_id=product_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.post("/{product_id}/restock", response_model=ProductView)
async def restock_product(
    product_id: str,
    body: RestockRequest,
    ledger: InventoryLedger = Depends(get_ledger),
) -> ProductView:
    ledger.restore(product_id, body.quantity)
    return _product_view(ledger.product(product_id))
