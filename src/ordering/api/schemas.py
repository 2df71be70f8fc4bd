"""Pydantic request/response schemas for the Ordering API."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------


class AddressSchema(BaseModel):
    full_name: str | None = Field(None, max_length=255)
    address: str | None = Field(None, max_length=500)
    city: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    phone: str | None = Field(None, max_length=30)


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------


class CheckoutItemSchema(BaseModel):
    product_id: str | None = None
    id: str | None = None
    quantity: int | None = None
    price: Decimal | None = None
    product_name: str | None = None


class ShippingSchema(BaseModel):
    address: AddressSchema | None = None
    cost: Decimal | None = None


class BillingSchema(BaseModel):
    address: AddressSchema | None = None


class CreateOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "prod-001", "quantity": 2, "price": "19.99"}],
                    "total": "45.98",
                    "tax": "1.00",
                    "shipping": {
                        "address": {
                            "full_name": "Jane Doe",
                            "address": "12 Market Street",
                            "city": "Springfield",
                            "postal_code": "12345",
                            "phone": "+1-555-0100",
                        },
                        "cost": "5.00",
                    },
                }
            ]
        }
    }

    items: list[CheckoutItemSchema] = Field(default_factory=list)
    total: Decimal | None = None
    tax: Decimal | None = None
    shipping: ShippingSchema | None = None
    billing: BillingSchema | None = None


# ---------------------------------------------------------------------------
# Status changes
# ---------------------------------------------------------------------------


class UpdateStatusRequest(BaseModel):
    status: str


class ShipOrderRequest(BaseModel):
    model_config = {"populate_by_name": True}

    tracking_number: str | None = Field(None, alias="trackingNumber")
    shipping_provider: str | None = Field(None, alias="shippingProvider")


class DeliverOrderRequest(BaseModel):
    confirm: bool = False


class AdminUpdateOrderRequest(BaseModel):
    model_config = {"populate_by_name": True}

    status: str | None = None
    tracking_number: str | None = Field(None, alias="trackingNumber")
    shipping_provider: str | None = Field(None, alias="shippingProvider")


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


class RegisterProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Ceramic Mug",
                    "sku": "MUG-001",
                    "unit_price": "12.50",
                    "available_quantity": 40,
                    "low_stock_threshold": 5,
                    "images": ["https://cdn.example.com/mug.png"],
                }
            ]
        }
    }

    product_id: str | None = None
    name: str = Field(..., max_length=255)
    sku: str | None = Field(None, max_length=50)
    unit_price: Decimal = Field(..., ge=0)
    available_quantity: int = Field(0, ge=0)
    low_stock_threshold: int | None = Field(None, ge=0)
    images: list[str] = Field(default_factory=list)


class UpdateProductDetailsRequest(BaseModel):
    name: str | None = Field(None, max_length=255)
    images: list[str] | None = None


class RestockRequest(BaseModel):
    quantity: int = Field(..., gt=0)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class OrderItemView(BaseModel):
    id: str
    product_id: str
    product_name: str | None = None
    images: list[str] = Field(default_factory=list)
    quantity: int
    unit_price_at_purchase: Decimal
    subtotal: Decimal


class OrderView(BaseModel):
    id: str
    user_id: str
    status: str
    total_amount: Decimal
    tax_amount: Decimal | None = None
    shipping_cost: Decimal | None = None
    shipping_address: AddressSchema | None = None
    billing_address: AddressSchema | None = None
    tracking_number: str | None = None
    shipping_provider: str | None = None
    estimated_delivery_date: date | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    item_count: int = 0
    items: list[OrderItemView] = Field(default_factory=list)
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None


class OrderStatusView(BaseModel):
    id: str
    status: str
    tracking_number: str | None = None
    shipping_provider: str | None = None
    estimated_delivery_date: date | None = None


class OrderStatistics(BaseModel):
    total_orders: int
    orders_by_status: dict[str, int]
    total_revenue: Decimal


class ProductView(BaseModel):
    id: str
    name: str
    sku: str | None = None
    unit_price: Decimal
    available_quantity: int
    low_stock_threshold: int | None = None
    images: list[str] = Field(default_factory=list)


class ProductIdResponse(BaseModel):
    product_id: str


class StatusResponse(BaseModel):
    status: str = "ok"
