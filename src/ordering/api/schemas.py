"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), kept separate from the
internal Protean commands and read models.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    product_name: str
    seller_id: str
    seller_name: str | None = None
    unit_price: float = Field(ge=0)
    quantity: int = Field(ge=1, default=1)
    stock_hint: int | None = None
    image_ref: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-001",
                    "product_name": "Espresso Cup",
                    "seller_id": "seller-001",
                    "seller_name": "Cup Co",
                    "unit_price": 12.5,
                    "quantity": 2,
                }
            ]
        }
    }


class UpdateCartQuantityRequest(BaseModel):
    quantity: int  # Zero or less removes the item


class SyncCartItemSchema(BaseModel):
    product_id: str
    product_name: str
    seller_id: str
    seller_name: str | None = None
    unit_price: float = Field(ge=0)
    quantity: int = Field(ge=0)
    stock_hint: int | None = None
    image_ref: str | None = None


class SyncCartRequest(BaseModel):
    items: list[SyncCartItemSchema]


# ---------------------------------------------------------------------------
# Cart Response Schemas
# ---------------------------------------------------------------------------
class CartItemResponse(BaseModel):
    product_id: str
    product_name: str
    seller_id: str
    seller_name: str | None = None
    unit_price: float
    quantity: int
    subtotal: float
    stock_hint: int | None = None
    image_ref: str | None = None

    model_config = {"from_attributes": True}


class CartResponse(BaseModel):
    id: str
    owner_id: str
    items: list[CartItemResponse]
    total_amount: float
    total_items: int
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class CartCountResponse(BaseModel):
    count: int


class CartTotalResponse(BaseModel):
    total: float


class CartContainsResponse(BaseModel):
    in_cart: bool


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class OrderItemSchema(BaseModel):
    product_id: str
    product_name: str
    seller_id: str
    seller_name: str | None = None
    unit_price: float = Field(ge=0)
    quantity: int = Field(ge=1)
    image_ref: str | None = None


class PlaceOrderRequest(BaseModel):
    items: list[OrderItemSchema]
    shipping_address: str
    shipping_city: str
    shipping_postal_code: str
    shipping_country: str
    phone_number: str
    payment_method: str = "COD"
    notes: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {
                            "product_id": "prod-001",
                            "product_name": "Espresso Cup",
                            "seller_id": "seller-001",
                            "seller_name": "Cup Co",
                            "unit_price": 50.0,
                            "quantity": 2,
                        }
                    ],
                    "shipping_address": "12 Harbour Road",
                    "shipping_city": "Lisbon",
                    "shipping_postal_code": "1100-001",
                    "shipping_country": "PT",
                    "phone_number": "+351 210 000 000",
                    "payment_method": "COD",
                }
            ]
        }
    }


class StatusUpdateRequest(BaseModel):
    status: str
    reason: str | None = None  # Only used when cancelling


class CancelOrderRequest(BaseModel):
    reason: str | None = None


# ---------------------------------------------------------------------------
# Order Response Schemas
# ---------------------------------------------------------------------------
class OrderItemResponse(BaseModel):
    product_id: str
    product_name: str
    seller_id: str
    seller_name: str | None = None
    unit_price: float
    quantity: int
    subtotal: float
    image_ref: str | None = None

    model_config = {"from_attributes": True}


class OrderResponse(BaseModel):
    id: str
    buyer_id: str
    buyer_name: str | None = None
    buyer_email: str | None = None
    items: list[OrderItemResponse]
    total_amount: float
    status: str
    shipping_address: str
    shipping_city: str
    shipping_postal_code: str
    shipping_country: str
    phone_number: str
    payment_method: str | None = None
    notes: str | None = None
    cancellation_reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    confirmed_at: datetime | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None

    model_config = {"from_attributes": True}


# ---------------------------------------------------------------------------
# Statistics Response Schemas
# ---------------------------------------------------------------------------
class UserStatsResponse(BaseModel):
    total_orders: int
    completed_orders: int
    total_spent: float

    model_config = {"from_attributes": True}


class SellerStatsResponse(BaseModel):
    total_orders: int
    completed_orders: int
    total_revenue: float
    total_items_sold: int

    model_config = {"from_attributes": True}


class ProductPurchaseResponse(BaseModel):
    product_id: str
    product_name: str
    seller_id: str | None = None
    seller_name: str | None = None
    total_quantity: int
    total_spent: float
    last_purchased_at: datetime | None = None
    image_ref: str | None = None

    model_config = {"from_attributes": True}


class CategorySpendResponse(BaseModel):
    category: str
    order_count: int
    item_count: int
    total_spent: float

    model_config = {"from_attributes": True}


class UserProductStatsResponse(BaseModel):
    top_products: list[ProductPurchaseResponse]
    top_categories: list[CategorySpendResponse]
    total_unique_products: int
    total_items_purchased: int

    model_config = {"from_attributes": True}


class BestSellerResponse(BaseModel):
    product_id: str
    product_name: str
    total_sold: int
    revenue: float
    order_count: int
    image_ref: str | None = None

    model_config = {"from_attributes": True}


class RecentSaleResponse(BaseModel):
    order_id: str
    product_id: str
    product_name: str
    customer_name: str | None = None
    quantity: int
    amount: float
    sale_date: datetime | None = None

    model_config = {"from_attributes": True}


class SellerProductStatsResponse(BaseModel):
    best_sellers: list[BestSellerResponse]
    recent_sales: list[RecentSaleResponse]
    total_customers: int
    total_products_sold: int

    model_config = {"from_attributes": True}
