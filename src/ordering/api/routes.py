"""FastAPI routes for the Ordering domain: carts, orders and statistics."""

import json

from fastapi import APIRouter, Depends
from identity.auth.claims import Claims
from protean.utils.globals import current_domain

from ordering.api.auth import current_claims, seller_claims
from ordering.api.schemas import (
    AddToCartRequest,
    CancelOrderRequest,
    CartContainsResponse,
    CartCountResponse,
    CartResponse,
    CartTotalResponse,
    OrderResponse,
    PlaceOrderRequest,
    SellerProductStatsResponse,
    SellerStatsResponse,
    StatusUpdateRequest,
    SyncCartRequest,
    UpdateCartQuantityRequest,
    UserProductStatsResponse,
    UserStatsResponse,
)
from ordering.cart import queries as cart_queries
from ordering.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from ordering.cart.management import ClearCart, DeleteCart, SyncCart
from ordering.order import queries as order_queries
from ordering.order.cancellation import CancelOrder
from ordering.order.placement import PlaceOrder, Reorder
from ordering.order.queries import OrderSearch
from ordering.order.status import UpdateOrderStatus
from ordering.stats import queries as stats_queries


def _cart_response(owner_id) -> CartResponse:
    return CartResponse.model_validate(cart_queries.cart_for(owner_id))


def _order_response(view) -> OrderResponse:
    return OrderResponse.model_validate(view)


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(claims: Claims = Depends(current_claims)) -> CartResponse:
    return _cart_response(claims.user_id)


@cart_router.post("/items", response_model=CartResponse)
async def add_cart_item(body: AddToCartRequest, claims: Claims = Depends(current_claims)) -> CartResponse:
    command = AddToCart(owner_id=claims.user_id, **body.model_dump())
    current_domain.process(command, asynchronous=False)
    return _cart_response(claims.user_id)


@cart_router.put("/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: str, body: UpdateCartQuantityRequest, claims: Claims = Depends(current_claims)
) -> CartResponse:
    command = UpdateCartQuantity(owner_id=claims.user_id, product_id=product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return _cart_response(claims.user_id)


@cart_router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(product_id: str, claims: Claims = Depends(current_claims)) -> CartResponse:
    command = RemoveFromCart(owner_id=claims.user_id, product_id=product_id)
    current_domain.process(command, asynchronous=False)
    return _cart_response(claims.user_id)


@cart_router.post("/clear", response_model=CartResponse)
async def clear_cart(claims: Claims = Depends(current_claims)) -> CartResponse:
    current_domain.process(ClearCart(owner_id=claims.user_id), asynchronous=False)
    return _cart_response(claims.user_id)


@cart_router.put("/sync", response_model=CartResponse)
async def sync_cart(body: SyncCartRequest, claims: Claims = Depends(current_claims)) -> CartResponse:
    command = SyncCart(
        owner_id=claims.user_id,
        items=json.dumps([item.model_dump() for item in body.items]),
    )
    current_domain.process(command, asynchronous=False)
    return _cart_response(claims.user_id)


@cart_router.delete("", status_code=204)
async def delete_cart(claims: Claims = Depends(current_claims)) -> None:
    current_domain.process(DeleteCart(owner_id=claims.user_id), asynchronous=False)


@cart_router.get("/count", response_model=CartCountResponse)
async def cart_count(claims: Claims = Depends(current_claims)) -> CartCountResponse:
    return CartCountResponse(count=cart_queries.cart_item_count(claims.user_id))


@cart_router.get("/total", response_model=CartTotalResponse)
async def cart_total(claims: Claims = Depends(current_claims)) -> CartTotalResponse:
    return CartTotalResponse(total=cart_queries.cart_total(claims.user_id))


@cart_router.get("/contains/{product_id}", response_model=CartContainsResponse)
async def cart_contains(product_id: str, claims: Claims = Depends(current_claims)) -> CartContainsResponse:
    return CartContainsResponse(in_cart=cart_queries.is_product_in_cart(claims.user_id, product_id))


# ---------------------------------------------------------------------------
# Statistics Router
# ---------------------------------------------------------------------------
stats_router = APIRouter(prefix="/orders/stats", tags=["statistics"])


@stats_router.get("/user", response_model=UserStatsResponse)
async def user_stats(claims: Claims = Depends(current_claims)) -> UserStatsResponse:
    return UserStatsResponse.model_validate(stats_queries.user_stats(claims.user_id))


@stats_router.get("/user/products", response_model=UserProductStatsResponse)
async def user_product_stats(claims: Claims = Depends(current_claims)) -> UserProductStatsResponse:
    return UserProductStatsResponse.model_validate(stats_queries.user_product_stats(claims.user_id))


@stats_router.get("/seller", response_model=SellerStatsResponse)
async def seller_stats(claims: Claims = Depends(seller_claims)) -> SellerStatsResponse:
    return SellerStatsResponse.model_validate(stats_queries.seller_stats(claims.user_id))


@stats_router.get("/seller/products", response_model=SellerProductStatsResponse)
async def seller_product_stats(claims: Claims = Depends(seller_claims)) -> SellerProductStatsResponse:
    return SellerProductStatsResponse.model_validate(stats_queries.seller_product_stats(claims.user_id))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(body: PlaceOrderRequest, claims: Claims = Depends(current_claims)) -> OrderResponse:
    command = PlaceOrder(
        buyer_id=claims.user_id,
        buyer_name=claims.display_name,
        buyer_email=claims.subject,
        items=json.dumps([item.model_dump() for item in body.items]),
        shipping_address=body.shipping_address,
        shipping_city=body.shipping_city,
        shipping_postal_code=body.shipping_postal_code,
        shipping_country=body.shipping_country,
        phone_number=body.phone_number,
        payment_method=body.payment_method,
        notes=body.notes,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return _order_response(order_queries.order_for(order_id, claims.user_id))


@order_router.get("/mine", response_model=list[OrderResponse])
async def my_orders(status: str | None = None, claims: Claims = Depends(current_claims)) -> list[OrderResponse]:
    search = OrderSearch.from_params(status=status)
    return [_order_response(view) for view in order_queries.orders_for_buyer(claims.user_id, status=search.status)]


@order_router.get("/mine/search", response_model=list[OrderResponse])
async def search_my_orders(
    keyword: str | None = None,
    status: str | None = None,
    sort_by: str | None = None,
    sort_dir: str | None = None,
    claims: Claims = Depends(current_claims),
) -> list[OrderResponse]:
    search = OrderSearch.from_params(keyword=keyword, status=status, sort_by=sort_by, sort_dir=sort_dir)
    return [_order_response(view) for view in order_queries.search_buyer_orders(claims.user_id, search)]


@order_router.get("/seller", response_model=list[OrderResponse])
async def seller_orders(status: str | None = None, claims: Claims = Depends(seller_claims)) -> list[OrderResponse]:
    search = OrderSearch.from_params(status=status)
    return [_order_response(view) for view in order_queries.orders_for_seller(claims.user_id, status=search.status)]


@order_router.get("/seller/search", response_model=list[OrderResponse])
async def search_seller_orders(
    keyword: str | None = None,
    status: str | None = None,
    sort_by: str | None = None,
    sort_dir: str | None = None,
    claims: Claims = Depends(seller_claims),
) -> list[OrderResponse]:
    search = OrderSearch.from_params(keyword=keyword, status=status, sort_by=sort_by, sort_dir=sort_dir)
    return [_order_response(view) for view in order_queries.search_seller_orders(claims.user_id, search)]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, claims: Claims = Depends(current_claims)) -> OrderResponse:
    view = order_queries.order_for(order_id, claims.user_id, is_seller=claims.is_seller())
    return _order_response(view)


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str, body: StatusUpdateRequest, claims: Claims = Depends(seller_claims)
) -> OrderResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        seller_id=claims.user_id,
        status=body.status.upper(),
        reason=body.reason,
    )
    current_domain.process(command, asynchronous=False)
    return _order_response(order_queries.order_for(order_id, claims.user_id, is_seller=True))


@order_router.put("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: str, body: CancelOrderRequest | None = None, claims: Claims = Depends(current_claims)
) -> OrderResponse:
    command = CancelOrder(
        order_id=order_id,
        buyer_id=claims.user_id,
        reason=body.reason if body else None,
    )
    current_domain.process(command, asynchronous=False)
    return _order_response(order_queries.order_for(order_id, claims.user_id))


@order_router.post("/{order_id}/reorder", status_code=201, response_model=OrderResponse)
async def reorder(order_id: str, claims: Claims = Depends(current_claims)) -> OrderResponse:
    command = Reorder(
        order_id=order_id,
        buyer_id=claims.user_id,
        buyer_name=claims.display_name,
        buyer_email=claims.subject,
    )
    new_order_id = current_domain.process(command, asynchronous=False)
    return _order_response(order_queries.order_for(new_order_id, claims.user_id))
