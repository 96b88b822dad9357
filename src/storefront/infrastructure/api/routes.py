"""FastAPI routes: orders, cart and the notification inbox."""

from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Depends, Header, Request

from storefront.application.show_order import DEFAULT_PAGE_SIZE
from storefront.domain.exceptions import AuthorizationError
from storefront.domain.model.actor import Actor, Role
from storefront.infrastructure.api.schemas import (
    AddToCartRequest,
    CreateOrderRequest,
    TrackingRequest,
    UpdateStatusRequest,
)
from storefront.infrastructure.bootstrap import Container


def get_container(request: Request) -> Container:
    return request.app.state.container


def current_actor(
    x_actor_id: str | None = Header(default=None),
    x_actor_role: str | None = Header(default=None),
) -> Actor:
    """Identity as established by the upstream authentication layer."""
    if not x_actor_id or not x_actor_role:
        raise AuthorizationError("Authentication required")
    return Actor.of(x_actor_id, x_actor_role)


def _require_role(actor: Actor, role: Role) -> None:
    if actor.active_role is not role:
        raise AuthorizationError(f"Only a {role.value} may use this endpoint")


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("/create", status_code=201)
def create_order(
    body: CreateOrderRequest,
    actor: Actor = Depends(current_actor),
    container: Container = Depends(get_container),
):
    dto = container.checkout().handle(actor, body.to_request())
    return {"success": True, "message": "Order created successfully.", "order": asdict(dto)}


@order_router.get("/my")
def my_orders(
    actor: Actor = Depends(current_actor),
    container: Container = Depends(get_container),
):
    orders = container.list_orders().handle_mine(actor)
    return {"success": True, "orders": [asdict(o) for o in orders]}


@order_router.get("/my/stats")
def my_order_stats(
    actor: Actor = Depends(current_actor),
    container: Container = Depends(get_container),
):
    stats = container.order_stats().handle_mine(actor)
    return {"success": True, "stats": asdict(stats)}


@order_router.get("/search")
def search_orders(
    status: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    actor: Actor = Depends(current_actor),
    container: Container = Depends(get_container),
):
    result = container.list_orders().search(
        actor,
        status=status,
        date_from=date_from,
        date_to=date_to,
        page=page,
        page_size=page_size,
    )
    return {
        "success": True,
        "orders": [asdict(o) for o in result.orders],
        "total": result.total,
        "page": result.page,
        "page_size": result.page_size,
    }


@order_router.get("/seller/stats")
def seller_stats(
    actor: Actor = Depends(current_actor),
    container: Container = Depends(get_container),
):
    _require_role(actor, Role.SELLER)
    stats = container.order_stats().handle(actor)
    return {"success": True, "stats": asdict(stats)}


@order_router.get("/seller/dashboard")
def seller_dashboard(
    actor: Actor = Depends(current_actor),
    container: Container = Depends(get_container),
):
    _require_role(actor, Role.SELLER)
    return {"success": True, **asdict(container.order_stats().dashboard(actor))}


@order_router.get("/admin/stats")
def admin_stats(
    actor: Actor = Depends(current_actor),
    container: Container = Depends(get_container),
):
    _require_role(actor, Role.ADMIN)
    stats = container.order_stats().handle(actor)
    return {"success": True, "stats": asdict(stats)}


@order_router.get("/admin/all")
def all_orders(
    actor: Actor = Depends(current_actor),
    container: Container = Depends(get_container),
):
    _require_role(actor, Role.ADMIN)
    orders = container.list_orders().handle(actor)
    return {"success": True, "orders": [asdict(o) for o in orders]}


@order_router.put("/cancel/{order_id}")
def cancel_order(
    order_id: str,
    actor: Actor = Depends(current_actor),
    container: Container = Depends(get_container),
):
    dto = container.cancel_order().handle(actor, order_id)
    return {"success": True, "message": "Order cancelled successfully.", "order": asdict(dto)}


@order_router.put("/seller/update/{order_id}")
def seller_update_status(
    order_id: str,
    body: UpdateStatusRequest,
    actor: Actor = Depends(current_actor),
    container: Container = Depends(get_container),
):
    _require_role(actor, Role.SELLER)
    dto = container.update_order_status().handle(actor, order_id, body.status)
    return {"success": True, "message": "Order status updated successfully.", "order": asdict(dto)}


@order_router.put("/admin/update/{order_id}")
def admin_update_status(
    order_id: str,
    body: UpdateStatusRequest,
    actor: Actor = Depends(current_actor),
    container: Container = Depends(get_container),
):
    _require_role(actor, Role.ADMIN)
    dto = container.update_order_status().handle(actor, order_id, body.status)
    return {"success": True, "message": "Order updated successfully", "order": asdict(dto)}


@order_router.post("/{order_id}/track")
def add_tracking_number(
    order_id: str,
    body: TrackingRequest,
    actor: Actor = Depends(current_actor),
    container: Container = Depends(get_container),
):
    dto = container.add_tracking_number().handle(actor, order_id, body.tracking_number)
    return {"success": True, "message": "Tracking number added", "order": asdict(dto)}


@order_router.get("/{order_id}")
def order_details(
    order_id: str,
    actor: Actor = Depends(current_actor),
    container: Container = Depends(get_container),
):
    dto = container.show_order().handle(actor, order_id)
    return {"success": True, "order": asdict(dto)}


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("")
def show_cart(
    actor: Actor = Depends(current_actor),
    container: Container = Depends(get_container),
):
    return {"success": True, "cart": asdict(container.show_cart().handle(actor))}


@cart_router.post("/items")
def add_cart_item(
    body: AddToCartRequest,
    actor: Actor = Depends(current_actor),
    container: Container = Depends(get_container),
):
    cart = container.add_to_cart().handle(actor, body.product_id, body.quantity)
    return {"success": True, "cart": asdict(cart)}


# ---------------------------------------------------------------------------
# Notification Router
# ---------------------------------------------------------------------------
notification_router = APIRouter(prefix="/notifications", tags=["notifications"])


@notification_router.get("")
def list_notifications(
    actor: Actor = Depends(current_actor),
    container: Container = Depends(get_container),
):
    notifications, unread = container.notification_service.inbox(actor.id)
    return {
        "notifications": [n.to_payload() for n in notifications],
        "unread_count": unread,
    }
