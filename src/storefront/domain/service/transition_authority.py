"""Domain service: Status Transition Authority.

Decides *who* may move an order, and where to.  The Order aggregate still
guards the state machine itself (terminal states, duplicate writes); the
role table here is checked first so a seller poking at a finished order
gets an authorization error rather than a state conflict.

    buyer   no direct status writes (cancel has its own entry point)
    seller  Processing -> Shipped, on orders holding one of their products
    admin   anything the state machine allows
"""

from __future__ import annotations

from storefront.domain.exceptions import AuthorizationError
from storefront.domain.model.actor import Actor, Role
from storefront.domain.model.order import Order, OrderStatus


class StatusTransitionAuthority:

    def authorize_status_change(
        self, actor: Actor, order: Order, new_status: OrderStatus
    ) -> None:
        if actor.active_role is Role.ADMIN:
            return

        if actor.active_role is Role.SELLER:
            if not order.involves_seller(actor.id):
                raise AuthorizationError(
                    "Not authorized to update this order",
                    order_id=order.id,
                )
            if order.status != OrderStatus.PROCESSING or new_status != OrderStatus.SHIPPED:
                raise AuthorizationError(
                    "Seller can only change status from Processing to Shipped.",
                    order_id=order.id,
                    current=order.status.value,
                    requested=new_status.value,
                )
            return

        raise AuthorizationError(
            "Not authorized to update order status.", order_id=order.id
        )

    def authorize_cancel(self, actor: Actor, order: Order) -> None:
        if actor.active_role is Role.ADMIN:
            return
        if actor.active_role is Role.BUYER and order.buyer_id == actor.id:
            return
        if actor.active_role is Role.SELLER and order.involves_seller(actor.id):
            return
        raise AuthorizationError(
            "You do not have permission to cancel this order", order_id=order.id
        )

    def authorize_tracking(self, actor: Actor, order: Order) -> None:
        if actor.active_role is Role.ADMIN:
            return
        if actor.active_role is Role.SELLER and order.involves_seller(actor.id):
            return
        raise AuthorizationError(
            "Not authorized to add a tracking number", order_id=order.id
        )

    def can_view(self, actor: Actor, order: Order) -> bool:
        if actor.active_role is Role.ADMIN:
            return True
        if actor.active_role is Role.SELLER:
            return order.involves_seller(actor.id)
        return order.buyer_id == actor.id
