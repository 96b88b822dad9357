"""Application service: Cancel Order use case.

Separate from the generic status update: buyers may use it, and it is
scoped by ownership rather than by role alone.  Only Processing and
Shipped orders can be cancelled, so a second cancellation is rejected
before any stock is touched.
"""

from __future__ import annotations

import structlog

from storefront.application.dto import OrderDTO
from storefront.application.notifications import OrderNotifications
from storefront.application.order_view import catalog_for, to_order_dto
from storefront.application.unit_of_work import UnitOfWorkFactory
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.actor import Actor
from storefront.domain.service.inventory_ledger import InventoryLedger
from storefront.domain.service.transition_authority import StatusTransitionAuthority

logger = structlog.get_logger(__name__)


class CancelOrderHandler:

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        notifications: OrderNotifications,
        authority: StatusTransitionAuthority | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._notifications = notifications
        self._authority = authority or StatusTransitionAuthority()

    def handle(self, actor: Actor, order_id: str) -> OrderDTO:
        with self._uow_factory() as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found", order_id=order_id)

            self._authority.authorize_cancel(actor, order)

            order.cancel(changed_by=actor.id)
            InventoryLedger(uow.products).release_order(order)

            uow.orders.save(order)
            catalog = catalog_for(uow.products.get_many([i.product_id for i in order.items]))
            uow.commit()

        logger.info("order_cancelled", order_id=order.id, actor_id=actor.id)
        self._notifications.status_changed(order)
        return to_order_dto(order, catalog)
