"""Application service: Update Order Status use case.

Role checks come from the StatusTransitionAuthority, state-machine checks
from the Order aggregate.  Moving an order to Cancelled hands every
reserved unit back to the inventory ledger in the same transaction.
"""

from __future__ import annotations

import structlog

from storefront.application.dto import OrderDTO
from storefront.application.notifications import OrderNotifications
from storefront.application.order_view import catalog_for, to_order_dto
from storefront.application.unit_of_work import UnitOfWorkFactory
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.actor import Actor
from storefront.domain.model.order import OrderStatus
from storefront.domain.service.inventory_ledger import InventoryLedger
from storefront.domain.service.transition_authority import StatusTransitionAuthority

logger = structlog.get_logger(__name__)


class UpdateOrderStatusHandler:

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        notifications: OrderNotifications,
        authority: StatusTransitionAuthority | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._notifications = notifications
        self._authority = authority or StatusTransitionAuthority()

    def handle(self, actor: Actor, order_id: str, status: str) -> OrderDTO:
        new_status = OrderStatus.parse(status)

        with self._uow_factory() as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found", order_id=order_id)

            self._authority.authorize_status_change(actor, order, new_status)

            previous = order.status
            order.transition_to(new_status, changed_by=actor.id)

            if new_status == OrderStatus.CANCELLED and previous != OrderStatus.CANCELLED:
                InventoryLedger(uow.products).release_order(order)

            uow.orders.save(order)
            catalog = catalog_for(uow.products.get_many([i.product_id for i in order.items]))
            uow.commit()

        logger.info(
            "order_status_updated",
            order_id=order.id,
            previous=previous.value,
            status=new_status.value,
            actor_id=actor.id,
            role=actor.active_role.value,
        )
        self._notifications.status_changed(order)
        return to_order_dto(order, catalog)
