"""Application service: Add Tracking Number use case."""

from __future__ import annotations

from storefront.application.dto import OrderDTO
from storefront.application.order_view import to_order_dto
from storefront.application.unit_of_work import UnitOfWorkFactory
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.actor import Actor
from storefront.domain.service.transition_authority import StatusTransitionAuthority


class AddTrackingNumberHandler:

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        authority: StatusTransitionAuthority | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._authority = authority or StatusTransitionAuthority()

    def handle(self, actor: Actor, order_id: str, tracking_number: str) -> OrderDTO:
        with self._uow_factory() as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found", order_id=order_id)
            self._authority.authorize_tracking(actor, order)
            order.set_tracking_number(tracking_number)
            uow.orders.save(order)
            uow.commit()
        return to_order_dto(order)
