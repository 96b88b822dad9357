"""Application services: order queries (read side).

All of these open a unit of work only to read; nothing is committed.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from datetime import date
from decimal import Decimal

from storefront.application.dto import (
    OrderDTO,
    OrderPageDTO,
    OrderStatsDTO,
    SellerDashboardDTO,
    StatusTotalsDTO,
)
from storefront.application.order_view import catalog_for, to_order_dto
from storefront.application.unit_of_work import UnitOfWorkFactory
from storefront.domain.exceptions import AuthorizationError, EntityNotFoundError, ValidationError
from storefront.domain.model.actor import Actor, Role
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.service.transition_authority import StatusTransitionAuthority

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class ShowOrderHandler:

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        authority: StatusTransitionAuthority | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._authority = authority or StatusTransitionAuthority()

    def handle(self, actor: Actor, order_id: str) -> OrderDTO:
        with self._uow_factory() as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found", order_id=order_id)
            if not self._authority.can_view(actor, order):
                raise AuthorizationError("Not authorized", order_id=order_id)
            products = uow.products.get_many([i.product_id for i in order.items])
        return to_order_dto(order, catalog_for(products))


class ListOrdersHandler:
    """Orders visible to the actor: their own, their products', or all."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(
        self,
        actor: Actor,
        status: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[OrderDTO]:
        wanted = OrderStatus.parse(status) if status else None
        if date_from and date_to and date_from > date_to:
            raise ValidationError(
                "date_from must not be after date_to",
                date_from=date_from.isoformat(),
                date_to=date_to.isoformat(),
            )
        with self._uow_factory() as uow:
            orders = [
                o
                for o in uow.orders.list_all()
                if _visible(actor, o)
                and (wanted is None or o.status == wanted)
                and _placed_within(o, date_from, date_to)
            ]
            catalog = catalog_for(uow.products.list_all())
        return [to_order_dto(o, catalog) for o in orders]

    def search(
        self,
        actor: Actor,
        status: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> OrderPageDTO:
        """One page of :meth:`handle`, newest first."""
        if page < 1:
            raise ValidationError("page must be at least 1", page=page)
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValidationError(
                f"page_size must be between 1 and {MAX_PAGE_SIZE}", page_size=page_size
            )
        orders = self.handle(actor, status, date_from, date_to)
        start = (page - 1) * page_size
        return OrderPageDTO(
            orders=orders[start : start + page_size],
            total=len(orders),
            page=page,
            page_size=page_size,
        )

    def handle_mine(self, actor: Actor) -> list[OrderDTO]:
        """Orders the actor placed as a buyer, whatever their role."""
        with self._uow_factory() as uow:
            orders = [o for o in uow.orders.list_all() if o.buyer_id == actor.id]
            catalog = catalog_for(uow.products.list_all())
        return [to_order_dto(o, catalog) for o in orders]


def _visible(actor: Actor, order: Order) -> bool:
    if actor.active_role is Role.ADMIN:
        return True
    if actor.active_role is Role.SELLER:
        return order.involves_seller(actor.id)
    return order.buyer_id == actor.id


def _placed_within(order: Order, date_from: date | None, date_to: date | None) -> bool:
    placed = order.created_at.date()
    if date_from and placed < date_from:
        return False
    if date_to and placed > date_to:
        return False
    return True


class OrderStatsHandler:
    """Order counts for buyers, sellers and admins.

    ``handle`` scopes by the active role the same way the order list
    does; ``handle_mine`` always counts the orders the actor placed.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, actor: Actor) -> OrderStatsDTO:
        with self._uow_factory() as uow:
            orders = [o for o in uow.orders.list_all() if _visible(actor, o)]
        if actor.active_role is Role.SELLER:
            return _stats(orders, lambda o: _seller_amount(o, actor.id))
        return _stats(orders, lambda o: o.total.amount)

    def handle_mine(self, actor: Actor) -> OrderStatsDTO:
        with self._uow_factory() as uow:
            orders = [o for o in uow.orders.list_all() if o.buyer_id == actor.id]
        return _stats(orders, lambda o: o.total.amount)

    def dashboard(self, actor: Actor) -> SellerDashboardDTO:
        """Headline numbers for a seller; cancelled orders are left out."""
        with self._uow_factory() as uow:
            orders = [
                o
                for o in uow.orders.list_all()
                if o.involves_seller(actor.id) and o.status != OrderStatus.CANCELLED
            ]
        return SellerDashboardDTO(
            total_orders=len(orders),
            completed_orders=sum(1 for o in orders if o.status == OrderStatus.DELIVERED),
            total_sales=sum((_seller_amount(o, actor.id) for o in orders), Decimal("0.00")),
        )


def _seller_amount(order: Order, seller_id: str) -> Decimal:
    return sum(
        (i.line_total.amount for i in order.items if i.seller_id == seller_id),
        Decimal("0.00"),
    )


def _stats(orders: list[Order], amount_of: Callable[[Order], Decimal]) -> OrderStatsDTO:
    counts: Counter[OrderStatus] = Counter()
    amounts: dict[OrderStatus, Decimal] = {}
    for order in orders:
        counts[order.status] += 1
        amounts[order.status] = amounts.get(order.status, Decimal("0.00")) + amount_of(order)
    return OrderStatsDTO(
        total=len(orders),
        completed=counts[OrderStatus.DELIVERED],
        pending=counts[OrderStatus.PROCESSING],
        cancelled=counts[OrderStatus.CANCELLED],
        by_status={
            status.value: StatusTotalsDTO(count=counts[status], amount=amounts[status])
            for status in OrderStatus
            if counts[status]
        },
    )
