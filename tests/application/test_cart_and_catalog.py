"""Cart and catalog administration use cases."""

from decimal import Decimal

import pytest

from storefront.application.add_product import AddProductHandler
from storefront.application.add_to_cart import AddToCartHandler, ShowCartHandler
from storefront.application.restock_product import RestockProductHandler
from storefront.domain.exceptions import AuthorizationError, EntityNotFoundError, ValidationError
from storefront.domain.model.actor import Actor, Role
from tests.fakes import FakeUnitOfWork

BUYER = Actor("B1", Role.BUYER)
SELLER = Actor("S1", Role.SELLER)


def _setup() -> FakeUnitOfWork:
    uow = FakeUnitOfWork()
    AddProductHandler(uow).handle("S1", "Mug", "5.00", 5)
    AddProductHandler(uow).handle("S1", "Cup", "2.50", 10)
    return uow


class TestCatalog:

    def test_ids_are_sequential(self):
        uow = _setup()
        assert sorted(p.id for p in uow.products.list_all()) == ["1", "2"]

    def test_blank_title_rejected(self):
        with pytest.raises(ValidationError, match="title is required"):
            AddProductHandler(FakeUnitOfWork()).handle("S1", "  ", "5.00", 1)

    def test_owner_restocks(self):
        uow = _setup()
        assert RestockProductHandler(uow).handle(SELLER, "1", 20).quantity == 20

    def test_admin_restocks(self):
        uow = _setup()
        assert RestockProductHandler(uow).handle(Actor("A1", Role.ADMIN), "1", 0).quantity == 0

    def test_other_seller_cannot_restock(self):
        uow = _setup()
        with pytest.raises(AuthorizationError):
            RestockProductHandler(uow).handle(Actor("S2", Role.SELLER), "1", 20)
        assert uow.products.get_by_id("1").quantity == 5


class TestCart:

    def test_add_uses_catalog_price(self):
        uow = _setup()
        AddToCartHandler(uow).handle(BUYER, "1", 2)
        dto = AddToCartHandler(uow).handle(BUYER, "2", 1)
        assert dto.total == Decimal("12.50")
        assert [(i.product_id, i.quantity) for i in dto.items] == [("1", 2), ("2", 1)]

    def test_unknown_product(self):
        with pytest.raises(EntityNotFoundError):
            AddToCartHandler(_setup()).handle(BUYER, "99", 1)

    def test_quantity_limit_leaves_cart_unchanged(self):
        uow = _setup()
        AddToCartHandler(uow).handle(BUYER, "1", 9)
        with pytest.raises(ValidationError):
            AddToCartHandler(uow).handle(BUYER, "1", 2)
        assert ShowCartHandler(uow).handle(BUYER).items[0].quantity == 9

    def test_show_empty_cart(self):
        dto = ShowCartHandler(_setup()).handle(BUYER)
        assert dto.items == []
        assert dto.total == Decimal("0")
