"""Pydantic request schemas for the HTTP API.

These are external contracts, separate from the application DTOs they
are converted into.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from storefront.application.dto import AddressSpec, CheckoutRequest, OrderItemSpec


class OrderItemSchema(BaseModel):
    product: str = Field(min_length=1)
    quantity: int = Field(ge=1)


class ShippingAddressSchema(BaseModel):
    street: str = Field(min_length=1)
    city: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    postal_code: str | None = Field(default=None, pattern=r"^\d{5,6}$")


class CreateOrderRequest(BaseModel):
    items: list[OrderItemSchema] = Field(min_length=1)
    shipping_address: ShippingAddressSchema
    total_amount: Decimal = Field(ge=0)
    payment_method: str = "Cash on Delivery"
    card_number: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product": "1", "quantity": 2}],
                    "shipping_address": {
                        "street": "12 Market St",
                        "city": "Springfield",
                        "phone": "555-0100",
                        "postal_code": "12345",
                    },
                    "total_amount": 20.0,
                    "payment_method": "Cash on Delivery",
                }
            ]
        }
    }

    def to_request(self) -> CheckoutRequest:
        address = self.shipping_address
        return CheckoutRequest(
            items=[OrderItemSpec(product_id=i.product, quantity=i.quantity) for i in self.items],
            shipping_address=AddressSpec(
                street=address.street,
                city=address.city,
                phone=address.phone,
                postal_code=address.postal_code,
            ),
            total_amount=self.total_amount,
            payment_method=self.payment_method,
            card_number=self.card_number,
        )


class UpdateStatusRequest(BaseModel):
    status: str


class TrackingRequest(BaseModel):
    tracking_number: str = Field(min_length=1)


class AddToCartRequest(BaseModel):
    product_id: str = Field(min_length=1)
    quantity: int = Field(ge=1, le=10, default=1)
