from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr

from storefront.models.order import ShippingStatus


class AddressIn(BaseModel):
    first_name: str = ""
    last_name: str = ""
    company: str = ""
    address: str = ""
    city: str = ""
    county: str = ""
    postcode: str = ""
    country: str = ""
    telephone: str = ""


class CartItemCreate(BaseModel):
    sku_id: int
    quantity: int = 1
    accessory_id: int | None = None


class CartItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sku_id: int
    price: Decimal
    quantity: int
    total_price: Decimal


class CartOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    cart_items: list[CartItemOut]
    total_price: Decimal


class OrderCreate(BaseModel):
    email: EmailStr | None = None
    delivery_id: int | None = None
    terms: bool | None = None
    ip_address: str | None = None
    delivery_address: AddressIn | None = None
    billing_address: AddressIn | None = None


class CalculateRequest(BaseModel):
    cart_id: int
    tax_rate: Decimal | None = None


class TransferRequest(BaseModel):
    cart_id: int


class TransactionCreate(BaseModel):
    payment_status: Literal["Completed", "Pending", "Failed"]
    payment_type: str = ""
    gross_amount: Decimal = Decimal("0")
    fee: Decimal = Decimal("0")


class DispatchRequest(BaseModel):
    consignment_number: str
    shipping_date: datetime | None = None
    actual_shipping_cost: Decimal | None = None


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sku_id: int
    price: Decimal
    quantity: int


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str | None
    delivery_id: int | None
    cart_id: int | None
    net_amount: Decimal | None
    tax_amount: Decimal | None
    gross_amount: Decimal | None
    shipping_status: ShippingStatus
    consignment_number: str | None
    is_completed: bool
    created_at: datetime
    order_items: list[OrderItemOut]
