import enum
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, Numeric, String, and_
from sqlalchemy.orm import Mapped, Session, foreign, mapped_column, relationship, validates

from storefront.core.db import Base
from storefront.core.validation import (
    ValidationMixin,
    validate_email,
    validate_inclusion,
    validate_presence,
)
from storefront.models.address import ORDER_BILL_ADDRESS, ORDER_DELIVERY_ADDRESS, Address
from storefront.models.delivery_service_price import DeliveryServicePrice
from storefront.models.order_item import OrderItem, OrderItemAccessory
from storefront.models.transaction import COMPLETED

TERMS_MESSAGE = "You must tick the box in order to place your order."
DELIVERY_MESSAGE = "Delivery option must be selected."
CENT = Decimal("0.01")


class ShippingStatus(str, enum.Enum):
    pending = "pending"
    dispatched = "dispatched"


class PaymentType(str, enum.Enum):
    paypal = "paypal"
    stripe = "stripe"


class Order(ValidationMixin, Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str | None] = mapped_column(String(255), index=True)
    shipping_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    actual_shipping_cost: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    delivery_id: Mapped[int | None] = mapped_column(ForeignKey("delivery_service_prices.id"), index=True)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    user_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    net_amount: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    gross_amount: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    tax_amount: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    terms: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    cart_id: Mapped[int | None] = mapped_column(ForeignKey("carts.id"), index=True, nullable=True)
    shipping_status: Mapped[ShippingStatus] = mapped_column(
        Enum(ShippingStatus), default=ShippingStatus.pending
    )
    consignment_number: Mapped[str | None] = mapped_column(String(60), nullable=True)
    payment_type: Mapped[PaymentType | None] = mapped_column(Enum(PaymentType), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    delivery = relationship("DeliveryServicePrice", back_populates="orders")
    cart = relationship("Cart", back_populates="orders")
    order_items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )
    transactions = relationship(
        "Transaction",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="Transaction.id",
    )
    skus = relationship("Sku", secondary="order_items", viewonly=True)
    delivery_address = relationship(
        "Address",
        primaryjoin=lambda: and_(
            Order.id == foreign(Address.addressable_id),
            Address.addressable_type == ORDER_DELIVERY_ADDRESS,
        ),
        uselist=False,
        cascade="all, delete-orphan",
        overlaps="billing_address",
    )
    billing_address = relationship(
        "Address",
        primaryjoin=lambda: and_(
            Order.id == foreign(Address.addressable_id),
            Address.addressable_type == ORDER_BILL_ADDRESS,
        ),
        uselist=False,
        cascade="all, delete-orphan",
        overlaps="delivery_address",
    )

    @validates("delivery_address")
    def _tag_delivery_address(self, key, address):
        if address is not None:
            address.addressable_type = ORDER_DELIVERY_ADDRESS
        return address

    @validates("billing_address")
    def _tag_billing_address(self, key, address):
        if address is not None:
            address.addressable_type = ORDER_BILL_ADDRESS
        return address

    @property
    def products(self) -> list:
        seen, out = set(), []
        for sku in self.skus:
            if sku.product is not None and sku.product.id not in seen:
                seen.add(sku.product.id)
                out.append(sku.product)
        return out

    @property
    def delivery_service(self):
        return self.delivery.delivery_service if self.delivery else None

    @property
    def is_completed(self) -> bool:
        return any(t.payment_status == COMPLETED for t in self.transactions)

    def validate(self, db: Session) -> None:
        if self.delivery is not None and self.delivery_id is None:
            self.delivery_id = self.delivery.id

        if self.is_completed:
            validate_presence(self, "actual_shipping_cost")
        validate_inclusion(self, "terms", [True], message=TERMS_MESSAGE)
        validate_presence(self, "delivery_id", message=DELIVERY_MESSAGE)
        if self.delivery_id is not None and db.get(DeliveryServicePrice, self.delivery_id) is None:
            self.add_error("delivery_id", DELIVERY_MESSAGE)
        validate_presence(self, "email", message="is required")
        if self.email:
            validate_email(self, "email")

    def calculate(self, cart, tax_rate: Decimal) -> None:
        """Set net/tax/gross amounts from the cart total and delivery price.

        Tax is rounded to the penny first so gross always equals
        net + delivery + tax once stored.
        """
        tax_rate = Decimal(str(tax_rate))
        subtotal = cart.total_price
        delivery_price = Decimal(self.delivery.price)
        self.cart_id = cart.id
        self.net_amount = subtotal
        self.tax_amount = ((subtotal + delivery_price) * tax_rate).quantize(CENT, ROUND_HALF_UP)
        self.gross_amount = self.net_amount + delivery_price + self.tax_amount

    def transfer(self, cart) -> None:
        """Replace this order's items with copies of the cart's items."""
        self.order_items.clear()
        for item in cart.cart_items:
            order_item = OrderItem(
                sku_id=item.sku_id,
                price=item.price,
                quantity=item.quantity,
                weight=item.weight,
            )
            accessory = item.cart_item_accessory
            if accessory is not None:
                order_item.order_item_accessory = OrderItemAccessory(
                    accessory_id=accessory.accessory_id,
                    price=accessory.price,
                    quantity=accessory.quantity,
                )
            self.order_items.append(order_item)

    def dispatch(self, consignment_number: str, shipping_date: datetime | None = None) -> None:
        self.consignment_number = consignment_number
        self.shipping_date = shipping_date or datetime.now(timezone.utc)
        self.shipping_status = ShippingStatus.dispatched

    def __repr__(self):
        return f"<Order {self.id} {self.email}>"
