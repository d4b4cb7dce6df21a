from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from storefront.core.db import Base
from storefront.core.validation import ValidationMixin, validate_numericality, validate_presence


class Cart(Base):
    __tablename__ = "carts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    session_id: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    cart_items = relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.id",
    )
    orders = relationship("Order", back_populates="cart")

    @property
    def total_price(self) -> Decimal:
        return sum((item.total_price for item in self.cart_items), Decimal("0"))

    @property
    def total_weight(self) -> Decimal:
        return sum((item.total_weight for item in self.cart_items), Decimal("0"))


class CartItem(ValidationMixin, Base):
    __tablename__ = "cart_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    cart_id: Mapped[int] = mapped_column(ForeignKey("carts.id"), index=True)
    sku_id: Mapped[int] = mapped_column(ForeignKey("skus.id"), index=True)
    # unit price, accessory included
    price: Mapped[Decimal] = mapped_column(Numeric(8, 2))
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    weight: Mapped[Decimal] = mapped_column(Numeric(8, 2), default=0)

    cart = relationship("Cart", back_populates="cart_items")
    sku = relationship("Sku", back_populates="cart_items")
    cart_item_accessory = relationship(
        "CartItemAccessory",
        back_populates="cart_item",
        uselist=False,
        cascade="all, delete-orphan",
    )

    @property
    def total_price(self) -> Decimal:
        return Decimal(self.price) * self.quantity

    @property
    def total_weight(self) -> Decimal:
        return Decimal(self.weight or 0) * self.quantity

    def validate(self, db: Session) -> None:
        validate_presence(self, "price", "quantity")
        validate_numericality(self, "quantity", only_integer=True, greater_than_or_equal_to=1)


class CartItemAccessory(Base):
    __tablename__ = "cart_item_accessories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    cart_item_id: Mapped[int] = mapped_column(ForeignKey("cart_items.id"), index=True)
    accessory_id: Mapped[int] = mapped_column(ForeignKey("accessories.id"), index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(8, 2))
    quantity: Mapped[int] = mapped_column(Integer, default=1)

    cart_item = relationship("CartItem", back_populates="cart_item_accessory")
    accessory = relationship("Accessory")
