from decimal import Decimal

from sqlalchemy import ForeignKey, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.core.db import Base


class OrderItem(Base):
    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id"), index=True)
    sku_id: Mapped[int] = mapped_column(ForeignKey("skus.id"), index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(8, 2))
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    weight: Mapped[Decimal] = mapped_column(Numeric(8, 2), default=0)

    order = relationship("Order", back_populates="order_items")
    sku = relationship("Sku", back_populates="order_items")
    order_item_accessory = relationship(
        "OrderItemAccessory",
        back_populates="order_item",
        uselist=False,
        cascade="all, delete-orphan",
    )

    @property
    def total_price(self) -> Decimal:
        return Decimal(self.price) * self.quantity


class OrderItemAccessory(Base):
    __tablename__ = "order_item_accessories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_item_id: Mapped[int] = mapped_column(ForeignKey("order_items.id"), index=True)
    accessory_id: Mapped[int] = mapped_column(ForeignKey("accessories.id"), index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(8, 2))
    quantity: Mapped[int] = mapped_column(Integer, default=1)

    order_item = relationship("OrderItem", back_populates="order_item_accessory")
    accessory = relationship("Accessory")
