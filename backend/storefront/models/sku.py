# The skus table holds every purchasable variation. A product (or an
# accessory) owns several SKUs, each told apart by its attribute value, e.g.
# a T-shirt in "Small", "Medium" and "Large". When no code is given the SKU
# code is the parent's base code joined with the attribute value.
import re
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    and_,
    func,
    select,
)
from sqlalchemy.orm import Mapped, Session, foreign, mapped_column, relationship, validates

from storefront.core.config import settings
from storefront.core.db import Base
from storefront.core.validation import (
    BASE,
    CURRENCY_RE,
    ValidationMixin,
    validate_format,
    validate_numericality,
    validate_presence,
    validate_uniqueness,
)
from storefront.models.accessory import Accessory
from storefront.models.notification import Notification
from storefront.models.product import Product

STOCK_WARNING_MESSAGE = "stock warning level value must not be below your stock count."


class Sku(ValidationMixin, Base):
    __tablename__ = "skus"
    __table_args__ = (UniqueConstraint("product_id", "attribute_value"),)
    __restrict_on_destroy__ = ("cart_items", "order_items")

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    sku: Mapped[str | None] = mapped_column(String(255), unique=True, index=True)
    length: Mapped[Decimal | None] = mapped_column(Numeric(8, 2))
    weight: Mapped[Decimal | None] = mapped_column(Numeric(8, 2))
    thickness: Mapped[Decimal | None] = mapped_column(Numeric(8, 2))
    attribute_value: Mapped[str | None] = mapped_column(String(255))
    attribute_type_id: Mapped[int | None] = mapped_column(ForeignKey("attribute_types.id"))
    stock: Mapped[int | None] = mapped_column(Integer)
    stock_warning_level: Mapped[int | None] = mapped_column(Integer)
    cost_value: Mapped[Decimal | None] = mapped_column(Numeric(8, 2))
    price: Mapped[Decimal | None] = mapped_column(Numeric(8, 2))
    product_id: Mapped[int | None] = mapped_column(ForeignKey("products.id"), index=True)
    accessory_id: Mapped[int | None] = mapped_column(ForeignKey("accessories.id"), index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    product = relationship("Product", back_populates="skus")
    accessory = relationship("Accessory", back_populates="skus")
    attribute_type = relationship("AttributeType")
    cart_items = relationship("CartItem", back_populates="sku")
    carts = relationship("Cart", secondary="cart_items", viewonly=True)
    order_items = relationship("OrderItem", back_populates="sku")
    orders = relationship("Order", secondary="order_items", viewonly=True)
    notifications = relationship(
        "Notification",
        primaryjoin=lambda: and_(
            Sku.id == foreign(Notification.notifiable_id),
            Notification.notifiable_type == "Sku",
        ),
        cascade="all, delete-orphan",
    )

    @validates("notifications")
    def _tag_notification(self, key, notification):
        notification.notifiable_type = "Sku"
        return notification

    @property
    def low_stock(self) -> bool:
        return (
            self.stock is not None
            and self.stock_warning_level is not None
            and self.stock <= self.stock_warning_level
        )

    def parent(self, db: Session):
        if self.product is not None:
            return self.product
        if self.product_id is not None:
            return db.get(Product, self.product_id)
        if self.accessory is not None:
            return self.accessory
        if self.accessory_id is not None:
            return db.get(Accessory, self.accessory_id)
        return None

    def generate_code(self, db: Session) -> str | None:
        parent = self.parent(db)
        if parent is None or not parent.sku or not self.attribute_value:
            return None
        value = re.sub(r"[^A-Za-z0-9]+", "-", self.attribute_value.strip()).strip("-")
        return f"{parent.sku}-{value}".upper()

    def validate(self, db: Session) -> None:
        if self.product is not None and self.product_id is None:
            self.product_id = self.product.id
        if not self.sku:
            self.sku = self.generate_code(db)

        validate_presence(
            self, "price", "cost_value", "stock", "length",
            "weight", "thickness", "stock_warning_level",
            "attribute_value", "attribute_type_id",
        )
        validate_format(self, "price", CURRENCY_RE)
        validate_format(self, "cost_value", CURRENCY_RE)
        for attr in ("length", "weight", "thickness"):
            validate_numericality(self, attr, greater_than_or_equal_to=0)
        for attr in ("stock", "stock_warning_level"):
            validate_numericality(self, attr, only_integer=True, greater_than_or_equal_to=1)
        if self.is_new_record:
            self.check_stock_values()
        validate_uniqueness(self, db, "sku")
        if self.product_id is not None:
            validate_uniqueness(self, db, "attribute_value", scope=("product_id",))

    def check_stock_values(self) -> None:
        if self.stock is not None and self.stock_warning_level is not None:
            if self.stock <= self.stock_warning_level:
                self.add_error("sku", STOCK_WARNING_MESSAGE)

    def before_destroy(self, db: Session) -> bool:
        if self.product_id is None:
            return True
        product = db.get(Product, self.product_id)
        count = db.scalar(select(func.count(Sku.id)).where(Sku.product_id == self.product_id))
        minimum = settings.MIN_SKUS_PER_PRODUCT
        if count - 1 < minimum:
            product.errors.pop(BASE, None)
            product.add_error(BASE, f"You must have at least {minimum} SKUs per product.")
            return False
        return True

    def __repr__(self):
        return f"<Sku {self.sku}>"
