# A priced tier of a delivery service, e.g. "Royal Mail 1st Class, large
# letter". Each tier covers a weight/length/thickness window; listings are
# cheapest first.
import re
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from storefront.core.db import Base
from storefront.core.validation import (
    ValidationMixin,
    validate_format,
    validate_length,
    validate_presence,
    validate_uniqueness,
)

PRICE_RE = re.compile(r"\A(\$)?(\d+)(\.|,)?\d{0,2}?\Z")

BOUNDS = ("min_weight", "max_weight", "min_length", "max_length", "min_thickness", "max_thickness")


class DeliveryServicePrice(ValidationMixin, Base):
    __tablename__ = "delivery_service_prices"
    __table_args__ = (UniqueConstraint("code", "active", "delivery_service_id"),)
    __restrict_on_destroy__ = ("orders",)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str | None] = mapped_column(String(255))
    price: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), index=True)
    description: Mapped[str | None] = mapped_column(Text)
    min_weight: Mapped[Decimal | None] = mapped_column(Numeric(8, 2))
    max_weight: Mapped[Decimal | None] = mapped_column(Numeric(8, 2))
    min_length: Mapped[Decimal | None] = mapped_column(Numeric(8, 2))
    max_length: Mapped[Decimal | None] = mapped_column(Numeric(8, 2))
    min_thickness: Mapped[Decimal | None] = mapped_column(Numeric(8, 2))
    max_thickness: Mapped[Decimal | None] = mapped_column(Numeric(8, 2))
    delivery_service_id: Mapped[int] = mapped_column(ForeignKey("delivery_services.id"), index=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    delivery_service = relationship("DeliveryService", back_populates="prices")
    orders = relationship("Order", back_populates="delivery")

    def validate(self, db: Session) -> None:
        if self.delivery_service is not None and self.delivery_service_id is None:
            self.delivery_service_id = self.delivery_service.id
        # the column default only applies at INSERT, the uniqueness scope needs it now
        if self.active is None:
            self.active = True

        validate_presence(self, "code", "price", *BOUNDS)
        validate_presence(self, "delivery_service_id")
        validate_uniqueness(self, db, "code", scope=("active", "delivery_service_id"))
        validate_length(self, "description", maximum=180)
        validate_format(self, "price", PRICE_RE)

    def matches(self, weight: Decimal, length: Decimal, thickness: Decimal) -> bool:
        """Whether a parcel of the given dimensions fits this tier (bounds inclusive)."""
        return (
            self.min_weight <= weight <= self.max_weight
            and self.min_length <= length <= self.max_length
            and self.min_thickness <= thickness <= self.max_thickness
        )

    def __repr__(self):
        return f"<DeliveryServicePrice {self.code} {self.price}>"
