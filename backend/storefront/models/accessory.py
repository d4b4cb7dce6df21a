from decimal import Decimal

from sqlalchemy import Boolean, Integer, Numeric, String
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from storefront.core.db import Base
from storefront.core.validation import (
    CURRENCY_RE,
    ValidationMixin,
    validate_format,
    validate_presence,
    validate_uniqueness,
)


class Accessory(ValidationMixin, Base):
    __tablename__ = "accessories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    sku: Mapped[str | None] = mapped_column(String(40), unique=True, index=True)
    name: Mapped[str | None] = mapped_column(String(160))
    price: Mapped[Decimal | None] = mapped_column(Numeric(8, 2))
    active: Mapped[bool] = mapped_column(Boolean, default=True)

    skus = relationship("Sku", back_populates="accessory", order_by="Sku.id")

    def validate(self, db: Session) -> None:
        validate_presence(self, "name", "sku", "price")
        validate_format(self, "price", CURRENCY_RE)
        validate_uniqueness(self, db, "sku")
