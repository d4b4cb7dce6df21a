from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from storefront.core.db import Base
from storefront.core.validation import ValidationMixin, validate_presence, validate_uniqueness


class Product(ValidationMixin, Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    sku: Mapped[str | None] = mapped_column(String(40), unique=True, index=True)
    name: Mapped[str | None] = mapped_column(String(160), index=True)
    description: Mapped[str | None] = mapped_column(Text)
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    category_id: Mapped[int | None] = mapped_column(ForeignKey("categories.id"), index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )

    category = relationship("Category", back_populates="products")
    skus = relationship("Sku", back_populates="product", order_by="Sku.id")

    def validate(self, db: Session) -> None:
        validate_presence(self, "name", "sku", "category_id")
        validate_uniqueness(self, db, "sku")
