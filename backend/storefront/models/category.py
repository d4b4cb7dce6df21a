import re
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Integer, String, Text, select
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from storefront.core.db import Base
from storefront.core.validation import ValidationMixin, validate_presence, validate_uniqueness


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    return slug or "category"


class Category(ValidationMixin, Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str | None] = mapped_column(String(255), unique=True, index=True)
    slug: Mapped[str | None] = mapped_column(String(255), unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text)
    visible: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    products = relationship("Product", back_populates="category")

    def validate(self, db: Session) -> None:
        validate_presence(self, "name", "description")
        validate_uniqueness(self, db, "name")
        if not self.slug and self.name and not self.errors.get("name"):
            self.slug = self._unique_slug(db, slugify(self.name))

    def _unique_slug(self, db: Session, base: str) -> str:
        # "T-Shirts" and "T Shirts" both slug to "t-shirts"
        candidate, n = base, 1
        while True:
            stmt = select(Category.id).where(Category.slug == candidate)
            if self.id is not None:
                stmt = stmt.where(Category.id != self.id)
            if db.execute(stmt.limit(1)).first() is None:
                return candidate
            n += 1
            candidate = f"{base}-{n}"

    def __repr__(self):
        return f"<Category {self.name}>"
