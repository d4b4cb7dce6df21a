from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.core.db import Base

COMPLETED = "Completed"
PENDING = "Pending"
FAILED = "Failed"
PAYMENT_STATUSES = (COMPLETED, PENDING, FAILED)


class Transaction(Base):
    """A payment attempt recorded against an order (never executed here)."""

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id"), index=True)
    payment_status: Mapped[str] = mapped_column(String(30), index=True, default=PENDING)
    payment_type: Mapped[str] = mapped_column(String(30), default="")
    transaction_type: Mapped[str] = mapped_column(String(30), default="Credit")
    fee: Mapped[Decimal] = mapped_column(Numeric(8, 2), default=0)
    gross_amount: Mapped[Decimal] = mapped_column(Numeric(8, 2), default=0)
    net_amount: Mapped[Decimal] = mapped_column(Numeric(8, 2), default=0)
    status_reason: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )

    order = relationship("Order", back_populates="transactions")
