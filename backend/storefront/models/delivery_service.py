from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.core.db import Base


class DeliveryService(Base):
    __tablename__ = "delivery_services"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), index=True)
    description: Mapped[str] = mapped_column(Text, default="")
    active: Mapped[bool] = mapped_column(Boolean, default=True)

    prices = relationship(
        "DeliveryServicePrice",
        back_populates="delivery_service",
        order_by="DeliveryServicePrice.price.asc()",
    )
