from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from storefront.core.db import Base

ORDER_DELIVERY_ADDRESS = "OrderDeliveryAddress"
ORDER_BILL_ADDRESS = "OrderBillAddress"


class Address(Base):
    __tablename__ = "addresses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(120), default="")
    last_name: Mapped[str] = mapped_column(String(120), default="")
    company: Mapped[str] = mapped_column(String(160), default="")
    address: Mapped[str] = mapped_column(String(255), default="")
    city: Mapped[str] = mapped_column(String(120), default="")
    county: Mapped[str] = mapped_column(String(120), default="")
    postcode: Mapped[str] = mapped_column(String(20), default="")
    country: Mapped[str] = mapped_column(String(80), default="")
    telephone: Mapped[str] = mapped_column(String(40), default="")
    addressable_type: Mapped[str] = mapped_column(String(40), index=True)
    addressable_id: Mapped[int | None] = mapped_column(Integer, index=True, nullable=True)
