from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from storefront.core.db import Base


class AttributeType(Base):
    __tablename__ = "attribute_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(80), unique=True)
    measurement: Mapped[str] = mapped_column(String(20), default="")
