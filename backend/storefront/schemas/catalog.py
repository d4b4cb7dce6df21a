from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr


class CategoryCreate(BaseModel):
    name: str | None = None
    description: str | None = None
    visible: bool = True


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    description: str
    visible: bool


class SkuCreate(BaseModel):
    sku: str | None = None
    product_id: int | None = None
    accessory_id: int | None = None
    attribute_value: str | None = None
    attribute_type_id: int | None = None
    price: Decimal | None = None
    cost_value: Decimal | None = None
    stock: int | None = None
    stock_warning_level: int | None = None
    length: Decimal | None = None
    weight: Decimal | None = None
    thickness: Decimal | None = None


class SkuOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sku: str
    product_id: int | None
    accessory_id: int | None
    attribute_value: str
    price: Decimal
    cost_value: Decimal
    stock: int
    stock_warning_level: int
    low_stock: bool


class NotificationCreate(BaseModel):
    email: EmailStr
