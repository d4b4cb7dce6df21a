from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class DeliveryServicePriceCreate(BaseModel):
    code: str | None = None
    price: Decimal | None = None
    description: str | None = None
    min_weight: Decimal | None = None
    max_weight: Decimal | None = None
    min_length: Decimal | None = None
    max_length: Decimal | None = None
    min_thickness: Decimal | None = None
    max_thickness: Decimal | None = None
    delivery_service_id: int | None = None
    active: bool = True


class DeliveryServicePriceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    price: Decimal
    description: str | None
    delivery_service_id: int
    active: bool
