import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.core.validation import destroy, save
from storefront.models.delivery_service import DeliveryService
from storefront.models.delivery_service_price import DeliveryServicePrice

logger = logging.getLogger(__name__)


def create_delivery_service(db: Session, name: str, description: str = "", active: bool = True) -> DeliveryService:
    service = DeliveryService(name=name, description=description, active=active)
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


def list_delivery_prices(db: Session, active_only: bool = False) -> list[DeliveryServicePrice]:
    """Delivery prices, cheapest first."""
    stmt = db.query(DeliveryServicePrice)
    if active_only:
        stmt = stmt.filter(DeliveryServicePrice.active == True)  # noqa: E712
    return stmt.order_by(DeliveryServicePrice.price.asc(), DeliveryServicePrice.id.asc()).all()


def create_delivery_price(db: Session, **attrs) -> DeliveryServicePrice:
    return save(db, DeliveryServicePrice(**attrs))


def find_for_parcel(db: Session, weight: Decimal, length: Decimal, thickness: Decimal) -> list[DeliveryServicePrice]:
    weight, length, thickness = Decimal(str(weight)), Decimal(str(length)), Decimal(str(thickness))
    return [
        price
        for price in list_delivery_prices(db, active_only=True)
        if price.matches(weight, length, thickness)
    ]


def destroy_delivery_price(db: Session, price: DeliveryServicePrice) -> None:
    """Delete a delivery price. Raises ``DeleteRestrictionError`` while orders use it."""
    destroy(db, price)
    logger.info("Deleted delivery price %s", price.code)
