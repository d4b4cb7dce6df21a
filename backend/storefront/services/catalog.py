import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.core.validation import destroy, save
from storefront.models.attribute_type import AttributeType
from storefront.models.category import Category
from storefront.models.notification import Notification
from storefront.models.product import Product
from storefront.models.sku import Sku

logger = logging.getLogger(__name__)

# -------------------------
# Categories
# -------------------------

def list_categories(db: Session, visible_only: bool = False) -> list[Category]:
    stmt = db.query(Category)
    if visible_only:
        stmt = stmt.filter(Category.visible == True)  # noqa: E712
    return stmt.order_by(Category.name.asc()).all()


def get_category(db: Session, key: str | int) -> Category | None:
    """Find a category by primary key or by slug."""
    if isinstance(key, int) or str(key).isdigit():
        return db.get(Category, int(key))
    return db.query(Category).filter(Category.slug == key).first()


def create_category(db: Session, name: str | None, description: str | None, visible: bool = True) -> Category:
    category = Category(name=name, description=description, visible=visible)
    return save(db, category)


# -------------------------
# Products
# -------------------------

def create_product(
    db: Session,
    name: str,
    sku: str,
    category_id: int | None,
    description: str = "",
    active: bool = True,
) -> Product:
    product = Product(name=name, sku=sku, category_id=category_id, description=description, active=active)
    return save(db, product)


def get_or_create_attribute_type(db: Session, name: str, measurement: str = "") -> AttributeType:
    attribute_type = db.query(AttributeType).filter_by(name=name).first()
    if attribute_type:
        return attribute_type
    attribute_type = AttributeType(name=name, measurement=measurement)
    db.add(attribute_type)
    db.commit()
    db.refresh(attribute_type)
    return attribute_type


# -------------------------
# SKUs
# -------------------------

def list_skus(db: Session, product_id: int) -> list[Sku]:
    return db.query(Sku).filter(Sku.product_id == product_id).order_by(Sku.id.asc()).all()


def low_stock_skus(db: Session) -> list[Sku]:
    return list(
        db.scalars(
            select(Sku)
            .where(Sku.stock <= Sku.stock_warning_level)
            .order_by(Sku.stock.asc(), Sku.id.asc())
        )
    )


def create_sku(db: Session, **attrs) -> Sku:
    return save(db, Sku(**attrs))


def destroy_sku(db: Session, sku: Sku) -> bool:
    """Delete a SKU unless its product would drop below the SKU minimum.

    Returns False, with the reason on ``sku.product.errors["base"]``, when
    refused. Raises ``DeleteRestrictionError`` while carts or orders hold it.
    """
    deleted = destroy(db, sku)
    if deleted:
        logger.info("Deleted SKU %s", sku.sku)
    return deleted


def request_stock_notification(db: Session, sku: Sku, email: str) -> Notification:
    notification = Notification(email=email.strip())
    sku.notifications.append(notification)
    db.commit()
    db.refresh(notification)
    return notification
