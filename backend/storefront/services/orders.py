import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy import exists
from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.core.validation import save
from storefront.models.address import Address
from storefront.models.cart import Cart
from storefront.models.order import Order
from storefront.models.transaction import Transaction

logger = logging.getLogger(__name__)

# -------------------------
# Listing
# -------------------------

def list_orders(db: Session, limit: int | None = None) -> list[Order]:
    """Orders, most recently created first."""
    stmt = db.query(Order).order_by(Order.created_at.desc(), Order.id.desc())
    if limit is not None:
        stmt = stmt.limit(limit)
    return stmt.all()


def active_orders(db: Session) -> list[Order]:
    """Orders with at least one transaction, most recent first."""
    has_transaction = exists().where(Transaction.order_id == Order.id)
    return (
        db.query(Order)
        .filter(has_transaction)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


# -------------------------
# Placing orders
# -------------------------

def create_order(
    db: Session,
    email: str | None,
    delivery_id: int | None,
    terms: bool | None,
    delivery_address: dict | None = None,
    billing_address: dict | None = None,
    **attrs,
) -> Order:
    order = Order(email=email, delivery_id=delivery_id, terms=terms, **attrs)
    if delivery_address:
        order.delivery_address = Address(**delivery_address)
    if billing_address:
        order.billing_address = Address(**billing_address)
    return save(db, order)


def calculate_order(db: Session, order: Order, cart: Cart, tax_rate: Decimal | None = None) -> Order:
    if tax_rate is None:
        tax_rate = settings.TAX_RATE
    order.calculate(cart, tax_rate)
    logger.info(
        "Order #%s calculated: net=%s tax=%s gross=%s",
        order.id, order.net_amount, order.tax_amount, order.gross_amount,
    )
    return save(db, order)


def transfer_cart(db: Session, order: Order, cart: Cart) -> Order:
    order.transfer(cart)
    save(db, order)
    logger.info("Transferred %d cart items from cart #%s to order #%s", len(order.order_items), cart.id, order.id)
    return order


# -------------------------
# Payment & shipping
# -------------------------

def add_transaction(db: Session, order: Order, payment_status: str, **attrs) -> Transaction:
    transaction = Transaction(payment_status=payment_status, **attrs)
    order.transactions.append(transaction)
    db.commit()
    db.refresh(transaction)
    logger.info("Order #%s transaction %s: %s", order.id, transaction.id, payment_status)
    return transaction


def dispatch_order(
    db: Session,
    order: Order,
    consignment_number: str,
    shipping_date: datetime | None = None,
    actual_shipping_cost: Decimal | None = None,
) -> Order:
    if actual_shipping_cost is not None:
        order.actual_shipping_cost = actual_shipping_cost
    order.dispatch(consignment_number, shipping_date)
    return save(db, order)
