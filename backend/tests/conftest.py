"""Shared pytest fixtures: an in-memory SQLite session and record factories."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import storefront.models  # noqa
from storefront.core.db import Base
from storefront.models import (
    Accessory,
    AttributeType,
    Cart,
    CartItem,
    CartItemAccessory,
    Category,
    DeliveryService,
    DeliveryServicePrice,
    Order,
    PaymentType,
    Product,
    Sku,
    Transaction,
)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def category(db):
    category = Category(name="T-Shirts", description="Cotton tees")
    db.add(category)
    db.commit()
    return category


@pytest.fixture
def attribute_type(db):
    attribute_type = AttributeType(name="Size")
    db.add(attribute_type)
    db.commit()
    return attribute_type


@pytest.fixture
def product(db, category):
    product = Product(name="Logo Tee", sku="TEE", category_id=category.id)
    db.add(product)
    db.commit()
    return product


@pytest.fixture
def accessory(db):
    accessory = Accessory(name="Gift box", sku="GIFT", price=Decimal("2.50"))
    db.add(accessory)
    db.commit()
    return accessory


@pytest.fixture
def sku_attrs(product, attribute_type):
    """Valid attributes for a new product SKU; pass overrides as keywords."""

    def build(**overrides):
        attrs = dict(
            product_id=product.id,
            attribute_value="Small",
            attribute_type_id=attribute_type.id,
            price=Decimal("18.00"),
            cost_value=Decimal("6.50"),
            stock=20,
            stock_warning_level=5,
            length=Decimal("30.00"),
            weight=Decimal("180.00"),
            thickness=Decimal("2.00"),
        )
        attrs.update(overrides)
        return attrs

    return build


@pytest.fixture
def make_sku(db, sku_attrs):
    def make(**overrides):
        sku = Sku(**sku_attrs(**overrides))
        db.add(sku)
        db.commit()
        return sku

    return make


@pytest.fixture
def delivery_service(db):
    service = DeliveryService(name="Royal Mail")
    db.add(service)
    db.commit()
    return service


@pytest.fixture
def price_attrs(delivery_service):
    def build(**overrides):
        attrs = dict(
            code="RM1",
            price=Decimal("5.00"),
            description="1st Class",
            min_weight=Decimal("0"),
            max_weight=Decimal("1000"),
            min_length=Decimal("0"),
            max_length=Decimal("45"),
            min_thickness=Decimal("0"),
            max_thickness=Decimal("16"),
            delivery_service_id=delivery_service.id,
        )
        attrs.update(overrides)
        return attrs

    return build


@pytest.fixture
def delivery_price(db, price_attrs):
    price = DeliveryServicePrice(**price_attrs())
    db.add(price)
    db.commit()
    return price


@pytest.fixture
def full_cart(db, make_sku, accessory):
    """Cart with four items, three of which carry an accessory."""
    skus = [make_sku(attribute_value=v) for v in ("XS", "Small", "Medium", "Large")]
    cart = Cart()
    for i, sku in enumerate(skus):
        item = CartItem(sku_id=sku.id, price=Decimal("10.00"), quantity=i + 1, weight=sku.weight)
        if i > 0:
            item.cart_item_accessory = CartItemAccessory(
                accessory_id=accessory.id, price=accessory.price, quantity=i + 1
            )
        cart.cart_items.append(item)
    db.add(cart)
    db.commit()
    return cart


@pytest.fixture
def make_order(db, delivery_price):
    def make(payment_status=None, **overrides):
        attrs = dict(email="test@test.com", delivery_id=delivery_price.id, terms=True)
        attrs.update(overrides)
        order = Order(**attrs)
        if payment_status is not None:
            if payment_status == "Completed":
                order.actual_shipping_cost = Decimal("4.20")
            order.transactions.append(Transaction(payment_status=payment_status))
        db.add(order)
        db.commit()
        return order

    return make


@pytest.fixture
def order(make_order):
    return make_order()


@pytest.fixture
def pending_order(make_order):
    return make_order(payment_status="Pending")


@pytest.fixture
def complete_order(make_order):
    return make_order(payment_status="Completed")


@pytest.fixture
def failed_order(make_order):
    return make_order(payment_status="Failed")


@pytest.fixture
def paypal_order(make_order):
    return make_order(payment_status="Completed", payment_type=PaymentType.paypal)
