from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.core.db import Base, SessionLocal
from storefront.models.accessory import Accessory
from storefront.models.address import Address
from storefront.models.attribute_type import AttributeType
from storefront.models.cart import Cart, CartItem, CartItemAccessory
from storefront.models.category import Category
from storefront.models.delivery_service import DeliveryService
from storefront.models.delivery_service_price import DeliveryServicePrice
from storefront.models.order import Order
from storefront.models.product import Product
from storefront.models.sku import Sku
from storefront.models.transaction import COMPLETED, Transaction


def reset_db(db: Session):
    # Drops & recreates all tables
    Base.metadata.drop_all(bind=db.get_bind())
    Base.metadata.create_all(bind=db.get_bind())


def seed_catalog(db: Session):
    tees = Category(name="T-Shirts", description="Organic cotton tees, printed in house.")
    mugs = Category(name="Mugs", description="Stoneware mugs, dishwasher safe.")
    hidden = Category(name="Archive", description="Retired designs.", visible=False)
    db.add_all([tees, mugs, hidden])

    size = AttributeType(name="Size", measurement="")
    volume = AttributeType(name="Volume", measurement="ml")
    colour = AttributeType(name="Colour", measurement="")
    db.add_all([size, volume, colour])
    db.flush()  # so IDs exist for products and skus

    products = [
        Product(sku="TEE-LOGO", name="Logo Tee", category_id=tees.id,
                description="Classic crew neck with the chest logo."),
        Product(sku="TEE-STRIPE", name="Breton Stripe Tee", category_id=tees.id,
                description="Navy and white stripes, relaxed fit."),
        Product(sku="MUG-ENAMEL", name="Enamel Camp Mug", category_id=mugs.id,
                description="Speckled enamel, rolled rim."),
    ]
    db.add_all(products)

    gift_box = Accessory(sku="GIFTBOX", name="Gift box", price=Decimal("2.50"))
    db.add(gift_box)
    db.flush()

    skus = []
    for product in products[:2]:
        for value, stock in (("Small", 25), ("Medium", 40), ("Large", 30)):
            skus.append(Sku(
                product_id=product.id,
                attribute_value=value,
                attribute_type_id=size.id,
                price=Decimal("18.00"),
                cost_value=Decimal("6.50"),
                stock=stock,
                stock_warning_level=5,
                length=Decimal("30.00"),
                weight=Decimal("180.00"),
                thickness=Decimal("2.00"),
            ))
    for value in ("350", "500"):
        skus.append(Sku(
            product_id=products[2].id,
            attribute_value=value,
            attribute_type_id=volume.id,
            price=Decimal("12.00"),
            cost_value=Decimal("4.00"),
            stock=60,
            stock_warning_level=10,
            length=Decimal("10.00"),
            weight=Decimal("240.00"),
            thickness=Decimal("9.00"),
        ))
    skus.append(Sku(
        accessory_id=gift_box.id,
        attribute_value="Red",
        attribute_type_id=colour.id,
        price=Decimal("2.50"),
        cost_value=Decimal("0.80"),
        stock=100,
        stock_warning_level=20,
        length=Decimal("32.00"),
        weight=Decimal("90.00"),
        thickness=Decimal("6.00"),
    ))
    db.add_all(skus)
    db.flush()


def seed_delivery(db: Session):
    royal_mail = DeliveryService(name="Royal Mail", description="Tracked UK delivery.")
    courier = DeliveryService(name="Courier", description="Next working day.")
    db.add_all([royal_mail, courier])
    db.flush()

    db.add_all([
        DeliveryServicePrice(
            code="RM1-LL", price=Decimal("3.20"), description="1st Class, large letter",
            min_weight=0, max_weight=750, min_length=0, max_length=Decimal("35.30"),
            min_thickness=0, max_thickness=Decimal("2.50"), delivery_service_id=royal_mail.id,
        ),
        DeliveryServicePrice(
            code="RM1-SP", price=Decimal("4.95"), description="1st Class, small parcel",
            min_weight=0, max_weight=2000, min_length=0, max_length=45,
            min_thickness=0, max_thickness=16, delivery_service_id=royal_mail.id,
        ),
        DeliveryServicePrice(
            code="NWD", price=Decimal("9.99"), description="Next working day courier",
            min_weight=0, max_weight=20000, min_length=0, max_length=120,
            min_thickness=0, max_thickness=60, delivery_service_id=courier.id,
        ),
    ])
    db.flush()


def seed_orders(db: Session):
    small_tee = db.query(Sku).filter_by(sku="TEE-LOGO-SMALL").one()
    mug = db.query(Sku).filter_by(sku="MUG-ENAMEL-350").one()
    gift_box = db.query(Accessory).filter_by(sku="GIFTBOX").one()
    parcel = db.query(DeliveryServicePrice).filter_by(code="RM1-SP").one()

    cart = Cart(session_id="seed")
    tee_line = CartItem(sku_id=small_tee.id, price=small_tee.price + gift_box.price,
                        quantity=2, weight=small_tee.weight)
    tee_line.cart_item_accessory = CartItemAccessory(accessory_id=gift_box.id,
                                                     price=gift_box.price, quantity=2)
    cart.cart_items = [
        tee_line,
        CartItem(sku_id=mug.id, price=mug.price, quantity=1, weight=mug.weight),
    ]
    db.add(cart)
    db.flush()

    order = Order(email="jane@example.com", delivery_id=parcel.id, terms=True, ip_address="127.0.0.1")
    order.delivery_address = Address(first_name="Jane", last_name="Doe", address="1 High Street",
                                     city="Bristol", postcode="BS1 1AA", country="United Kingdom")
    order.billing_address = Address(first_name="Jane", last_name="Doe", address="1 High Street",
                                    city="Bristol", postcode="BS1 1AA", country="United Kingdom")
    db.add(order)
    db.flush()

    order.calculate(cart, settings.TAX_RATE)
    order.transfer(cart)
    order.actual_shipping_cost = parcel.price
    order.transactions.append(
        Transaction(payment_status=COMPLETED, payment_type="paypal", gross_amount=order.gross_amount)
    )
    db.flush()


def main():
    db = SessionLocal()
    try:
        reset_db(db)
        seed_catalog(db)
        seed_delivery(db)
        seed_orders(db)
        db.commit()

        print("Seed complete.")
        print("Try:")
        print("- GET /categories")
        print("- GET /delivery-prices/for-parcel?weight=500&length=30&thickness=2")
        print("- GET /orders")
    finally:
        db.close()


if __name__ == "__main__":
    main()
