from decimal import Decimal

import pytest

from storefront.core.validation import BASE, DeleteRestrictionError, RecordInvalid
from storefront.models import Cart, CartItem, Notification, Sku
from storefront.models.sku import STOCK_WARNING_MESSAGE
from storefront.services import catalog


def test_valid_sku(db, sku_attrs):
    assert Sku(**sku_attrs()).is_valid(db)


@pytest.mark.parametrize("attr", [
    "price", "cost_value", "stock", "length", "weight", "thickness",
    "stock_warning_level", "attribute_value", "attribute_type_id",
])
def test_required_attributes(db, sku_attrs, attr):
    sku = Sku(**sku_attrs(**{attr: None}))
    assert not sku.is_valid(db)
    assert "can't be blank" in sku.errors[attr]


def test_price_and_cost_must_be_currency(db, sku_attrs):
    sku = Sku(**sku_attrs(price=Decimal("1.999"), cost_value=Decimal("-2")))
    assert not sku.is_valid(db)
    assert sku.errors["price"] == ["is invalid"]
    assert sku.errors["cost_value"] == ["is invalid"]


def test_dimensions_cannot_be_negative(db, sku_attrs):
    sku = Sku(**sku_attrs(length=Decimal("-1"), weight=Decimal("0"), thickness=Decimal("0")))
    assert not sku.is_valid(db)
    assert sku.errors["length"] == ["must be greater than or equal to 0"]
    assert "weight" not in sku.errors


def test_stock_levels_are_positive_integers(db, sku_attrs):
    sku = Sku(**sku_attrs(stock=0, stock_warning_level=0))
    assert not sku.is_valid(db)
    assert sku.errors["stock"] == ["must be greater than or equal to 1"]
    assert sku.errors["stock_warning_level"] == ["must be greater than or equal to 1"]


@pytest.mark.parametrize("stock, warning", [(5, 5), (4, 5)])
def test_stock_must_exceed_warning_level_on_create(db, sku_attrs, stock, warning):
    sku = Sku(**sku_attrs(stock=stock, stock_warning_level=warning))
    assert not sku.is_valid(db)
    assert sku.errors["sku"] == [STOCK_WARNING_MESSAGE]

    with pytest.raises(RecordInvalid):
        catalog.create_sku(db, **sku_attrs(stock=stock, stock_warning_level=warning))
    assert db.query(Sku).count() == 0


def test_stock_may_fall_to_warning_level_after_create(db, make_sku):
    sku = make_sku(stock=10, stock_warning_level=5)
    sku.stock = 3
    db.commit()

    assert sku.stock == 3
    assert sku.low_stock
    assert catalog.low_stock_skus(db) == [sku]


def test_code_generated_from_product_and_attribute(db, make_sku):
    sku = make_sku(attribute_value="Extra Large")
    assert sku.sku == "TEE-EXTRA-LARGE"


def test_code_generated_for_accessory_sku(db, sku_attrs, accessory):
    sku = catalog.create_sku(db, **sku_attrs(product_id=None, accessory_id=accessory.id, attribute_value="Red"))
    assert sku.sku == "GIFT-RED"


def test_explicit_code_is_kept(db, make_sku):
    assert make_sku(sku="CUSTOM-1").sku == "CUSTOM-1"


def test_code_is_globally_unique(db, make_sku, sku_attrs):
    make_sku(sku="DUP")
    sku = Sku(**sku_attrs(sku="DUP", attribute_value="Large"))
    assert not sku.is_valid(db)
    assert sku.errors["sku"] == ["has already been taken"]


def test_attribute_value_unique_per_product(db, make_sku, sku_attrs, category):
    make_sku(attribute_value="Small")
    sku = Sku(**sku_attrs(attribute_value="Small", sku="OTHER"))
    assert not sku.is_valid(db)
    assert sku.errors["attribute_value"] == ["has already been taken"]

    other = catalog.create_product(db, "Stripe Tee", "STRIPE", category.id)
    assert Sku(**sku_attrs(product_id=other.id, attribute_value="Small")).is_valid(db)


def test_delete_refused_below_two_skus(db, make_sku, product):
    first = make_sku(attribute_value="Small")
    make_sku(attribute_value="Medium")

    assert catalog.destroy_sku(db, first) is False
    assert product.errors[BASE] == ["You must have at least 2 SKUs per product."]
    assert db.query(Sku).count() == 2


def test_repeated_refusals_report_once(db, make_sku, product):
    first = make_sku(attribute_value="Small")
    make_sku(attribute_value="Medium")

    assert catalog.destroy_sku(db, first) is False
    assert catalog.destroy_sku(db, first) is False
    assert product.errors[BASE] == ["You must have at least 2 SKUs per product."]


def test_delete_allowed_when_two_skus_remain(db, make_sku, product):
    first = make_sku(attribute_value="Small")
    make_sku(attribute_value="Medium")
    make_sku(attribute_value="Large")

    assert catalog.destroy_sku(db, first) is True
    assert [s.attribute_value for s in catalog.list_skus(db, product.id)] == ["Medium", "Large"]


def test_delete_refused_while_in_a_cart(db, make_sku):
    skus = [make_sku(attribute_value=v) for v in ("S", "M", "L")]
    cart = Cart(cart_items=[CartItem(sku_id=skus[0].id, price=Decimal("18.00"), quantity=1)])
    db.add(cart)
    db.commit()

    with pytest.raises(DeleteRestrictionError):
        catalog.destroy_sku(db, skus[0])
    assert db.query(Sku).count() == 3


def test_delete_removes_notifications(db, make_sku):
    skus = [make_sku(attribute_value=v) for v in ("S", "M", "L")]
    catalog.request_stock_notification(db, skus[0], " fan@example.com ")
    catalog.request_stock_notification(db, skus[1], "other@example.com")

    notification = db.query(Notification).filter_by(email="fan@example.com").one()
    assert notification.notifiable_type == "Sku"
    assert notification.notifiable_id == skus[0].id

    assert catalog.destroy_sku(db, skus[0])
    assert [n.email for n in db.query(Notification).all()] == ["other@example.com"]


def test_attribute_types_are_reused(db):
    colour = catalog.get_or_create_attribute_type(db, "Colour")
    assert catalog.get_or_create_attribute_type(db, "Colour").id == colour.id
