from sqlalchemy.orm import Session

from storefront.core.validation import save
from storefront.models.accessory import Accessory
from storefront.models.cart import Cart, CartItem, CartItemAccessory
from storefront.models.sku import Sku


def create_cart(db: Session, session_id: str | None = None) -> Cart:
    cart = Cart(session_id=session_id)
    db.add(cart)
    db.commit()
    db.refresh(cart)
    return cart


def _same_line(item: CartItem, sku: Sku, accessory: Accessory | None) -> bool:
    if item.sku_id != sku.id:
        return False
    current = item.cart_item_accessory
    if accessory is None:
        return current is None
    return current is not None and current.accessory_id == accessory.id


def add_item(db: Session, cart: Cart, sku: Sku, quantity: int = 1, accessory: Accessory | None = None) -> CartItem:
    """Add a SKU (optionally with an accessory) to a cart, merging repeat lines."""
    for item in cart.cart_items:
        if _same_line(item, sku, accessory):
            item.quantity += quantity
            if item.cart_item_accessory is not None:
                item.cart_item_accessory.quantity = item.quantity
            return save(db, item)

    price = sku.price + (accessory.price if accessory is not None else 0)
    item = CartItem(cart_id=cart.id, sku_id=sku.id, price=price, quantity=quantity, weight=sku.weight)
    if accessory is not None:
        item.cart_item_accessory = CartItemAccessory(
            accessory_id=accessory.id,
            price=accessory.price,
            quantity=quantity,
        )
    return save(db, item)
