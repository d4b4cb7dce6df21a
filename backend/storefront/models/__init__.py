from storefront.models.accessory import Accessory
from storefront.models.address import Address
from storefront.models.attribute_type import AttributeType
from storefront.models.cart import Cart, CartItem, CartItemAccessory
from storefront.models.category import Category
from storefront.models.delivery_service import DeliveryService
from storefront.models.delivery_service_price import DeliveryServicePrice
from storefront.models.notification import Notification
from storefront.models.order import Order, PaymentType, ShippingStatus
from storefront.models.order_item import OrderItem, OrderItemAccessory
from storefront.models.product import Product
from storefront.models.sku import Sku
from storefront.models.transaction import Transaction

__all__ = [
    "Accessory",
    "Address",
    "AttributeType",
    "Cart",
    "CartItem",
    "CartItemAccessory",
    "Category",
    "DeliveryService",
    "DeliveryServicePrice",
    "Notification",
    "Order",
    "OrderItem",
    "OrderItemAccessory",
    "PaymentType",
    "Product",
    "ShippingStatus",
    "Sku",
    "Transaction",
]
