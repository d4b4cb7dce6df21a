import logging

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.core.db import Base, engine, get_db
from storefront.core.validation import BASE, DeleteRestrictionError, RecordInvalid

# Importing models registers them on Base.metadata
from storefront.models import Accessory, Cart, DeliveryServicePrice, Order, Sku
from storefront.schemas.catalog import CategoryCreate, CategoryOut, NotificationCreate, SkuCreate, SkuOut
from storefront.schemas.delivery import DeliveryServicePriceCreate, DeliveryServicePriceOut
from storefront.schemas.order import (
    CalculateRequest,
    CartItemCreate,
    CartOut,
    DispatchRequest,
    OrderCreate,
    OrderOut,
    TransactionCreate,
    TransferRequest,
)
from storefront.services import carts, catalog, delivery, orders

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title=f"{settings.STORE_NAME} Storefront API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


# Create tables (Alembic optional)
Base.metadata.create_all(bind=engine)


@app.exception_handler(RecordInvalid)
def record_invalid_handler(request: Request, exc: RecordInvalid):
    return JSONResponse(status_code=422, content={"errors": exc.errors})


@app.exception_handler(DeleteRestrictionError)
def delete_restriction_handler(request: Request, exc: DeleteRestrictionError):
    logger.warning("Delete refused: %s", exc)
    return JSONResponse(status_code=409, content={"errors": {BASE: [str(exc)]}})


def _get_or_404(db: Session, model, record_id: int):
    record = db.get(model, record_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"{model.__name__} {record_id} not found")
    return record


@app.get("/")
def health():
    return {"status": "ok"}


# -------------------------
# Catalog
# -------------------------

@app.get("/categories", response_model=list[CategoryOut])
def list_categories(visible_only: bool = False, db: Session = Depends(get_db)):
    return catalog.list_categories(db, visible_only=visible_only)


@app.post("/categories", response_model=CategoryOut, status_code=201)
def create_category(req: CategoryCreate, db: Session = Depends(get_db)):
    return catalog.create_category(db, req.name, req.description, req.visible)


@app.get("/categories/{key}", response_model=CategoryOut)
def get_category(key: str, db: Session = Depends(get_db)):
    category = catalog.get_category(db, key)
    if category is None:
        raise HTTPException(status_code=404, detail=f"Category {key} not found")
    return category


@app.get("/products/{product_id}/skus", response_model=list[SkuOut])
def list_skus(product_id: int, db: Session = Depends(get_db)):
    return catalog.list_skus(db, product_id)


@app.post("/skus", response_model=SkuOut, status_code=201)
def create_sku(req: SkuCreate, db: Session = Depends(get_db)):
    return catalog.create_sku(db, **req.model_dump())


@app.delete("/skus/{sku_id}")
def delete_sku(sku_id: int, db: Session = Depends(get_db)):
    sku = _get_or_404(db, Sku, sku_id)
    product = sku.product
    if not catalog.destroy_sku(db, sku):
        return JSONResponse(status_code=422, content={"errors": product.errors})
    return {"ok": True}


@app.post("/skus/{sku_id}/notifications", status_code=201)
def request_notification(sku_id: int, req: NotificationCreate, db: Session = Depends(get_db)):
    sku = _get_or_404(db, Sku, sku_id)
    notification = catalog.request_stock_notification(db, sku, req.email)
    return {"notification_id": notification.id}


# -------------------------
# Delivery
# -------------------------

@app.get("/delivery-prices", response_model=list[DeliveryServicePriceOut])
def list_delivery_prices(active_only: bool = False, db: Session = Depends(get_db)):
    return delivery.list_delivery_prices(db, active_only=active_only)


@app.get("/delivery-prices/for-parcel", response_model=list[DeliveryServicePriceOut])
def delivery_prices_for_parcel(weight: float, length: float, thickness: float, db: Session = Depends(get_db)):
    return delivery.find_for_parcel(db, weight, length, thickness)


@app.post("/delivery-prices", response_model=DeliveryServicePriceOut, status_code=201)
def create_delivery_price(req: DeliveryServicePriceCreate, db: Session = Depends(get_db)):
    return delivery.create_delivery_price(db, **req.model_dump())


@app.delete("/delivery-prices/{price_id}")
def delete_delivery_price(price_id: int, db: Session = Depends(get_db)):
    price = _get_or_404(db, DeliveryServicePrice, price_id)
    delivery.destroy_delivery_price(db, price)
    return {"ok": True}


# -------------------------
# Carts
# -------------------------

@app.post("/carts", response_model=CartOut, status_code=201)
def create_cart(db: Session = Depends(get_db)):
    return carts.create_cart(db)


@app.get("/carts/{cart_id}", response_model=CartOut)
def get_cart(cart_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, Cart, cart_id)


@app.post("/carts/{cart_id}/items", response_model=CartOut, status_code=201)
def add_cart_item(cart_id: int, req: CartItemCreate, db: Session = Depends(get_db)):
    cart = _get_or_404(db, Cart, cart_id)
    sku = _get_or_404(db, Sku, req.sku_id)
    accessory = _get_or_404(db, Accessory, req.accessory_id) if req.accessory_id else None
    carts.add_item(db, cart, sku, req.quantity, accessory)
    db.refresh(cart)
    return cart


# -------------------------
# Orders
# -------------------------

@app.get("/orders", response_model=list[OrderOut])
def list_orders(db: Session = Depends(get_db)):
    return orders.list_orders(db)


@app.get("/orders/active", response_model=list[OrderOut])
def list_active_orders(db: Session = Depends(get_db)):
    return orders.active_orders(db)


@app.post("/orders", response_model=OrderOut, status_code=201)
def create_order(req: OrderCreate, db: Session = Depends(get_db)):
    return orders.create_order(
        db,
        email=req.email,
        delivery_id=req.delivery_id,
        terms=req.terms,
        ip_address=req.ip_address,
        delivery_address=req.delivery_address.model_dump() if req.delivery_address else None,
        billing_address=req.billing_address.model_dump() if req.billing_address else None,
    )


@app.get("/orders/{order_id}", response_model=OrderOut)
def get_order(order_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, Order, order_id)


@app.post("/orders/{order_id}/calculate", response_model=OrderOut)
def calculate_order(order_id: int, req: CalculateRequest, db: Session = Depends(get_db)):
    order = _get_or_404(db, Order, order_id)
    cart = _get_or_404(db, Cart, req.cart_id)
    return orders.calculate_order(db, order, cart, req.tax_rate)


@app.post("/orders/{order_id}/transfer", response_model=OrderOut)
def transfer_cart(order_id: int, req: TransferRequest, db: Session = Depends(get_db)):
    order = _get_or_404(db, Order, order_id)
    cart = _get_or_404(db, Cart, req.cart_id)
    return orders.transfer_cart(db, order, cart)


@app.post("/orders/{order_id}/transactions", status_code=201)
def add_transaction(order_id: int, req: TransactionCreate, db: Session = Depends(get_db)):
    order = _get_or_404(db, Order, order_id)
    transaction = orders.add_transaction(db, order, **req.model_dump())
    return {"transaction_id": transaction.id, "completed": order.is_completed}


@app.post("/orders/{order_id}/dispatch", response_model=OrderOut)
def dispatch_order(order_id: int, req: DispatchRequest, db: Session = Depends(get_db)):
    order = _get_or_404(db, Order, order_id)
    return orders.dispatch_order(db, order, **req.model_dump())
