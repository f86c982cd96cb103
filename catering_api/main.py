import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catering_api.config import settings
from catering_api.database import create_db_and_tables
from catering_api.exceptions import CateringError
from catering_api.routes import (
    admin_content,
    admin_orders,
    ai,
    auth,
    cart,
    chat,
    content,
    coupons,
    health,
    kakao,
    notifications,
    orders,
    partner_notices,
    partner_orders,
    payments,
    products,
    quick_delivery,
    receipts,
    reviews,
    settlements,
    sms,
    stores,
    upload,
    users,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.ENV == "local":
        create_db_and_tables()
    yield


app = FastAPI(title="Catering Marketplace API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CateringError)
async def catering_error_handler(request: Request, exc: CateringError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")

    body = {"success": False, "error": exc.message}
    if exc.details is not None:
        body["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=body)


app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(users.router, prefix="/users", tags=["Users"])
app.include_router(stores.router, prefix="/stores", tags=["Stores"])
app.include_router(products.router, prefix="/products", tags=["Products"])
app.include_router(cart.router, prefix="/cart", tags=["Cart"])
app.include_router(orders.router, prefix="/orders", tags=["Orders"])
app.include_router(partner_orders.router, prefix="/partner/orders", tags=["Partner Orders"])
app.include_router(admin_orders.router, prefix="/admin/orders", tags=["Admin Orders"])
app.include_router(payments.router, prefix="/payments", tags=["Payments"])
app.include_router(receipts.router, tags=["Receipts"])
app.include_router(notifications.router, tags=["Notifications"])
app.include_router(sms.router, prefix="/sms", tags=["SMS Verification"])
app.include_router(quick_delivery.router, prefix="/quick-delivery", tags=["Quick Delivery"])
app.include_router(kakao.router, prefix="/kakao", tags=["Kakao Local"])
app.include_router(chat.router, prefix="/chat", tags=["Chat"])
app.include_router(upload.router, tags=["Files Storage"])
app.include_router(content.router, prefix="/content", tags=["Public Content"])
app.include_router(admin_content.router, prefix="/admin", tags=["Admin Content"])
app.include_router(partner_notices.router, tags=["Partner Notices"])
app.include_router(coupons.router, tags=["Coupons"])
app.include_router(reviews.router, tags=["Reviews"])
app.include_router(ai.router, tags=["AI Curation"])
app.include_router(settlements.router, tags=["Settlements"])
app.include_router(health.router, tags=["Health"])


@app.get("/")
def root():
    return {
        "auth_endpoints": ["/auth/register", "/auth/login"],
        "catalog": ["/stores", "/stores/{store_id}", "/products", "/products/{product_id}"],
        "orders": [
            "/cart", "/orders", "/orders/{order_id}", "/orders/update-status",
            "/orders/confirm", "/partner/orders", "/admin/orders",
        ],
        "payments": [
            "/payments/prepare", "/payments/verify", "/payments/complete",
            "/payments/process-order", "/payments/webhook", "/payments/cancel",
            "/cash-receipt/issue", "/tax-invoice/issue",
        ],
        "notifications": [
            "/alimtalk/send", "/notifications/send-order", "/sms/send-order",
            "/sms/send-cancellation", "/send-fcm", "/send-order-fcm",
        ],
        "content": [
            "/content/notices", "/content/faqs", "/content/magazines",
            "/content/banners", "/content/popups", "/content/ai-categories",
        ],
        "settlements": ["/admin/settlements", "/partner/settlements"],
    }
