import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storecredit.core.config import settings
from storecredit.routers import (
    gift_cards,
    orders,
    payments,
    store_credit_categories,
    store_credits,
)

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

OPENAPI_TAGS = [
    {"name": "Store Credits", "description": "Issue, edit and invalidate user store credit."},
    {"name": "Store Credit Categories", "description": "Categories store credit is issued under."},
    {"name": "Orders", "description": "Create orders and move them through checkout."},
    {"name": "Payments", "description": "Inspect and refund order payments."},
    {"name": "Gift Cards", "description": "Redeem gift cards for store credit."},
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Store credit as a payment tender. "
        "Manage user store credit, apply it to orders at checkout, "
        "capture and refund it, and redeem gift cards."
    ),
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(store_credits.router, prefix="/v1/users", tags=["Store Credits"])
app.include_router(
    store_credit_categories.router,
    prefix="/v1/store_credit_categories",
    tags=["Store Credit Categories"],
)
app.include_router(orders.router, prefix="/v1/orders", tags=["Orders"])
app.include_router(payments.router, prefix="/v1/payments", tags=["Payments"])
app.include_router(gift_cards.router, prefix="/v1/gift_cards", tags=["Gift Cards"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "domain": settings.APP_DOMAIN,
        "status": "running",
    }
