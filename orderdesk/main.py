import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orderdesk.core.config import settings
from orderdesk.core.errors import setup_error_handlers
from orderdesk.api.v1.api import router as api_v1_router
from orderdesk.services.payments.factory import get_payments_provider

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

app = FastAPI(title="ORDERDESK API", version="0.1.0")

# set up CORS so the storefront can talk to us
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_error_handlers(app)

# mount our API routes
app.include_router(api_v1_router, prefix="/api/v1")


# one gateway client (and its connection pool) for the whole process
@app.on_event("startup")
async def on_startup():
    app.state.payments_provider = get_payments_provider()


@app.on_event("shutdown")
async def on_shutdown():
    await app.state.payments_provider.aclose()


@app.get("/health")
def health():
    return {"status": "ok", "env": settings.APP_ENV, "payments_provider": settings.PAYMENTS_PROVIDER}
