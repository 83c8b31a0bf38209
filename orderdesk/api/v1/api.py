from fastapi import APIRouter

from orderdesk.api.v1.routers import payments as payments_router
from orderdesk.api.v1.routers import orders as orders_router

router = APIRouter()

# gateway checkout routes (public); registered first so /orders/orders and
# /orders/verify never fall through to the order bookkeeping routes
router.include_router(payments_router.router)

# order bookkeeping (bearer token required)
router.include_router(orders_router.router)
