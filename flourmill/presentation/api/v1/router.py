"""V1 API router — mounted under /api/v1."""

from fastapi import APIRouter

from flourmill.presentation.api.v1.endpoints.health import router as health_router
from flourmill.presentation.api.v1.endpoints.customer_records import router as customer_records_router
from flourmill.presentation.api.v1.endpoints.customers import router as customers_router

router = APIRouter(prefix="/api/v1")
router.include_router(health_router)
router.include_router(customer_records_router)
router.include_router(customers_router)
