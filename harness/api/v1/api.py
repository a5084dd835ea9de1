from fastapi import APIRouter

from harness.api.v1.routers import webhooks as webhooks_router
from harness.api.v1.routers import events as events_router
from harness.api.v1.routers import payments as payments_router
from harness.api.v1.routers import apple_pay as apple_pay_router

router = APIRouter()

# provider-facing
router.include_router(webhooks_router.router)

# browser-facing
router.include_router(events_router.router)
router.include_router(payments_router.router)
router.include_router(apple_pay_router.router)
