"""API routes."""

from fastapi import APIRouter

from finance_tracker.api.routes import auth, health, transactions

router = APIRouter(prefix="/api")

router.include_router(health.router)
router.include_router(auth.router)
router.include_router(transactions.router)
