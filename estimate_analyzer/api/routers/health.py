from datetime import datetime, UTC
from fastapi import APIRouter
from ...core.config import settings
from ...services.estimate_types import EstimateStatus
from ...services.storage import estimate_store

router = APIRouter(tags=["health"])

RECENT_LIMIT = 10


@router.get("/health")
async def health():
    estimates = estimate_store.list_all()
    return {
        "status": "healthy",
        "app": settings.app_name,
        "timestamp": datetime.now(UTC).isoformat(),
        "recent_estimates": len(estimates[:RECENT_LIMIT]),
        "needs_review": len(estimate_store.query_by_status(EstimateStatus.NEEDS_REVIEW.value)),
    }
