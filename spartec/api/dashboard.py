"""
Dashboard API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status
import logging

from spartec.config import settings
from spartec.schemas import DashboardStats
from spartec.services.dashboard import build_dashboard_stats
from spartec.services.dependency import get_storage, get_current_user
from spartec.storage.base import Storage, StorageError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard"], dependencies=[Depends(get_current_user)])


@router.get("/dashboard/stats", response_model=DashboardStats)
async def get_dashboard_stats(storage: Storage = Depends(get_storage)):
    """Counts, status breakdowns, low stock, recent invoices and this year's monthly revenue"""
    try:
        return build_dashboard_stats(storage, limit=settings.dashboard_list_limit)
    except StorageError as e:
        logger.error(f"Error generating dashboard stats: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate dashboard statistics"
        )
