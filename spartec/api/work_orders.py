"""
Work order (werkbon) endpoints, including the status and completion transitions
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import Optional, List
import logging

from spartec.schemas import (
    WorkOrderCreate, WorkOrderUpdate, WorkOrderStatusUpdate, WorkOrderComplete,
    WorkOrder as WorkOrderSchema, WorkOrderStatus
)
from spartec.services.dependency import get_storage, get_lifecycle, get_current_user
from spartec.services.lifecycle import WorkOrderLifecycle, InvalidTransition
from spartec.storage.base import Storage, StorageError

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/workorders", response_model=List[WorkOrderSchema])
async def get_work_orders(
    status_filter: Optional[WorkOrderStatus] = Query(None, alias="status"),
    customer_id: Optional[int] = Query(None, alias="customerId"),
    search: Optional[str] = Query(None, description="Search in order number, title and description"),
    storage: Storage = Depends(get_storage)
):
    """Get all work orders, newest first"""
    try:
        work_orders = storage.work_orders.get_all(status=status_filter, search=search)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error fetching work orders")

    if customer_id:
        work_orders = [wo for wo in work_orders if wo["customer_id"] == customer_id]

    return work_orders


@router.get("/workorders/{wo_id}", response_model=WorkOrderSchema)
async def get_work_order(wo_id: int, storage: Storage = Depends(get_storage)):
    try:
        wo = storage.work_orders.get_by_id(wo_id)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error fetching work order")

    if not wo:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Work order not found")

    return wo


@router.post("/workorders", response_model=WorkOrderSchema, status_code=status.HTTP_201_CREATED)
async def create_work_order(
    data: WorkOrderCreate,
    lifecycle: WorkOrderLifecycle = Depends(get_lifecycle)
):
    """Create a work order; the order number is assigned by the server"""
    try:
        return lifecycle.create(data.model_dump())
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error creating work order"
        )


@router.put("/workorders/{wo_id}", response_model=WorkOrderSchema)
async def update_work_order(
    wo_id: int,
    data: WorkOrderUpdate,
    lifecycle: WorkOrderLifecycle = Depends(get_lifecycle)
):
    """Partial update; the order number never changes"""
    try:
        wo = lifecycle.update(wo_id, data.model_dump(exclude_unset=True))
    except InvalidTransition as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error updating work order"
        )

    if not wo:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Work order not found")

    return wo


@router.delete("/workorders/{wo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_work_order(wo_id: int, storage: Storage = Depends(get_storage)):
    try:
        deleted = storage.work_orders.delete(wo_id)
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error deleting work order"
        )

    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Work order not found")

    logger.info(f"Work order {wo_id} deleted")
    return None


@router.patch("/workorders/{wo_id}/status", response_model=WorkOrderSchema)
async def update_work_order_status(
    wo_id: int,
    data: WorkOrderStatusUpdate,
    lifecycle: WorkOrderLifecycle = Depends(get_lifecycle)
):
    """Change only the status of a work order"""
    if not data.status:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Status is required")

    try:
        wo = lifecycle.change_status(wo_id, data.status)
    except InvalidTransition as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error updating work order status"
        )

    if not wo:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Work order not found")

    return wo


@router.put("/workorders/{wo_id}/complete", response_model=WorkOrderSchema)
async def complete_work_order(
    wo_id: int,
    data: WorkOrderComplete,
    lifecycle: WorkOrderLifecycle = Depends(get_lifecycle)
):
    """Mark a work order Voltooid with labour hours, notes and photos"""
    if data.labor_hours is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Labor hours are required")

    try:
        wo = lifecycle.complete(wo_id, labor_hours=data.labor_hours, notes=data.notes, photos=data.photos)
    except InvalidTransition as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error completing work order"
        )

    if not wo:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Work order not found")

    return wo
