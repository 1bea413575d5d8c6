from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import Optional, List
from spartec.schemas import CustomerCreate, CustomerUpdate, Customer as CustomerSchema, CustomerStatus
from spartec.services.dependency import get_storage, get_current_user
from spartec.storage.base import Storage, StorageError
import logging

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/customers", response_model=List[CustomerSchema])
async def get_customers(
    status_filter: Optional[CustomerStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, description="Search by number, name, city or email"),
    storage: Storage = Depends(get_storage)
):
    """Get all customers, newest first"""
    try:
        return storage.customers.get_all(status=status_filter, search=search)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error fetching customers")


@router.get("/customers/{customer_id}", response_model=CustomerSchema)
async def get_customer(customer_id: int, storage: Storage = Depends(get_storage)):
    try:
        customer = storage.customers.get_by_id(customer_id)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error fetching customer")

    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")

    return customer


@router.post("/customers", response_model=CustomerSchema, status_code=status.HTTP_201_CREATED)
async def create_customer(customer_data: CustomerCreate, storage: Storage = Depends(get_storage)):
    """Create a customer; the customer number is assigned by the server"""
    try:
        return storage.customers.create(customer_data.model_dump())
    except StorageError:
        raise HTTPException(status_code=500, detail="Error creating customer")


@router.put("/customers/{customer_id}", response_model=CustomerSchema)
async def update_customer(
    customer_id: int,
    customer_data: CustomerUpdate,
    storage: Storage = Depends(get_storage)
):
    """Partial update; the customer number never changes"""
    try:
        customer = storage.customers.update(customer_id, customer_data.model_dump(exclude_unset=True))
    except StorageError:
        raise HTTPException(status_code=500, detail="Error updating customer")

    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")

    logger.info(f"Updated customer {customer['customer_number']}")
    return customer


@router.delete("/customers/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(customer_id: int, storage: Storage = Depends(get_storage)):
    """Hard delete; work orders, invoices and projects of the customer are kept"""
    try:
        deleted = storage.customers.delete(customer_id)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error deleting customer")

    if not deleted:
        raise HTTPException(status_code=404, detail="Customer not found")

    logger.info(f"Deleted customer {customer_id}")
    return None
