from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import Optional, List
from spartec.schemas import InvoiceCreate, InvoiceUpdate, Invoice as InvoiceSchema, InvoiceStatus
from spartec.services.dependency import get_storage, get_current_user
from spartec.storage.base import Storage, StorageError
import logging

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/invoices", response_model=List[InvoiceSchema])
async def get_invoices(
    status_filter: Optional[InvoiceStatus] = Query(None, alias="status"),
    customer_id: Optional[int] = Query(None, alias="customerId"),
    search: Optional[str] = Query(None, description="Search by invoice number"),
    storage: Storage = Depends(get_storage)
):
    try:
        invoices = storage.invoices.get_all(status=status_filter, search=search)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error fetching invoices")

    if customer_id:
        invoices = [inv for inv in invoices if inv["customer_id"] == customer_id]

    return invoices


@router.get("/invoices/{invoice_id}", response_model=InvoiceSchema)
async def get_invoice(invoice_id: int, storage: Storage = Depends(get_storage)):
    try:
        invoice = storage.invoices.get_by_id(invoice_id)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error fetching invoice")

    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")

    return invoice


@router.post("/invoices", response_model=InvoiceSchema, status_code=status.HTTP_201_CREATED)
async def create_invoice(invoice_data: InvoiceCreate, storage: Storage = Depends(get_storage)):
    """Create an invoice; the invoice number is assigned by the server"""
    try:
        return storage.invoices.create(invoice_data.model_dump())
    except StorageError:
        raise HTTPException(status_code=500, detail="Error creating invoice")


@router.put("/invoices/{invoice_id}", response_model=InvoiceSchema)
async def update_invoice(
    invoice_id: int,
    invoice_data: InvoiceUpdate,
    storage: Storage = Depends(get_storage)
):
    try:
        invoice = storage.invoices.update(invoice_id, invoice_data.model_dump(exclude_unset=True))
    except StorageError:
        raise HTTPException(status_code=500, detail="Error updating invoice")

    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")

    logger.info(f"Updated invoice {invoice['invoice_number']}")
    return invoice


@router.delete("/invoices/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(invoice_id: int, storage: Storage = Depends(get_storage)):
    try:
        deleted = storage.invoices.delete(invoice_id)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error deleting invoice")

    if not deleted:
        raise HTTPException(status_code=404, detail="Invoice not found")

    logger.info(f"Deleted invoice {invoice_id}")
    return None
