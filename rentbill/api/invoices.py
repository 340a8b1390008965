"""
Invoice API - PDF bills for persisted orders
"""
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session
import logging

from rentbill.core import get_db, NotFound
from rentbill.schemas.order import BatchInvoiceRequest
from rentbill.services import InvoiceService

logger = logging.getLogger(__name__)

invoice_router = APIRouter(tags=["Invoices"])


@invoice_router.get("/invoice/{order_id}")
def get_invoice(order_id: int, db: Session = Depends(get_db)):
    """Render the bill of one order, shown inline by the browser"""
    pdf_bytes = InvoiceService.render_bytes(db, order_id)
    
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": "inline; filename=bill.pdf"}
    )


@invoice_router.post("/invoices/batch")
def get_invoice_batch(request: BatchInvoiceRequest, db: Session = Depends(get_db)):
    """Merge the bills of several orders into one PDF for printing"""
    pdf_bytes = InvoiceService.render_batch(db, request.order_ids)
    
    if not pdf_bytes:
        raise NotFound("no invoices found for the requested orders")
    
    logger.info(f"Rendered invoice batch for {len(request.order_ids)} orders")
    
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": "inline; filename=bills.pdf",
            "X-Orders-Requested": str(len(request.order_ids)),
        }
    )
