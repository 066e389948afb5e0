from datetime import date
from fastapi import APIRouter, HTTPException
from fastapi.responses import Response
from loguru import logger
from ...models.invoice import DeliveryEstimateRequest, RepairInvoice, TotalsRequest
from ...services.csv_export import export_invoices_csv
from ...services.geocode import DeliveryEstimate, estimate_delivery
from ...services.pricing import InvoiceTotals, create_pricing_rules
from ...services.storage import invoice_store

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.post("")
async def save_invoice(invoice: RepairInvoice):
    """Save an invoice; a blank invoice number gets the next number in sequence."""
    invoice_id = invoice_store.save(invoice)
    saved = invoice_store.get(invoice_id)
    logger.info("Invoice saved", invoice_id=invoice_id, invoice_number=saved.invoice_number)
    return {"id": invoice_id, "invoice": saved}


@router.get("")
async def list_invoices():
    """List all saved invoices"""
    invoices = invoice_store.list_all()
    return {"total": len(invoices), "invoices": invoices}


@router.get("/next-number")
async def next_invoice_number():
    return {"invoice_number": invoice_store.next_invoice_number()}


@router.get("/export.csv")
async def export_csv():
    """Download all invoices as CSV"""
    invoices = invoice_store.list_all()
    if not invoices:
        raise HTTPException(status_code=404, detail="No invoices to export. Create some invoices first!")

    filename = f"delco-music-invoices-{date.today().isoformat()}.csv"
    return Response(
        content=export_invoices_csv(invoices),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/totals", response_model=InvoiceTotals)
async def calculate_totals(req: TotalsRequest):
    """
    Price an invoice.

    Example request:
    {
        "materials": [{"description": "Setup", "quantity": 1, "unit_cost": 65.0}],
        "delivery_fee": 17.0,
        "is_georges_music": false
    }
    """
    return create_pricing_rules().calculate(
        req.materials,
        delivery_fee=req.delivery_fee,
        is_georges_music=req.is_georges_music,
        no_delivery_fee=req.is_no_delivery_fee,
    )


@router.post("/delivery-estimate")
async def delivery_estimate(req: DeliveryEstimateRequest):
    """Estimate the delivery fee for a customer address (none for George's or waived delivery)."""
    if req.is_georges_music or req.is_no_delivery_fee:
        return {"estimate": DeliveryEstimate(miles=0, fee=0.0), "reason": "delivery not charged"}

    estimate = await estimate_delivery(req.address)
    if estimate is None:
        return {"estimate": None, "reason": "address could not be geocoded"}
    return {"estimate": estimate, "reason": None}


@router.get("/{invoice_id}")
async def get_invoice(invoice_id: str):
    invoice = invoice_store.get(invoice_id)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


@router.delete("/{invoice_id}")
async def delete_invoice(invoice_id: str):
    if not invoice_store.delete(invoice_id):
        raise HTTPException(status_code=404, detail="Invoice not found")
    logger.info("Invoice deleted", invoice_id=invoice_id)
    return {"deleted": invoice_id}
