"""
Purchasing API router.
"""
from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder

from backend.api.errors import http_error
from backend.api.models import SavePurchaseOrderRequest
from backend.core.inventory import get_inventory_service
from depot.reconcile import InventoryService, ReconcileError
from depot.reconcile.purchasing import LineDraft, PurchaseOrderDraft

router = APIRouter(prefix="/api/purchasing", tags=["Purchasing"])


@router.post("/po/save")
def save_purchase_order(
    request: SavePurchaseOrderRequest,
    service: InventoryService = Depends(get_inventory_service),
):
    """
    Save an approved purchase order.

    Creates (or finds) the supplier, the purchase order, its invoice and
    lines, then marks every line with a positive quantity as in transit.
    """
    draft = PurchaseOrderDraft(
        supplier_name=request.supplier.name,
        supplier_address=request.supplier.address,
        supplier_email=request.supplier.email,
        supplier_phone=request.supplier.phone,
        supplier_vat_number=request.supplier.vat_number,
        invoice_number=request.purchase_order.invoice_number,
        invoice_date=request.purchase_order.invoice_date,
        payment_terms=request.purchase_order.payment_terms,
        lines=[
            LineDraft(
                description=line.description or "",
                supplier_sku=line.supplier_sku,
                quantity=line.quantity,
                unit_cost_ex_vat=line.unit_cost_ex_vat,
                line_total_ex_vat=line.line_total_ex_vat,
            )
            for line in request.po_lines
        ],
    )

    try:
        saved = service.save_purchase_order(draft)
    except ReconcileError as e:
        raise http_error(e)

    return {"success": True, "data": jsonable_encoder(saved)}
