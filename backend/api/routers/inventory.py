"""
Inventory API router.
"""
from fastapi import APIRouter, Depends, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import Response

from backend.api.errors import http_error
from backend.api.models import AddBarcodeRequest, ReceiveStockRequest
from backend.core.inventory import get_inventory_service
from depot.reconcile import InventoryService, ReconcileError
from depot.reconcile.report import create_snapshot_workbook, export_csv, generate_report_filename

router = APIRouter(prefix="/api/inventory", tags=["Inventory"])


@router.get("/snapshot")
def get_snapshot(service: InventoryService = Depends(get_inventory_service)):
    """Every product with its on-hand record and quantity still in transit."""
    items = service.snapshot()
    suppliers_by_id = {s.id: s for s in service.list_suppliers()}

    data = [
        {
            "product": item.product,
            "inventory": item.inventory,
            "quantity_in_transit": item.quantity_in_transit,
            "supplier": suppliers_by_id.get(item.product.supplier_id) if item.product.supplier_id else None,
        }
        for item in items
    ]
    return {"success": True, "data": jsonable_encoder(data)}


@router.get("/summary")
def get_summary(service: InventoryService = Depends(get_inventory_service)):
    """Totals across the snapshot."""
    return {"success": True, "data": jsonable_encoder(service.summary())}


@router.get("/export")
def export_snapshot(
    format: str = Query("csv", pattern="^(csv|xlsx)$"),
    service: InventoryService = Depends(get_inventory_service),
):
    """Download the snapshot as CSV or XLSX."""
    items = service.snapshot()
    filename = generate_report_filename(format)

    if format == "xlsx":
        content = create_snapshot_workbook(items).getvalue()
        media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    else:
        content = export_csv(items)
        media_type = "text/csv"

    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/product/{product_id}")
def get_product(product_id: str, service: InventoryService = Depends(get_inventory_service)):
    """Product detail with its transit history, newest first."""
    try:
        history = service.product_history(product_id)
    except ReconcileError as e:
        raise http_error(e)
    return {"success": True, "data": jsonable_encoder(history)}


@router.post("/receive")
def receive_stock(
    request: ReceiveStockRequest,
    service: InventoryService = Depends(get_inventory_service),
):
    """Move stock from transit to on hand (FIFO) and reprice."""
    try:
        result = service.receive(request.product_id, request.quantity)
    except ReconcileError as e:
        raise http_error(e)
    return {"success": True, "data": jsonable_encoder(result)}


@router.post("/add-barcode")
def add_barcode(
    request: AddBarcodeRequest,
    service: InventoryService = Depends(get_inventory_service),
):
    """Attach a scanner barcode to a product."""
    try:
        product = service.add_barcode(request.product_id, request.barcode)
    except ReconcileError as e:
        raise http_error(e)
    return {"success": True, "data": jsonable_encoder(product)}


@router.post("/backfill")
def backfill(service: InventoryService = Depends(get_inventory_service)):
    """Create transit for historical purchase orders that never got any."""
    result = service.backfill()
    return {"success": True, "data": jsonable_encoder(result)}
