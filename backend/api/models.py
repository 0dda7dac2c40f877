"""
Pydantic request models for the API.
"""
from pydantic import BaseModel
from typing import Any, List, Optional


# ============== Inventory ==============

class ReceiveStockRequest(BaseModel):
    product_id: str
    quantity: float


class AddBarcodeRequest(BaseModel):
    product_id: str
    barcode: str


# ============== Purchasing ==============

class SupplierIn(BaseModel):
    name: str
    address: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    vat_number: Optional[str] = None


class PurchaseOrderIn(BaseModel):
    invoice_number: Optional[str] = None
    invoice_date: Optional[str] = None
    original_currency: Optional[str] = None  # informational; amounts are already GBP
    payment_terms: Optional[str] = None


class POLineIn(BaseModel):
    """Line as extracted upstream; numbers may be missing or nonsense."""
    description: Optional[str] = ""
    supplier_sku: Optional[str] = None
    quantity: Any = None
    unit_cost_ex_vat: Any = None
    line_total_ex_vat: Any = None


class SavePurchaseOrderRequest(BaseModel):
    supplier: SupplierIn
    purchase_order: PurchaseOrderIn = PurchaseOrderIn()
    po_lines: List[POLineIn] = []
