from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from inventory_tracker.core.constants import PRODUCTS
from inventory_tracker.dependencies import get_gateway
from inventory_tracker.schemas.extraction import (
    EntryImportConfirm,
    EntryImportPreview,
    ProductImportConfirm,
    ProductImportPreview,
)
from inventory_tracker.schemas.movement import EntryRead
from inventory_tracker.schemas.product import ProductRead
from inventory_tracker.services.extraction_service import (
    build_entry_suggestions,
    build_product_suggestions,
    confirm_entry_import,
    confirm_product_import,
    extract_invoice_entries,
    extract_invoice_products,
)
from inventory_tracker.services.persistence_gateway import PersistenceGateway

router = APIRouter(prefix="/import", tags=["Invoice import"])


@router.post("/entries", response_model=EntryImportPreview)
def preview_entries(
    file: UploadFile = File(...),
    gateway: PersistenceGateway = Depends(get_gateway),
):
    # plain def: extraction blocks and must run in the threadpool
    content = file.file.read()
    invoice = extract_invoice_entries(content, file.content_type)
    return build_entry_suggestions(invoice, gateway.get_all(PRODUCTS))


@router.post("/entries/confirm", response_model=list[EntryRead], status_code=status.HTTP_201_CREATED)
def confirm_entries(payload: EntryImportConfirm, gateway: PersistenceGateway = Depends(get_gateway)):
    try:
        return confirm_entry_import(gateway, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post("/products", response_model=ProductImportPreview)
def preview_products(
    file: UploadFile = File(...),
    gateway: PersistenceGateway = Depends(get_gateway),
):
    content = file.file.read()
    invoice = extract_invoice_products(content, file.content_type)
    preview = build_product_suggestions(invoice, gateway.get_all(PRODUCTS))
    if not preview["items"]:
        raise HTTPException(
            status_code=422,
            detail="No new products found on the invoice, or all of them are already registered.",
        )
    return preview


@router.post("/products/confirm", response_model=list[ProductRead], status_code=status.HTTP_201_CREATED)
def confirm_products(payload: ProductImportConfirm, gateway: PersistenceGateway = Depends(get_gateway)):
    try:
        return confirm_product_import(gateway, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


__all__ = ["router"]
