from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from inventory_tracker.core.constants import PRODUCTS
from inventory_tracker.dependencies import get_gateway
from inventory_tracker.schemas.product import ProductCreate, ProductRead, ProductUpdate
from inventory_tracker.services.persistence_gateway import PersistenceGateway

router = APIRouter(prefix="/products", tags=["Products"])

_REQUIRED_FIELDS = ("name", "unit", "min_stock", "price")


@router.get("", response_model=List[ProductRead])
def list_products(gateway: PersistenceGateway = Depends(get_gateway)):
    return gateway.get_all(PRODUCTS)


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductCreate, gateway: PersistenceGateway = Depends(get_gateway)):
    return gateway.add(PRODUCTS, payload.model_dump())


@router.post("/bulk", response_model=List[ProductRead], status_code=status.HTTP_201_CREATED)
def create_products(
    payload: List[ProductCreate],
    gateway: PersistenceGateway = Depends(get_gateway),
):
    if not payload:
        raise HTTPException(status_code=400, detail="No products to add.")
    return gateway.add_multiple(PRODUCTS, [item.model_dump() for item in payload])


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: str, gateway: PersistenceGateway = Depends(get_gateway)):
    return gateway.get(PRODUCTS, product_id)


@router.patch("/{product_id}", response_model=ProductRead)
def update_product(
    product_id: str,
    payload: ProductUpdate,
    gateway: PersistenceGateway = Depends(get_gateway),
):
    fields = payload.model_dump(exclude_unset=True)
    empty = [name for name in _REQUIRED_FIELDS if name in fields and fields[name] is None]
    if empty:
        raise HTTPException(
            status_code=400,
            detail="Fields cannot be empty: {}".format(", ".join(empty)),
        )
    if not fields:
        raise HTTPException(status_code=400, detail="Nothing to update.")
    return gateway.update(PRODUCTS, product_id, fields)


@router.delete("/{product_id}")
def delete_product(product_id: str, gateway: PersistenceGateway = Depends(get_gateway)):
    """Remove the product together with all of its entries and exits."""
    return gateway.delete_product_cascade(product_id)


__all__ = ["router"]
