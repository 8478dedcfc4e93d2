from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from inventory_tracker.core.constants import ENTRIES, PRODUCTS
from inventory_tracker.dependencies import get_gateway
from inventory_tracker.schemas.movement import EntryCreate, EntryRead, EntryUpdate
from inventory_tracker.services.persistence_gateway import PersistenceGateway

router = APIRouter(prefix="/entries", tags=["Entries"])


@router.get("", response_model=List[EntryRead])
def list_entries(gateway: PersistenceGateway = Depends(get_gateway)):
    return gateway.get_all(ENTRIES)


@router.post("", response_model=EntryRead, status_code=status.HTTP_201_CREATED)
def create_entry(payload: EntryCreate, gateway: PersistenceGateway = Depends(get_gateway)):
    gateway.get(PRODUCTS, payload.product_id)
    return gateway.add(ENTRIES, payload.model_dump())


@router.patch("/{entry_id}", response_model=EntryRead)
def update_entry(
    entry_id: str,
    payload: EntryUpdate,
    gateway: PersistenceGateway = Depends(get_gateway),
):
    fields = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        raise HTTPException(status_code=400, detail="Nothing to update.")
    if "product_id" in fields:
        gateway.get(PRODUCTS, fields["product_id"])
    return gateway.update(ENTRIES, entry_id, fields)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entry(entry_id: str, gateway: PersistenceGateway = Depends(get_gateway)):
    gateway.delete(ENTRIES, entry_id)


__all__ = ["router"]
