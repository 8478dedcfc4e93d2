from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from inventory_tracker.core.constants import EXITS, PRODUCTS
from inventory_tracker.dependencies import get_gateway
from inventory_tracker.schemas.movement import ExitCreate, ExitRead, ExitUpdate
from inventory_tracker.services.persistence_gateway import PersistenceGateway

router = APIRouter(prefix="/exits", tags=["Exits"])


@router.get("", response_model=List[ExitRead])
def list_exits(gateway: PersistenceGateway = Depends(get_gateway)):
    return gateway.get_all(EXITS)


@router.post("", response_model=ExitRead, status_code=status.HTTP_201_CREATED)
def create_exit(payload: ExitCreate, gateway: PersistenceGateway = Depends(get_gateway)):
    # not checked against the current balance; stock may go negative
    gateway.get(PRODUCTS, payload.product_id)
    return gateway.add(EXITS, payload.model_dump())


@router.patch("/{exit_id}", response_model=ExitRead)
def update_exit(
    exit_id: str,
    payload: ExitUpdate,
    gateway: PersistenceGateway = Depends(get_gateway),
):
    fields = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        raise HTTPException(status_code=400, detail="Nothing to update.")
    if "product_id" in fields:
        gateway.get(PRODUCTS, fields["product_id"])
    return gateway.update(EXITS, exit_id, fields)


@router.delete("/{exit_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_exit(exit_id: str, gateway: PersistenceGateway = Depends(get_gateway)):
    gateway.delete(EXITS, exit_id)


__all__ = ["router"]
