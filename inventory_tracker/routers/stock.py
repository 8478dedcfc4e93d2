from fastapi import APIRouter, Depends, HTTPException, Query

from inventory_tracker.dependencies import get_gateway
from inventory_tracker.schemas.stock import LowStockResponse, ProductHistory, StockListResponse
from inventory_tracker.services.persistence_gateway import PersistenceGateway
from inventory_tracker.services.stock_service import (
    low_stock_notifications,
    product_history,
    stock_control,
)

router = APIRouter(prefix="/stock", tags=["Stock"])


@router.get("", response_model=StockListResponse)
def stock_levels(
    query: str | None = Query(None, description="Product name search (case-insensitive)"),
    status: str = Query("all", description="all | ok | low"),
    sort: str = Query("name", description="name | balance | status"),
    direction: str = Query("ascending", description="ascending | descending"),
    gateway: PersistenceGateway = Depends(get_gateway),
):
    try:
        return stock_control(
            gateway,
            query=query,
            status=status,
            sort=sort,
            direction=direction,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/low", response_model=LowStockResponse)
def low_stock(gateway: PersistenceGateway = Depends(get_gateway)):
    return low_stock_notifications(gateway)


@router.get("/{product_id}/history", response_model=ProductHistory)
def history(product_id: str, gateway: PersistenceGateway = Depends(get_gateway)):
    return product_history(gateway, product_id)


__all__ = ["router"]
