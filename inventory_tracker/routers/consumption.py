from fastapi import APIRouter, Depends, Query

from inventory_tracker.dependencies import get_gateway
from inventory_tracker.schemas.stock import ConsumptionResponse, ForecastUpdate, UserProfileRead
from inventory_tracker.services.persistence_gateway import PersistenceGateway
from inventory_tracker.services.stock_service import consumption_overview

router = APIRouter(prefix="/consumption", tags=["Consumption"])


@router.get("", response_model=ConsumptionResponse)
def consumption(
    forecast: int | None = Query(
        None,
        ge=0,
        description="Forecasted units for the next 30 days; defaults to the saved value",
    ),
    gateway: PersistenceGateway = Depends(get_gateway),
):
    return consumption_overview(gateway, monthly_forecast=forecast)


@router.put("/forecast", response_model=UserProfileRead)
def save_forecast(payload: ForecastUpdate, gateway: PersistenceGateway = Depends(get_gateway)):
    return gateway.set_monthly_forecast(payload.monthly_forecast)


__all__ = ["router"]
