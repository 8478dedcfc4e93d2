from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from inventory_tracker.dependencies import get_gateway
from inventory_tracker.schemas.stock import ReportSummary
from inventory_tracker.services.persistence_gateway import PersistenceGateway
from inventory_tracker.services.report_service import (
    CSV_MEDIA_TYPE,
    EXPORTS,
    XLSX_MEDIA_TYPE,
    export_csv,
    export_workbook,
    report_summary,
)

router = APIRouter(prefix="/reports", tags=["Reports"])


def _attachment(filename):
    return {"Content-Disposition": 'attachment; filename="{}"'.format(filename)}


@router.get("/summary", response_model=ReportSummary)
def summary(gateway: PersistenceGateway = Depends(get_gateway)):
    return report_summary(gateway)


@router.get("/export/{collection}.csv")
def download_csv(collection: str, gateway: PersistenceGateway = Depends(get_gateway)):
    if collection not in EXPORTS:
        raise HTTPException(status_code=404, detail="Unknown export.")
    filename, content = export_csv(gateway, collection)
    return Response(content=content, media_type=CSV_MEDIA_TYPE, headers=_attachment(filename))


@router.get("/export.xlsx")
def download_workbook(gateway: PersistenceGateway = Depends(get_gateway)):
    return Response(
        content=export_workbook(gateway),
        media_type=XLSX_MEDIA_TYPE,
        headers=_attachment("estoque.xlsx"),
    )


__all__ = ["router"]
