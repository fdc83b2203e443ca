"""Export endpoints (CSV, JSON, Excel download)."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response, StreamingResponse

from ..engines import compose_valuation
from ..engines.cashflow import build_cashflow_schedule
from ..exporting import build_workbook, flatten_valuation, to_csv, to_json, workbook_bytes
from ..schemas import ExportRequest
from ..store import ValuationStore, get_by_id_or_slug, get_store
from . import resolve_current_year

router = APIRouter(prefix="/api/export", tags=["export"])

_XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _attachment(filename: str) -> dict:
    return {"Content-Disposition": f"attachment; filename={filename}"}


def _stamp() -> str:
    return datetime.utcnow().strftime("%Y%m%d%H%M%S")


@router.post("/csv")
def export_csv(data: ExportRequest):
    outputs = compose_valuation(data.inputs, resolve_current_year(data.current_year))
    body = to_csv([flatten_valuation(data.inputs, outputs)])
    return Response(body, media_type="text/csv", headers=_attachment(f"valuation_{_stamp()}.csv"))


@router.post("/json")
def export_json(data: ExportRequest):
    outputs = compose_valuation(data.inputs, resolve_current_year(data.current_year))
    return Response(
        to_json(data.inputs, outputs),
        media_type="application/json",
        headers=_attachment(f"valuation_{_stamp()}.json"),
    )


@router.post("/excel")
def export_excel(data: ExportRequest):
    year = resolve_current_year(data.current_year)
    outputs = compose_valuation(data.inputs, year)
    wb = build_workbook(data.inputs, outputs, build_cashflow_schedule(data.inputs, year))
    return StreamingResponse(
        workbook_bytes(wb),
        media_type=_XLSX_MEDIA_TYPE,
        headers=_attachment(f"valuation_{_stamp()}.xlsx"),
    )


@router.get("/csv/{key}")
def export_saved_csv(key: str, store: ValuationStore = Depends(get_store)):
    """CSV row for a saved valuation, using the outputs captured at save time."""
    record = get_by_id_or_slug(store, key)
    if not record:
        raise HTTPException(404, "Valuation not found")
    body = to_csv([flatten_valuation(record.inputs, record.outputs, timestamp=record.created_at)])
    return Response(body, media_type="text/csv", headers=_attachment(f"valuation_{record.share_slug}.csv"))


@router.get("/excel/{key}")
def export_saved_excel(key: str, store: ValuationStore = Depends(get_store)):
    record = get_by_id_or_slug(store, key)
    if not record:
        raise HTTPException(404, "Valuation not found")
    schedule = build_cashflow_schedule(record.inputs, record.outputs.current_year)
    wb = build_workbook(record.inputs, record.outputs, schedule)
    return StreamingResponse(
        workbook_bytes(wb),
        media_type=_XLSX_MEDIA_TYPE,
        headers=_attachment(f"valuation_{record.share_slug}.xlsx"),
    )
