"""
Valuation Router — /api/valuation, /api/valuations

Computation is delegated to rnpv.engines; persistence to the configured
valuation store. Outputs are always recomputed from the submitted inputs.

Endpoints:
    POST /api/valuation/compute        — Compute outputs (+ warnings, optional cashflows)
    POST /api/valuation/validate       — Warnings only
    POST /api/valuations               — Compute and save; returns id + share slug
    GET  /api/valuations               — List saved valuations (newest first)
    GET  /api/valuation/share/{slug}   — Fetch by share slug
    GET  /api/valuation/{key}          — Fetch by id or share slug
    DELETE /api/valuation/{id}         — Delete a saved valuation
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..engines import compose_valuation, validate_inputs
from ..engines.cashflow import build_cashflow_schedule
from ..schemas import (
    ComputeResponse, Role, SaveValuationRequest, SaveValuationResponse,
    ValidationWarning, ValuationInputs, ValuationRecord, ValuationSummary,
)
from ..store import ValuationStore, get_by_id_or_slug, get_store
from . import resolve_current_year

logger = logging.getLogger("rnpv.api")

router = APIRouter(prefix="/api", tags=["Valuations"])


@router.post("/valuation/compute", response_model=ComputeResponse)
def compute_valuation(
    inputs: ValuationInputs,
    current_year: Optional[int] = Query(None, description="Discounting reference year (default: this year)"),
    include_cashflows: bool = Query(False, description="Include the year-by-year schedule"),
):
    """
    Compute rNPV, PTRS, ROI and both PVs for a set of inputs.

    Never fails for numeric input; questionable inputs are reported in
    `warnings` alongside the result.
    """
    year = resolve_current_year(current_year)
    outputs = compose_valuation(inputs, year)
    return ComputeResponse(
        outputs=outputs,
        warnings=validate_inputs(inputs),
        cashflows=build_cashflow_schedule(inputs, year) if include_cashflows else None,
    )


@router.post("/valuation/validate", response_model=list[ValidationWarning])
def validate_valuation(inputs: ValuationInputs):
    """Return warnings for inputs the engine would silently absorb."""
    return validate_inputs(inputs)


@router.post("/valuations", response_model=SaveValuationResponse, status_code=201)
def save_valuation(data: SaveValuationRequest, store: ValuationStore = Depends(get_store)):
    """Compute outputs for the submitted inputs and persist the snapshot."""
    outputs = compose_valuation(data.inputs, resolve_current_year(data.current_year))
    record = store.save(data.inputs, outputs, nct_id=data.nct_id)
    logger.info(f"Valuation {record.id} saved (role={data.inputs.role.value}, rnpv={outputs.rnpv:.2f})")
    return SaveValuationResponse(id=record.id, share_slug=record.share_slug, outputs=record.outputs)


@router.get("/valuations", response_model=list[ValuationSummary])
def list_valuations(
    limit: int = Query(100, ge=1, le=1000),
    role: Optional[Role] = None,
    phase: Optional[str] = None,
    store: ValuationStore = Depends(get_store),
):
    """Stored valuations, newest first, optionally filtered by role and phase."""
    return store.list(limit=limit, role=role, phase=phase)


@router.get("/valuation/share/{slug}", response_model=ValuationRecord)
def get_shared_valuation(slug: str, store: ValuationStore = Depends(get_store)):
    """Fetch a saved valuation by its public share slug."""
    record = store.get_by_slug(slug)
    if not record:
        raise HTTPException(status_code=404, detail=f"Valuation '{slug}' not found")
    return record


@router.get("/valuation/{key}", response_model=ValuationRecord)
def get_valuation(key: str, store: ValuationStore = Depends(get_store)):
    """Fetch a saved valuation by numeric id or share slug."""
    record = get_by_id_or_slug(store, key)
    if not record:
        raise HTTPException(status_code=404, detail=f"Valuation '{key}' not found")
    return record


@router.delete("/valuation/{valuation_id}")
def delete_valuation(valuation_id: int, store: ValuationStore = Depends(get_store)):
    if not store.delete(valuation_id):
        raise HTTPException(status_code=404, detail=f"Valuation {valuation_id} not found")
    return {"deleted": valuation_id}
