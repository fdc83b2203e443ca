"""
Lookup Router — /api/loe, /api/trial

Thin wrappers over the LOE and trial collaborators. The returned
`loe_year` / `mapped_phase` can be fed straight into ValuationInputs.

Endpoints:
    GET /api/loe/{drug_name}    — Loss-of-exclusivity year for a drug
    GET /api/trial/{nct_id}     — Trial phase, sponsor and start date
"""

from fastapi import APIRouter, Depends, HTTPException

from ..lookups import LoeSource, TrialSource, get_loe_source, get_trial_source, is_valid_nct_id
from ..schemas import LoeResult, TrialMetadata

router = APIRouter(prefix="/api", tags=["Lookups"])


@router.get("/loe/{drug_name}", response_model=LoeResult)
def lookup_loe(drug_name: str, source: LoeSource = Depends(get_loe_source)):
    name = drug_name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Missing drug name")
    result = source.lookup(name)
    if result is None:
        raise HTTPException(status_code=404, detail=f"No LOE year found for '{name}'")
    return result


@router.get("/trial/{nct_id}", response_model=TrialMetadata)
def lookup_trial(nct_id: str, source: TrialSource = Depends(get_trial_source)):
    key = nct_id.strip().upper()
    if not is_valid_nct_id(key):
        raise HTTPException(status_code=400, detail=f"Invalid NCT ID: {nct_id}")
    trial = source.fetch(key)
    if trial is None:
        raise HTTPException(status_code=404, detail=f"Trial {key} not found")
    return trial
