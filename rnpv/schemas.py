"""
rNPV Valuator Pydantic Schemas

Request/response models for the engine boundary and the REST API.

The valuation inputs carry type validation only: numeric ranges are not
enforced here because the engine must produce a number for any numeric
input. Range problems are reported as warnings by
rnpv.engines.validation.validate_inputs.

Naming convention:
    - ValuationInputs / ValuationOutputs: the engine's data contract
    - XxxRequest: request body
    - XxxResponse / XxxRecord: response body
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Commercial posture whose cashflows feed rNPV."""
    OWNER = "OWNER"
    LICENSOR = "LICENSOR"


# ---------------------------------------------------------------------------
# ENGINE CONTRACT
# ---------------------------------------------------------------------------

class ValuationInputs(BaseModel):
    """Immutable set of inputs for one valuation."""
    # Clinical
    phase: str = "Preclinical"
    indication: str = "Oncology"
    role: Role = Role.OWNER

    # Commercial (currency millions / fractions)
    peak_sales: float = 500.0
    launch_year: int
    loe_year: int
    discount_rate: float = 0.10
    tax_rate: float = 0.21
    cogs_fraction: float = 0.20
    commercial_spend_fraction: float = 0.30
    working_capital_fraction: float = 0.05

    # Licensing (percent on a 0–100 scale)
    royalty_min_pct: Optional[float] = 5.0
    royalty_max_pct: Optional[float] = 12.0
    royalty_ramp_years: Optional[int] = 3

    # Mechanistic
    potency_nm: float = 50.0
    selectivity_fold: float = 10.0
    half_life_hr: float = 12.0
    molecular_weight_da: float = 400.0
    log_p: float = 2.0
    bioavailability: float = 0.5
    target_validation: float = 0.5
    target_novelty: float = 0.5

    model_config = {"frozen": True}


class ValuationOutputs(BaseModel):
    """Derived results. Always recomputable from ValuationInputs."""
    mechanism_bonus: float
    baseline_probability: float
    ptrs: float
    dev_cost_pv: float
    owner_pv: float
    licensor_pv: float
    selected_pv: float
    rnpv: float
    roi: int
    average_royalty_pct: float
    current_year: int

    # inf / nan survive the JSON round trip (degenerate discount rates)
    model_config = {"frozen": True, "ser_json_inf_nan": "constants"}


class ValidationWarning(BaseModel):
    """A non-fatal problem detected in a set of inputs."""
    code: str
    field: Optional[str] = None
    message: str


class CashflowRow(BaseModel):
    """One year of the cashflow schedule."""
    year: int
    sales: float
    royalty_pct: float
    owner_cf: float
    licensor_cf: float
    discount_factor: float
    owner_pv: float
    licensor_pv: float

    model_config = {"ser_json_inf_nan": "constants"}


# ---------------------------------------------------------------------------
# API SCHEMAS
# ---------------------------------------------------------------------------

class ComputeResponse(BaseModel):
    """Response body for an on-the-fly valuation."""
    outputs: ValuationOutputs
    warnings: list[ValidationWarning] = []
    cashflows: Optional[list[CashflowRow]] = None


class SaveValuationRequest(BaseModel):
    """Request body for persisting a valuation. Outputs are recomputed server-side."""
    inputs: ValuationInputs
    nct_id: Optional[str] = None
    current_year: Optional[int] = None


class SaveValuationResponse(BaseModel):
    id: int
    share_slug: str
    outputs: ValuationOutputs


class ValuationRecord(BaseModel):
    """A stored Inputs + Outputs snapshot."""
    id: int
    share_slug: str
    created_at: datetime
    inputs: ValuationInputs
    outputs: ValuationOutputs
    nct_id: Optional[str] = None


class ValuationSummary(BaseModel):
    """Compact listing entry for stored valuations."""
    id: int
    share_slug: str
    created_at: datetime
    role: Role
    phase: str
    indication: str
    rnpv: float

    model_config = {"ser_json_inf_nan": "constants"}


class ExportRequest(BaseModel):
    """Request body for exporting a valuation that is not stored."""
    inputs: ValuationInputs
    current_year: Optional[int] = None


# ---------------------------------------------------------------------------
# COLLABORATOR SCHEMAS
# ---------------------------------------------------------------------------

class OrangeBookRecord(BaseModel):
    """Patent / exclusivity record supplied by an LOE source."""
    application_number: Optional[str] = Field(None, alias="applicationNumber")
    product_name: Optional[str] = Field(None, alias="productName")
    patent_expiry: Optional[str] = Field(None, alias="patentExpiry")
    exclusivity_expiry: Optional[str] = Field(None, alias="exclusivityExpiry")

    model_config = {"populate_by_name": True}


class LoeResult(BaseModel):
    drug_name: str
    loe_year: int
    source: str


class TrialMetadata(BaseModel):
    """Trial details extracted from a registry payload."""
    nct_id: str
    phase: Optional[str] = None
    mapped_phase: Optional[str] = None
    sponsor: Optional[str] = None
    start_date: Optional[str] = None
    status: Optional[str] = None
