"""
rNPV Valuator — External Lookups

Collaborators that supply data the engine consumes after it has been
resolved by the surrounding layer:

    - LOE source: drug name → loss-of-exclusivity year
    - Trial source: NCT id → phase / sponsor / start date

Both are file-backed or placeholder implementations; there is no live
registry integration. Swapping in a networked source only requires
implementing the same protocol and overriding the FastAPI dependency.
"""

import json
import logging
import re
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Callable, Optional, Protocol

from .config import LOE_RECORDS_PATH, TRIAL_FIXTURES_PATH
from .engines.loe import resolve_loe_year
from .engines.phase_table import normalize_phase
from .schemas import LoeResult, OrangeBookRecord, TrialMetadata

logger = logging.getLogger("rnpv.lookups")

NCT_ID_RE = re.compile(r"^NCT\d{8}$")
PLACEHOLDER_LOE_OFFSET = 10


def is_valid_nct_id(nct_id: str) -> bool:
    return bool(NCT_ID_RE.match(nct_id or ""))


def _load_json(path) -> dict:
    """Reads a JSON object from disk, naming the file in any parse error."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ValueError(f"Could not load lookup data from {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Lookup data in {path} must be a JSON object")
    return data


# ---------------------------------------------------------------------------
# LOE SOURCES
# ---------------------------------------------------------------------------

class LoeSource(Protocol):
    def lookup(self, drug_name: str) -> Optional[LoeResult]: ...


class PlaceholderLoeSource:
    """Estimates LOE as the current year + 10 for any drug."""

    def __init__(self, today: Callable[[], date] = date.today):
        self._today = today

    def lookup(self, drug_name):
        return LoeResult(
            drug_name=drug_name,
            loe_year=self._today().year + PLACEHOLDER_LOE_OFFSET,
            source="placeholder",
        )


class RecordLoeSource:
    """
    Resolves LOE from patent / exclusivity records keyed by drug name
    (case-insensitive).
    """

    def __init__(self, records_by_drug: dict, source: str = "orange_book"):
        self._records = {
            name.strip().lower(): [
                r if isinstance(r, OrangeBookRecord) else OrangeBookRecord.model_validate(r)
                for r in records
            ]
            for name, records in records_by_drug.items()
        }
        self.source = source

    @classmethod
    def from_file(cls, path) -> "RecordLoeSource":
        return cls(_load_json(path), source=f"file:{Path(path).name}")

    def records_for(self, drug_name: str) -> list[OrangeBookRecord]:
        return self._records.get(drug_name.strip().lower(), [])

    def lookup(self, drug_name):
        records = self.records_for(drug_name)
        loe_year = resolve_loe_year(records)
        if loe_year is None:
            logger.info(f"No LOE year resolved for '{drug_name}' ({len(records)} records)")
            return None
        return LoeResult(drug_name=drug_name, loe_year=loe_year, source=self.source)


# ---------------------------------------------------------------------------
# TRIAL SOURCES
# ---------------------------------------------------------------------------

class TrialSource(Protocol):
    def fetch(self, nct_id: str) -> Optional[TrialMetadata]: ...


def parse_trial_payload(nct_id: str, payload: dict) -> TrialMetadata:
    """
    Extracts phase, sponsor, start date and status from a
    ClinicalTrials.gov v2-shaped study payload.

    Accepts either a single study ({"protocolSection": ...}), a wrapper
    ({"study": ...}) or a search result ({"studies": [...]}).
    """
    study = payload.get("study") or (payload.get("studies") or [None])[0] or payload
    section = study.get("protocolSection") or study

    design = section.get("designModule") or {}
    phases = design.get("phases")
    legacy_phase = design.get("phase")
    if isinstance(phases, list) and phases:
        phase = "/".join(str(p) for p in phases)
    elif isinstance(legacy_phase, dict):
        phase = legacy_phase.get("phase")
    else:
        phase = legacy_phase or section.get("phase")

    sponsor = ((section.get("sponsorCollaboratorsModule") or {}).get("leadSponsor") or {}).get("name")
    status_module = section.get("statusModule") or {}
    start_date = (status_module.get("startDateStruct") or {}).get("date")
    status = status_module.get("overallStatus")

    return TrialMetadata(
        nct_id=nct_id,
        phase=phase,
        mapped_phase=normalize_phase(phase),
        sponsor=sponsor,
        start_date=start_date,
        status=status,
    )


class StaticTrialSource:
    """Serves trial metadata from a fixed mapping of NCT id → payload."""

    def __init__(self, payloads: Optional[dict] = None):
        self._payloads = dict(payloads or {})

    @classmethod
    def from_file(cls, path) -> "StaticTrialSource":
        return cls(_load_json(path))

    def fetch(self, nct_id):
        payload = self._payloads.get(nct_id)
        if payload is None:
            return None
        return parse_trial_payload(nct_id, payload)


# ---------------------------------------------------------------------------
# DEPENDENCIES
# ---------------------------------------------------------------------------

@lru_cache
def get_loe_source() -> LoeSource:
    """FastAPI dependency: file-backed records when configured, else placeholder."""
    if LOE_RECORDS_PATH:
        logger.info(f"Loading LOE records from {LOE_RECORDS_PATH}")
        return RecordLoeSource.from_file(LOE_RECORDS_PATH)
    return PlaceholderLoeSource()


@lru_cache
def get_trial_source() -> TrialSource:
    """FastAPI dependency: file-backed trial fixtures (empty when unset)."""
    if TRIAL_FIXTURES_PATH:
        logger.info(f"Loading trial fixtures from {TRIAL_FIXTURES_PATH}")
        return StaticTrialSource.from_file(TRIAL_FIXTURES_PATH)
    return StaticTrialSource()
