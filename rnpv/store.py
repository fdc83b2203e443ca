"""
rNPV Valuator — Valuation Store

Persistence collaborator for Inputs + Outputs snapshots. The engine never
touches the store; routers save what the engine computed and read it back
by primary id or by public share slug.

Implementations:
    - SqlValuationStore: SQLAlchemy session over the valuations table
    - InMemoryValuationStore: process-local dicts (tests, demos)
"""

import itertools
import json
import logging
import threading
import uuid
from datetime import datetime
from typing import Optional, Protocol

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import crud
from .config import STORE_BACKEND
from .database import get_db
from .models import Valuation
from .schemas import Role, ValuationInputs, ValuationOutputs, ValuationRecord, ValuationSummary

logger = logging.getLogger("rnpv.store")

SLUG_LENGTH = 10
_MAX_SLUG_ATTEMPTS = 3


def generate_share_slug() -> str:
    """Opaque public identifier for sharing a valuation."""
    return uuid.uuid4().hex[:SLUG_LENGTH]


class ValuationStore(Protocol):
    def save(self, inputs: ValuationInputs, outputs: ValuationOutputs,
             nct_id: Optional[str] = None) -> ValuationRecord: ...

    def get(self, valuation_id: int) -> Optional[ValuationRecord]: ...

    def get_by_slug(self, share_slug: str) -> Optional[ValuationRecord]: ...

    def list(self, limit: int = 100, role: Optional[Role] = None,
             phase: Optional[str] = None) -> list[ValuationSummary]: ...

    def delete(self, valuation_id: int) -> bool: ...


def get_by_id_or_slug(store: ValuationStore, key: str) -> Optional[ValuationRecord]:
    """Resolves a numeric key as a primary id first, then as a share slug."""
    if key.isdigit():
        record = store.get(int(key))
        if record:
            return record
    return store.get_by_slug(key)


def _summarise(record: ValuationRecord) -> ValuationSummary:
    return ValuationSummary(
        id=record.id,
        share_slug=record.share_slug,
        created_at=record.created_at,
        role=record.inputs.role,
        phase=record.inputs.phase,
        indication=record.inputs.indication,
        rnpv=record.outputs.rnpv,
    )


# ---------------------------------------------------------------------------
# SQL STORE
# ---------------------------------------------------------------------------

def to_record(valuation: Valuation) -> ValuationRecord:
    """Converts an ORM row into a ValuationRecord."""
    return ValuationRecord(
        id=valuation.id,
        share_slug=valuation.share_slug,
        created_at=valuation.created_at,
        nct_id=valuation.nct_id,
        inputs=ValuationInputs.model_validate(json.loads(valuation.inputs_json)),
        outputs=ValuationOutputs.model_validate(json.loads(valuation.outputs_json)),
    )


class SqlValuationStore:
    """Valuation store backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def save(self, inputs, outputs, nct_id=None) -> ValuationRecord:
        for attempt in range(1, _MAX_SLUG_ATTEMPTS + 1):
            slug = generate_share_slug()
            try:
                valuation = crud.create_valuation(self.db, inputs, outputs, slug, nct_id)
            except IntegrityError:
                self.db.rollback()
                logger.warning(f"Share slug collision on attempt {attempt}: {slug}")
                continue
            logger.info(f"Saved valuation id={valuation.id} slug={valuation.share_slug}")
            return to_record(valuation)
        raise RuntimeError(f"Could not allocate a unique share slug after {_MAX_SLUG_ATTEMPTS} attempts")

    def get(self, valuation_id):
        valuation = crud.get_valuation(self.db, valuation_id)
        return to_record(valuation) if valuation else None

    def get_by_slug(self, share_slug):
        valuation = crud.get_valuation_by_slug(self.db, share_slug)
        return to_record(valuation) if valuation else None

    def list(self, limit=100, role=None, phase=None):
        return [
            ValuationSummary(
                id=v.id,
                share_slug=v.share_slug,
                created_at=v.created_at,
                role=v.role,
                phase=v.phase,
                indication=v.indication,
                rnpv=v.rnpv,
            )
            for v in crud.list_valuations(
                self.db, role=role.value if role else None, phase=phase, limit=limit
            )
        ]

    def delete(self, valuation_id):
        return crud.delete_valuation(self.db, valuation_id)


# ---------------------------------------------------------------------------
# IN-MEMORY STORE
# ---------------------------------------------------------------------------

class InMemoryValuationStore:
    """Valuation store held in process memory. Thread-safe."""

    def __init__(self):
        self._by_id = {}
        self._by_slug = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def save(self, inputs, outputs, nct_id=None) -> ValuationRecord:
        with self._lock:
            slug = generate_share_slug()
            while slug in self._by_slug:
                slug = generate_share_slug()
            record = ValuationRecord(
                id=next(self._ids),
                share_slug=slug,
                created_at=datetime.utcnow(),
                inputs=inputs,
                outputs=outputs,
                nct_id=nct_id,
            )
            self._by_id[record.id] = record
            self._by_slug[record.share_slug] = record
        logger.info(f"Saved in-memory valuation id={record.id} slug={record.share_slug}")
        return record

    def get(self, valuation_id):
        return self._by_id.get(valuation_id)

    def get_by_slug(self, share_slug):
        return self._by_slug.get(share_slug)

    def list(self, limit=100, role=None, phase=None):
        records = sorted(self._by_id.values(), key=lambda r: r.id, reverse=True)
        if role:
            records = [r for r in records if r.inputs.role == role]
        if phase:
            records = [r for r in records if r.inputs.phase == phase]
        return [_summarise(r) for r in records[:limit]]

    def delete(self, valuation_id):
        with self._lock:
            record = self._by_id.pop(valuation_id, None)
            if record is None:
                return False
            self._by_slug.pop(record.share_slug, None)
        return True


_memory_store = InMemoryValuationStore()


def get_store(db: Session = Depends(get_db)) -> ValuationStore:
    """
    FastAPI dependency selecting the configured valuation store.
    RNPV_STORE_BACKEND=memory uses a process-wide in-memory store.
    """
    if STORE_BACKEND == "memory":
        return _memory_store
    return SqlValuationStore(db)
