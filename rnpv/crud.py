"""
rNPV Valuator CRUD Operations

Database access functions for the valuations table, called by the
SQL-backed valuation store.

Conventions:
    - Each function takes a db: Session parameter
    - Get functions return None if not found (routers raise 404)
    - List functions return lists (empty list if none found)
"""

from typing import Optional

from sqlalchemy.orm import Session

from .models import Valuation
from .schemas import ValuationInputs, ValuationOutputs


def create_valuation(
    db: Session,
    inputs: ValuationInputs,
    outputs: ValuationOutputs,
    share_slug: str,
    nct_id: Optional[str] = None,
) -> Valuation:
    """
    Insert a valuation snapshot.

    Raises:
        IntegrityError: If share_slug already exists
    """
    valuation = Valuation(
        share_slug=share_slug,
        role=inputs.role.value,
        phase=inputs.phase,
        indication=inputs.indication,
        nct_id=nct_id,
        rnpv=outputs.rnpv,
        inputs_json=inputs.model_dump_json(),
        outputs_json=outputs.model_dump_json(),
    )
    db.add(valuation)
    db.commit()
    db.refresh(valuation)
    return valuation


def get_valuation(db: Session, valuation_id: int) -> Optional[Valuation]:
    """Get a single valuation by ID. Returns None if not found."""
    return db.query(Valuation).filter(Valuation.id == valuation_id).first()


def get_valuation_by_slug(db: Session, share_slug: str) -> Optional[Valuation]:
    """Get a single valuation by its share slug. Returns None if not found."""
    return db.query(Valuation).filter(Valuation.share_slug == share_slug).first()


def list_valuations(
    db: Session,
    role: Optional[str] = None,
    phase: Optional[str] = None,
    limit: int = 100,
) -> list[Valuation]:
    """List valuations, newest first, with optional role / phase filters."""
    query = db.query(Valuation)
    if role:
        query = query.filter(Valuation.role == role)
    if phase:
        query = query.filter(Valuation.phase == phase)
    return query.order_by(Valuation.id.desc()).limit(limit).all()


def delete_valuation(db: Session, valuation_id: int) -> bool:
    """Delete a valuation. Returns True if a row was removed."""
    valuation = get_valuation(db, valuation_id)
    if not valuation:
        return False
    db.delete(valuation)
    db.commit()
    return True
