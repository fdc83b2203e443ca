"""
rNPV Valuator ORM Models

Tables:
    - valuations: saved Inputs + Outputs snapshots with a public share slug

Inputs and outputs are stored as JSON text; role, phase, indication and
rNPV are denormalised into columns for listing and filtering.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Integer, Float, Text, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


class Valuation(Base):
    """
    A persisted valuation. Outputs are a snapshot of what the engine
    computed at save time; the inputs remain the source of truth.
    """
    __tablename__ = "valuations"
    __table_args__ = (
        UniqueConstraint("share_slug", name="uq_valuation_share_slug"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    share_slug: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    role: Mapped[str] = mapped_column(Text, nullable=False)
    phase: Mapped[str] = mapped_column(Text, nullable=False)
    indication: Mapped[str] = mapped_column(Text, nullable=False)
    nct_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    rnpv: Mapped[float] = mapped_column(Float, nullable=False)
    inputs_json: Mapped[str] = mapped_column(Text, nullable=False)
    outputs_json: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<Valuation(id={self.id}, slug={self.share_slug}, role={self.role})>"
