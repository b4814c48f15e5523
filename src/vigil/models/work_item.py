"""Work item — the queue record the engine classifies.

Records are owned by the external work-queue service. The engine reads
them and never writes back, so the model is frozen.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class WorkItem(BaseModel):
    """Single queue item as seen by the urgency classifier."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    # --- Fields the classifier reads ---
    id: str
    status: str = "pending"
    deleted: bool = False
    priority: str = "normal"
    amount: Optional[Decimal] = None
    currency: str = ""

    # --- Informational fields carried through to the renderer ---
    title: str = ""
    description: Optional[str] = None
    category: str = ""
    user_id: str = ""
    user_email: Optional[str] = None
    branch_name: Optional[str] = None
    country: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("currency", mode="before")
    @classmethod
    def _upper_currency(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def _currency_required_with_amount(self) -> "WorkItem":
        if self.amount is not None and not self.currency:
            raise ValueError(f"item {self.id!r} has an amount but no currency")
        return self

    @property
    def is_eligible(self) -> bool:
        """Only live pending items take part in urgency evaluation."""
        return self.is_eligible_for("pending")

    def is_eligible_for(self, status: str) -> bool:
        return self.status == status and not self.deleted
