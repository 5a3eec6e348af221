# schemas/payout.py
from typing import Optional
from pydantic import BaseModel, Field


class PayoutResponse(BaseModel):
     """Response for POST /api/payout. paid_out is False when nothing was sent."""
     paid_out: bool = Field(..., description="Whether a payout was created")
     payout_id: Optional[str] = None
     amount: int = 0
     currency: Optional[str] = None
