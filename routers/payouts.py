# routers/payouts.py
from fastapi import APIRouter, Depends

from auth import get_current_ambassador
from dependencies import get_payout_trigger
from errors import MarketplaceError
from models import Ambassador
from routers.errors import to_http_exception
from schemas.payout import PayoutResponse
from services.payout_service import PayoutTrigger

router = APIRouter(prefix="/api/payout", tags=["payouts"])


@router.post("", response_model=PayoutResponse, summary="Instant payout of the available balance")
def create_payout(
     ambassador: Ambassador = Depends(get_current_ambassador),
     trigger: PayoutTrigger = Depends(get_payout_trigger),
):
     """
     Pay out the full available Stripe balance. Best effort: a failed or
     empty payout answers 200 with paid_out=false.
     """
     try:
          result = trigger.payout(ambassador)
     except MarketplaceError as e:
          raise to_http_exception(e)

     if result is None:
          return PayoutResponse(paid_out=False)
     return PayoutResponse(
          paid_out=True,
          payout_id=result.payout_id,
          amount=result.amount,
          currency=result.currency,
     )
