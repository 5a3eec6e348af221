# routers/contracts.py
"""
Contract API routes.

POST /api/contracts               create a contract (brand side / test harness)
POST /api/contracts/simulate      create a sample contract for the logged-in ambassador
POST /api/contracts/{id}/accept   accept and settle a contract
"""
import logging
import random

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from auth import get_current_ambassador
from database import get_session
from dependencies import get_settlement_engine
from errors import MarketplaceError, NotFoundError
from models import Ambassador
from routers.errors import to_http_exception
from schemas.contract import ContractCreate, ContractResponse
from services.ledger_service import LedgerService
from services.settlement_service import SettlementEngine
from services.stripe_service import StripeProcessor, get_processor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/contracts", tags=["contracts"])

SAMPLE_POST_LINK = "https://www.instagram.com/p/CCrR7dtA3Ul/"
SAMPLE_AMOUNT_RANGE = (1000, 10000)


@router.post(
     "",
     response_model=ContractResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a contract"
)
def create_contract(
     body: ContractCreate,
     db: Session = Depends(get_session),
     engine: SettlementEngine = Depends(get_settlement_engine),
     processor: StripeProcessor = Depends(get_processor),
):
     """
     Create a PENDING contract between an ambassador and a brand.

     The amount is taken from the request as-is; a real deployment has to
     compute it on the backend.
     """
     try:
          if body.ambassador_email:
               ambassador = LedgerService.find_ambassador_by_email(db, body.ambassador_email)
          else:
               ambassador = LedgerService.get_latest_onboarded(db)
          if ambassador is None:
               raise NotFoundError("Ambassador not found")

          if body.brand_name:
               brand = LedgerService.find_brand_by_name(db, body.brand_name)
          else:
               brand = LedgerService.get_latest_brand(db, processor)
          if brand is None:
               raise NotFoundError(f"Brand {body.brand_name} not found")

          contract = engine.create_contract(db, ambassador.id, brand.id, body.post_link, body.amount)
     except MarketplaceError as e:
          raise to_http_exception(e)

     db.commit()
     db.refresh(contract)
     return ContractResponse.from_model(contract)


@router.post(
     "/simulate",
     response_model=ContractResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a test contract for the logged-in ambassador"
)
def simulate_contract(
     db: Session = Depends(get_session),
     ambassador: Ambassador = Depends(get_current_ambassador),
     engine: SettlementEngine = Depends(get_settlement_engine),
     processor: StripeProcessor = Depends(get_processor),
):
     try:
          brand = LedgerService.get_random_brand(db, processor)
          contract = engine.create_contract(
               db,
               ambassador.id,
               brand.id,
               SAMPLE_POST_LINK,
               random.randint(*SAMPLE_AMOUNT_RANGE),
          )
     except MarketplaceError as e:
          raise to_http_exception(e)

     db.commit()
     db.refresh(contract)
     return ContractResponse.from_model(contract)


@router.post(
     "/{contract_id}/accept",
     response_model=ContractResponse,
     summary="Accept a contract and settle it"
)
def accept_contract(
     contract_id: int,
     db: Session = Depends(get_session),
     ambassador: Ambassador = Depends(get_current_ambassador),
     engine: SettlementEngine = Depends(get_settlement_engine),
):
     """
     Charge the brand and send the funds to the ambassador's Stripe account.

     Returns 402 with the processor message when the charge fails; the
     contract stays unaccepted and can be accepted again.
     """
     try:
          contract = LedgerService.get_contract(db, contract_id)
     except MarketplaceError as e:
          raise to_http_exception(e)
     if contract.ambassador_id != ambassador.id:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Contract with ID {contract_id} not found"
          )

     try:
          contract = engine.accept_contract(db, contract_id)
     except MarketplaceError as e:
          raise to_http_exception(e, processor_status=status.HTTP_402_PAYMENT_REQUIRED)

     db.refresh(contract)
     return ContractResponse.from_model(contract)
