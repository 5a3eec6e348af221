# routers/ambassadors.py
"""
Ambassador API routes: signup steps, login/logout and the dashboard overview.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from auth import AuthGateway, get_auth_gateway, get_current_ambassador, get_optional_ambassador
from database import get_session
from errors import MarketplaceError
from models import Ambassador, OnboardingStep
from routers.errors import to_http_exception
from schemas.ambassador import (
     AmbassadorResponse,
     DashboardResponse,
     LoginRequest,
     ProfileUpdate,
     SignupRequest,
     SignupStepResponse,
     TokenResponse,
)
from schemas.contract import ContractResponse
from services.ledger_service import LedgerService
from services.stripe_service import StripeProcessor, get_processor
from utils.session import pop_flash

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ambassadors", tags=["ambassadors"])


@router.get("/signup", response_model=SignupStepResponse, summary="Current signup step")
def get_signup_step(ambassador: Optional[Ambassador] = Depends(get_optional_ambassador)):
     """
     Which signup step the caller is on: ACCOUNT for anonymous visitors, then
     the ambassador's stored onboarding step.
     """
     if ambassador is None:
          return SignupStepResponse(step=OnboardingStep.ACCOUNT.value)
     display_name = ""
     if ambassador.onboarding_step in (OnboardingStep.PAYOUT, OnboardingStep.COMPLETE):
          display_name = ambassador.display_name()
     return SignupStepResponse(step=ambassador.onboarding_step.value, display_name=display_name)


@router.post(
     "/signup",
     response_model=TokenResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create an ambassador account"
)
def signup(
     body: SignupRequest,
     request: Request,
     db: Session = Depends(get_session),
     gateway: AuthGateway = Depends(get_auth_gateway),
):
     try:
          ambassador = LedgerService.create_ambassador(
               db,
               email=body.email,
               password=body.password,
               first_name=body.first_name,
               last_name=body.last_name,
          )
          if body.first_name and body.last_name:
               ambassador.complete_profile()
     except MarketplaceError as e:
          raise to_http_exception(e)

     db.commit()
     db.refresh(ambassador)

     # Sign in right away to continue the signup process
     gateway.start_session(request, ambassador)
     return TokenResponse(
          token=gateway.issue_token(ambassador),
          ambassador=AmbassadorResponse.from_model(ambassador),
     )


@router.put("/profile", response_model=AmbassadorResponse, summary="Update profile information")
def update_profile(
     body: ProfileUpdate,
     db: Session = Depends(get_session),
     ambassador: Ambassador = Depends(get_current_ambassador),
):
     try:
          LedgerService.update_ambassador_profile(
               db,
               ambassador,
               first_name=body.first_name,
               last_name=body.last_name,
               email=body.email,
               password=body.password,
          )
     except MarketplaceError as e:
          raise to_http_exception(e)

     db.commit()
     db.refresh(ambassador)
     return AmbassadorResponse.from_model(ambassador)


@router.post("/login", response_model=TokenResponse, summary="Ambassador login")
def login(
     body: LoginRequest,
     request: Request,
     db: Session = Depends(get_session),
     gateway: AuthGateway = Depends(get_auth_gateway),
):
     result = gateway.login(db, request, body.email, body.password)
     if result is None:
          raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
     ambassador, token = result
     return TokenResponse(token=token, ambassador=AmbassadorResponse.from_model(ambassador))


@router.post("/logout", summary="Clear the ambassador session")
def logout(request: Request, gateway: AuthGateway = Depends(get_auth_gateway)):
     gateway.logout(request)
     return {"success": True}


@router.get("/dashboard", response_model=DashboardResponse, summary="Ambassador dashboard")
def dashboard(
     request: Request,
     db: Session = Depends(get_session),
     ambassador: Ambassador = Depends(get_current_ambassador),
     processor: StripeProcessor = Depends(get_processor),
):
     """
     Overview for the logged-in ambassador: Stripe balance, contracts from the
     past month and the one-time onboarding banner.
     """
     balance_available = 0
     balance_pending = 0
     if ambassador.is_onboarded:
          try:
               balance = processor.retrieve_balance(ambassador.stripe_account_id)
          except MarketplaceError as e:
               raise to_http_exception(e)
          available = balance.first_available()
          pending = balance.first_pending()
          balance_available = available.amount if available else 0
          balance_pending = pending.amount if pending else 0

     contracts = LedgerService.list_recent_contracts(db, ambassador)
     show_banner = bool(pop_flash(request, "show_banner"))

     return DashboardResponse(
          ambassador=AmbassadorResponse.from_model(ambassador),
          balance_available=balance_available,
          balance_pending=balance_pending,
          contracts_total_amount=sum(c.amount for c in contracts),
          contracts=[ContractResponse.from_model(c) for c in contracts],
          show_banner=show_banner,
     )
