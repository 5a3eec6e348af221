# routers/link.py
"""
Stripe Connect account linking routes.

GET /api/link/start      -> 302 to Stripe Express onboarding
GET /api/link/callback   -> state check, code exchange, 302 to the dashboard
GET /api/link/dashboard  -> 302 to the ambassador's Express dashboard
"""
import logging

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from auth import get_current_ambassador
from database import get_session
from dependencies import get_linking_service
from errors import CsrfMismatchError, MarketplaceError
from models import Ambassador
from routers.errors import to_http_exception
from services.linking_service import LINK_STATE_KEY, AccountLinkingService
from utils.session import flash, pop_value

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/link", tags=["account-linking"])

SIGNUP_URL = "/api/ambassadors/signup"
DASHBOARD_URL = "/api/ambassadors/dashboard"


@router.get("/start", summary="Start Stripe Express onboarding")
def start_link(
     request: Request,
     ambassador: Ambassador = Depends(get_current_ambassador),
     linking: AccountLinkingService = Depends(get_linking_service),
):
     try:
          url = linking.start(ambassador, request.session)
     except MarketplaceError as e:
          raise to_http_exception(e)
     return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@router.get("/callback", summary="Complete Stripe Express onboarding")
def link_callback(
     request: Request,
     state: str = Query(None),
     code: str = Query(None),
     db: Session = Depends(get_session),
     ambassador: Ambassador = Depends(get_current_ambassador),
     linking: AccountLinkingService = Depends(get_linking_service),
):
     # The state is single-use: take it out of the session before comparing
     stored_state = pop_value(request, LINK_STATE_KEY)
     try:
          linking.complete(db, ambassador, state, code, stored_state)
     except CsrfMismatchError:
          return RedirectResponse(SIGNUP_URL, status_code=status.HTTP_302_FOUND)
     except MarketplaceError as e:
          logger.error("The Stripe onboarding process has not succeeded: %s", e.message)
          db.rollback()
          raise to_http_exception(e)

     db.commit()
     flash(request, "show_banner")
     return RedirectResponse(DASHBOARD_URL, status_code=status.HTTP_302_FOUND)


@router.get("/dashboard", summary="Open the Stripe Express dashboard")
def express_dashboard(
     account: bool = Query(False, description="Open the account tab directly"),
     ambassador: Ambassador = Depends(get_current_ambassador),
     linking: AccountLinkingService = Depends(get_linking_service),
):
     try:
          url = linking.dashboard_link(ambassador, account_tab=account)
     except MarketplaceError as e:
          logger.warning("Failed to create a Stripe login link: %s", e.message)
          return RedirectResponse(SIGNUP_URL, status_code=status.HTTP_302_FOUND)
     return RedirectResponse(url, status_code=status.HTTP_302_FOUND)
