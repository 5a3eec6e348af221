# services/linking_service.py
"""
Account Linking Service - Stripe Connect Express onboarding.

start():    new random state -> session, returns the Stripe authorize URL
complete(): state check (CSRF) -> code exchange -> store the connected account id

The state token is the only CSRF defense of the redirect round trip: it is
unguessable, compared by exact equality, and consumed by the caller before
complete() runs so it can never be replayed.
"""
import logging
import secrets
from typing import MutableMapping, Optional
from urllib.parse import urlencode

from sqlalchemy.orm import Session

import config
from errors import CsrfMismatchError, NotOnboardedError
from models import Ambassador
from services.ledger_service import LedgerService

logger = logging.getLogger(__name__)

LINK_STATE_KEY = "link_state"


def generate_link_state() -> str:
     return secrets.token_urlsafe(32)


def states_match(returned_state: Optional[str], stored_state: Optional[str]) -> bool:
     """Exact, constant-time comparison. A missing value never matches."""
     if not returned_state or not stored_state:
          return False
     return secrets.compare_digest(returned_state.encode("utf-8"), stored_state.encode("utf-8"))


class AccountLinkingService:
     """Binds an ambassador to a Stripe connected account."""

     def __init__(
          self,
          processor,
          client_id: Optional[str] = None,
          authorize_uri: Optional[str] = None,
          redirect_uri: Optional[str] = None,
     ):
          self.processor = processor
          self.client_id = client_id or config.STRIPE_CLIENT_ID
          self.authorize_uri = authorize_uri or config.STRIPE_AUTHORIZE_URI
          self.redirect_uri = redirect_uri or f"{config.PUBLIC_DOMAIN}/api/link/callback"

     def start(self, ambassador: Ambassador, session: MutableMapping) -> str:
          """
          Generate a fresh link state, keep it in the session and return the
          Stripe authorize URL (client id, state, redirect and prefill fields).
          """
          ambassador.ensure_can_link_payouts()

          state = generate_link_state()
          session[LINK_STATE_KEY] = state

          parameters = {
               "client_id": self.client_id,
               "state": state,
               "redirect_uri": self.redirect_uri,
          }
          # The Express onboarding form accepts these as prefill values
          prefill = {
               "stripe_user[first_name]": ambassador.first_name,
               "stripe_user[last_name]": ambassador.last_name,
               "stripe_user[email]": ambassador.email,
          }
          parameters.update({k: v for k, v in prefill.items() if v})

          logger.info("Starting Express onboarding for ambassador id=%s", ambassador.id)
          return f"{self.authorize_uri}?{urlencode(parameters)}"

     def complete(
          self,
          db: Session,
          ambassador: Ambassador,
          returned_state: Optional[str],
          auth_code: Optional[str],
          stored_state: Optional[str],
     ) -> Ambassador:
          """
          Finish the onboarding round trip.

          Raises:
               CsrfMismatchError: returned state differs from the stored one
                    (the processor is not called)
               ExchangeError: Stripe rejected the code; nothing is persisted
          """
          if not states_match(returned_state, stored_state):
               logger.warning("Link state mismatch for ambassador id=%s", ambassador.id)
               raise CsrfMismatchError("Account linking state does not match")

          stripe_account_id = self.processor.exchange_code(auth_code)
          LedgerService.set_payout_destination(db, ambassador, stripe_account_id)
          logger.info("Linked ambassador id=%s to a Stripe account", ambassador.id)
          return ambassador

     def dashboard_link(self, ambassador: Ambassador, account_tab: bool = False) -> str:
          """Single-use login link to the ambassador's Express dashboard."""
          if not ambassador.is_onboarded:
               raise NotOnboardedError("Ambassador has no linked payout account")
          url = self.processor.create_login_link(ambassador.stripe_account_id)
          if account_tab:
               url = url + "#/account"
          return url
