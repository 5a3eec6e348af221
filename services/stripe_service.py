# services/stripe_service.py
"""
Stripe Connect adapter.

Every call the marketplace makes to the payment processor goes through
StripeProcessor so that:
- stripe.StripeError / transport failures surface as ProcessorError
- callers get plain values (ids, amounts) instead of Stripe objects
- tests can swap the whole processor for a mock

All amounts are integers in minor currency units (cents).
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

import requests
import stripe

import config
from errors import ExchangeError, ProcessorError

logger = logging.getLogger(__name__)


@dataclass
class BalanceEntry:
     amount: int
     currency: str


@dataclass
class Balance:
     available: List[BalanceEntry]
     pending: List[BalanceEntry]

     def first_available(self) -> Optional[BalanceEntry]:
          # This demo only settles in one currency, so the first entry is the balance
          return self.available[0] if self.available else None

     def first_pending(self) -> Optional[BalanceEntry]:
          return self.pending[0] if self.pending else None


@dataclass
class ChargeResult:
     charge_id: str
     transfer_id: str


@dataclass
class PayoutResult:
     payout_id: str
     amount: int
     currency: str
     status: Optional[str] = None


class StripeProcessor:
     """Thin wrapper around the Stripe SDK and the Connect OAuth token endpoint."""

     def __init__(
          self,
          secret_key: Optional[str] = None,
          client_id: Optional[str] = None,
          token_uri: Optional[str] = None,
          timeout: Optional[int] = None,
     ):
          self.secret_key = secret_key or config.STRIPE_SECRET_KEY
          self.client_id = client_id or config.STRIPE_CLIENT_ID
          self.token_uri = token_uri or config.STRIPE_TOKEN_URI
          self.timeout = timeout or config.PROCESSOR_TIMEOUT

          if self.secret_key:
               stripe.api_key = self.secret_key
               if self.secret_key.startswith("sk_test_"):
                    logger.info("Stripe initialized in test mode")
               else:
                    logger.warning("Stripe initialized in live mode")
          else:
               logger.warning("No Stripe API key configured - processor calls will fail")

     def _call(self, operation: str, fn, *args, **kwargs):
          try:
               return fn(*args, **kwargs)
          except stripe.StripeError as e:
               message = getattr(e, "user_message", None) or str(e)
               logger.error("Stripe %s failed: %s", operation, message)
               raise ProcessorError(message) from e

     def create_customer(self, email: str, description: Optional[str] = None) -> str:
          customer = self._call(
               "customers.create",
               stripe.Customer.create,
               email=email,
               description=description,
          )
          return customer.id

     def retrieve_balance(self, account_id: str) -> Balance:
          balance = self._call(
               "balance.retrieve",
               stripe.Balance.retrieve,
               stripe_account=account_id,
          )
          return Balance(
               available=[BalanceEntry(b.amount, b.currency) for b in (balance.available or [])],
               pending=[BalanceEntry(b.amount, b.currency) for b in (balance.pending or [])],
          )

     def create_charge(
          self,
          amount: int,
          currency: str,
          destination: str,
          metadata: dict,
          description: Optional[str] = None,
          customer: Optional[str] = None,
          source: Optional[str] = None,
     ) -> ChargeResult:
          """
          Single-step charge with destination: the platform charges the payer and
          Stripe transfers the funds to the connected account in the same call.
          """
          params = {
               "amount": amount,
               "currency": currency,
               "description": description,
               "metadata": metadata,
               "transfer_data": {"destination": destination},
          }
          # A raw source token (test mode) cannot be combined with a customer
          if source:
               params["source"] = source
          elif customer:
               params["customer"] = customer
          charge = self._call("charges.create", stripe.Charge.create, **params)

          transfer = getattr(charge, "transfer", None)
          if transfer is not None and not isinstance(transfer, str):
               transfer = transfer.id
          return ChargeResult(charge_id=charge.id, transfer_id=transfer or charge.id)

     def create_payout(
          self,
          account_id: str,
          amount: int,
          currency: str,
          statement_descriptor: Optional[str] = None,
     ) -> PayoutResult:
          payout = self._call(
               "payouts.create",
               stripe.Payout.create,
               amount=amount,
               currency=currency,
               statement_descriptor=statement_descriptor,
               stripe_account=account_id,
          )
          return PayoutResult(
               payout_id=payout.id,
               amount=amount,
               currency=currency,
               status=getattr(payout, "status", None),
          )

     def create_login_link(self, account_id: str) -> str:
          # Stripe no longer accepts redirect_url on login links; the Express
          # dashboard returns to the platform through its own account settings
          login_link = self._call(
               "accounts.createLoginLink",
               stripe.Account.create_login_link,
               account_id,
          )
          return login_link.url

     def exchange_code(self, code: str) -> str:
          """
          Post the OAuth authorization code to Stripe and return the connected
          account id (``stripe_user_id``).

          Raises:
               ExchangeError: error payload, missing account id, or transport failure
          """
          try:
               response = requests.post(
                    self.token_uri,
                    data={
                         "grant_type": "authorization_code",
                         "client_id": self.client_id,
                         "client_secret": self.secret_key,
                         "code": code,
                    },
                    timeout=self.timeout,
               )
               payload = response.json()
          except (requests.RequestException, ValueError) as e:
               logger.error("Stripe token exchange request failed: %s", e)
               raise ExchangeError("Could not reach the Stripe token endpoint") from e

          if payload.get("error"):
               message = payload.get("error_description") or payload["error"]
               logger.error("Stripe token exchange rejected: %s", message)
               raise ExchangeError(message)

          account_id = payload.get("stripe_user_id")
          if not account_id:
               raise ExchangeError("Stripe token response did not include an account id")
          return account_id


_processor: Optional[StripeProcessor] = None


def get_processor() -> StripeProcessor:
     """FastAPI dependency returning the shared processor."""
     global _processor
     if _processor is None:
          _processor = StripeProcessor()
     return _processor
