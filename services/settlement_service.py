# services/settlement_service.py
"""
Settlement Engine - drives a contract from PENDING to SETTLED.

accept_contract():
1. Load the contract and its ambassador (NotFound / NotOnboarded)
2. Claim the contract: PENDING|FAILED -> SETTLING, committed before any
   money moves, so two concurrent acceptances cannot both charge
3. Make sure the brand has a Stripe customer
4. One charge with destination to the ambassador's connected account,
   tagged with the contract id
5. Success -> SETTLED + accepted + Stripe ids; failure -> FAILED with the
   processor message, then the ProcessorError is re-raised

No automatic retry: a FAILED contract is settled again only when the caller
accepts it again.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

import config
from errors import NotFoundError, NotOnboardedError, ProcessorError
from models import Contract
from services.ledger_service import LedgerService

logger = logging.getLogger(__name__)


class SettlementEngine:
     """Charges the brand and routes the funds to the ambassador in one step."""

     def __init__(
          self,
          processor,
          currency: Optional[str] = None,
          charge_source: Optional[str] = None,
     ):
          self.processor = processor
          self.currency = currency or config.SETTLEMENT_CURRENCY
          self.charge_source = charge_source if charge_source is not None else config.STRIPE_CHARGE_SOURCE

     def create_contract(
          self,
          db: Session,
          ambassador_id: int,
          brand_id: int,
          post_link: str,
          amount: int,
     ) -> Contract:
          """Insert a PENDING contract; nothing is charged."""
          return LedgerService.create_contract(db, ambassador_id, brand_id, post_link, amount)

     def accept_contract(self, db: Session, contract_id: int) -> Contract:
          """
          Accept a contract and settle it.

          Raises:
               NotFoundError: contract or ambassador missing
               NotOnboardedError: ambassador has no payout destination
               AlreadySettledError / SettlementInProgressError: claim refused
               ProcessorError: the charge failed (contract left FAILED)
          """
          contract = LedgerService.get_contract(db, contract_id)
          ambassador = contract.ambassador
          if ambassador is None:
               raise NotFoundError(f"Ambassador for contract {contract_id} not found")
          if not ambassador.is_onboarded:
               raise NotOnboardedError(
                    f"Ambassador {ambassador.id} has not linked a payout account"
               )
          destination = ambassador.stripe_account_id

          if contract.brand is None:
               raise NotFoundError(f"Brand for contract {contract_id} not found")

          LedgerService.claim_for_settlement(db, contract)
          logger.info("Settling contract id=%s amount=%s", contract.id, contract.amount)

          try:
               # Only the request holding the claim provisions the brand customer
               customer_id = LedgerService.ensure_brand_customer(db, contract.brand, self.processor)
               charge = self.processor.create_charge(
                    amount=contract.amount,
                    currency=self.currency,
                    destination=destination,
                    metadata={"contract_id": str(contract.id)},
                    description=contract.post_link,
                    customer=customer_id,
                    source=self.charge_source,
               )
          except ProcessorError as e:
               LedgerService.record_settlement_failure(db, contract, e.message)
               logger.warning("Settlement failed for contract id=%s: %s", contract.id, e.message)
               raise
          except Exception:
               # Leave a visible FAILED record instead of a contract stuck in SETTLING
               LedgerService.record_settlement_failure(db, contract, "Unexpected settlement error")
               raise

          LedgerService.record_settlement(db, contract, charge.charge_id, charge.transfer_id)
          logger.info("Settled contract id=%s charge=%s", contract.id, charge.charge_id)
          return contract
