# services/ledger_service.py
"""
Contract Ledger - the only writer of ambassadors, brands and contracts.

Enforces the entity invariants:
- ambassador email and brand client email are unique (exact, case-sensitive match)
- a contract references an existing ambassador and brand, has a post link
  and a positive amount in minor units
- a brand gets a Stripe customer before it can be charged
- the settling transition is a conditional UPDATE, so only one request can
  move a contract from PENDING/FAILED to SETTLING

Methods flush but do not commit; the caller owns the transaction, except
for the settlement transitions, which must be visible to concurrent requests
before the processor is called.
"""
import logging
import random
from datetime import timedelta
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from errors import (
     AlreadySettledError,
     NotFoundError,
     SettlementInProgressError,
     ValidationError,
)
from models import Ambassador, Brand, Contract, ContractStatus
from models.base import utcnow
from models.contract import SETTLEABLE_STATUSES

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "This email already exists. Please try to log in instead."

# Brands created when the platform has none, so contracts can be simulated
DEFAULT_BRANDS = [
     {
          "client_email": "bozotheclient@abh.com",
          "routing_email": "bozo@tribedynamics.com",
          "name": "Anastasia Beverley Hills",
     },
     {
          "client_email": "gonzotheclient@gucci.com",
          "routing_email": "gonzo@tribedynamics.com",
          "name": "Gucci (US)",
     },
     {
          "client_email": "gonzotheclient@gucciuk.com",
          "routing_email": "gonzo@tribedynamics.com",
          "name": "Gucci (UK)",
     },
]


class LedgerService:
     """Entity store operations for the marketplace."""

     # ------------------------------------------------------------------
     # Ambassadors
     # ------------------------------------------------------------------

     @staticmethod
     def find_ambassador_by_email(db: Session, email: str) -> Optional[Ambassador]:
          return db.query(Ambassador).filter(Ambassador.email == email).first()

     @staticmethod
     def get_ambassador(db: Session, ambassador_id: int) -> Ambassador:
          ambassador = db.query(Ambassador).filter(Ambassador.id == ambassador_id).first()
          if not ambassador:
               raise NotFoundError(f"Ambassador with ID {ambassador_id} not found")
          return ambassador

     @staticmethod
     def create_ambassador(
          db: Session,
          email: str,
          password: str,
          first_name: Optional[str] = None,
          last_name: Optional[str] = None,
     ) -> Ambassador:
          """
          Create an ambassador account (onboarding step ACCOUNT done).

          Raises:
               ValidationError: missing email/password or email already used
          """
          if not email:
               raise ValidationError("Email is required")
          if LedgerService.find_ambassador_by_email(db, email):
               raise ValidationError(DUPLICATE_EMAIL_MESSAGE)

          ambassador = Ambassador(email=email, first_name=first_name, last_name=last_name)
          ambassador.password = password
          db.add(ambassador)
          LedgerService._flush_unique(db, DUPLICATE_EMAIL_MESSAGE)
          logger.info("Created ambassador id=%s", ambassador.id)
          return ambassador

     @staticmethod
     def update_ambassador_profile(
          db: Session,
          ambassador: Ambassador,
          first_name: Optional[str] = None,
          last_name: Optional[str] = None,
          email: Optional[str] = None,
          password: Optional[str] = None,
     ) -> Ambassador:
          """
          Update profile fields and advance onboarding from PROFILE to PAYOUT.

          The password is rehashed only when a new one is supplied.
          """
          if email and email != ambassador.email:
               if LedgerService.find_ambassador_by_email(db, email):
                    raise ValidationError(DUPLICATE_EMAIL_MESSAGE)
               ambassador.email = email
          if first_name is not None:
               ambassador.first_name = first_name
          if last_name is not None:
               ambassador.last_name = last_name
          if password:
               ambassador.password = password

          ambassador.complete_profile()
          LedgerService._flush_unique(db, DUPLICATE_EMAIL_MESSAGE)
          return ambassador

     @staticmethod
     def set_payout_destination(db: Session, ambassador: Ambassador, stripe_account_id: str) -> Ambassador:
          ambassador.complete_payout_link(stripe_account_id)
          db.flush()
          return ambassador

     @staticmethod
     def get_first_onboarded(db: Session) -> Optional[Ambassador]:
          return (
               db.query(Ambassador)
               .filter(Ambassador.stripe_account_id.isnot(None))
               .order_by(Ambassador.created_at.asc(), Ambassador.id.asc())
               .first()
          )

     @staticmethod
     def get_latest_onboarded(db: Session) -> Optional[Ambassador]:
          return (
               db.query(Ambassador)
               .filter(Ambassador.stripe_account_id.isnot(None))
               .order_by(Ambassador.created_at.desc(), Ambassador.id.desc())
               .first()
          )

     @staticmethod
     def list_recent_contracts(db: Session, ambassador: Ambassador, days: int = 30) -> List[Contract]:
          """Contracts from the past ``days`` days, newest first, with the brand loaded."""
          since = utcnow() - timedelta(days=days)
          return (
               db.query(Contract)
               .options(joinedload(Contract.brand))
               .filter(Contract.ambassador_id == ambassador.id, Contract.created_at >= since)
               .order_by(Contract.created_at.desc(), Contract.id.desc())
               .all()
          )

     # ------------------------------------------------------------------
     # Brands
     # ------------------------------------------------------------------

     @staticmethod
     def get_brand(db: Session, brand_id: int) -> Brand:
          brand = db.query(Brand).filter(Brand.id == brand_id).first()
          if not brand:
               raise NotFoundError(f"Brand with ID {brand_id} not found")
          return brand

     @staticmethod
     def find_brand_by_name(db: Session, name: str) -> Optional[Brand]:
          return db.query(Brand).filter(Brand.name == name).first()

     @staticmethod
     def create_brand(
          db: Session,
          client_email: str,
          routing_email: str,
          name: Optional[str] = None,
          processor=None,
     ) -> Brand:
          """
          Create a brand. When a processor is given, the Stripe customer is
          provisioned right away; otherwise on first charge.
          """
          if not client_email or not routing_email:
               raise ValidationError("Client email and routing email are required")
          if db.query(Brand).filter(Brand.client_email == client_email).first():
               raise ValidationError(f"A brand with client email {client_email} already exists")

          brand = Brand(client_email=client_email, routing_email=routing_email, name=name)
          if processor is not None:
               brand.stripe_customer_id = processor.create_customer(
                    email=brand.client_email,
                    description=brand.display_name(),
               )
          db.add(brand)
          LedgerService._flush_unique(db, f"A brand with client email {client_email} already exists")
          return brand

     @staticmethod
     def ensure_brand_customer(db: Session, brand: Brand, processor) -> str:
          """Return the brand's Stripe customer id, creating the customer if needed."""
          if not brand.stripe_customer_id:
               brand.stripe_customer_id = processor.create_customer(
                    email=brand.client_email,
                    description=brand.display_name(),
               )
               db.flush()
               logger.info("Provisioned Stripe customer for brand id=%s", brand.id)
          return brand.stripe_customer_id

     @staticmethod
     def insert_default_brands(db: Session, processor) -> List[Brand]:
          """Create the demo brands, each with its own Stripe customer."""
          brands = [
               LedgerService.create_brand(db, processor=processor, **data)
               for data in DEFAULT_BRANDS
          ]
          logger.info("Inserted %d default brands", len(brands))
          return brands

     @staticmethod
     def get_latest_brand(db: Session, processor) -> Brand:
          if db.query(Brand).count() == 0:
               LedgerService.insert_default_brands(db, processor)
          return db.query(Brand).order_by(Brand.created_at.desc(), Brand.id.desc()).first()

     @staticmethod
     def get_random_brand(db: Session, processor) -> Brand:
          count = db.query(Brand).count()
          if count == 0:
               LedgerService.insert_default_brands(db, processor)
               count = db.query(Brand).count()
          # Skip a random number of rows
          offset = random.randrange(count)
          return db.query(Brand).order_by(Brand.id).offset(offset).first()

     # ------------------------------------------------------------------
     # Contracts
     # ------------------------------------------------------------------

     @staticmethod
     def get_contract(db: Session, contract_id: int) -> Contract:
          contract = db.query(Contract).filter(Contract.id == contract_id).first()
          if not contract:
               raise NotFoundError(f"Contract with ID {contract_id} not found")
          return contract

     @staticmethod
     def create_contract(
          db: Session,
          ambassador_id: int,
          brand_id: int,
          post_link: str,
          amount: int,
     ) -> Contract:
          """
          Insert a new PENDING contract. No settlement side effects.

          Raises:
               NotFoundError: unknown ambassador or brand
               ValidationError: empty post link or non-positive amount
          """
          if not post_link:
               raise ValidationError("Post link is required")
          if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
               raise ValidationError("Amount must be a positive integer in minor units")
          LedgerService.get_ambassador(db, ambassador_id)
          LedgerService.get_brand(db, brand_id)

          contract = Contract(
               ambassador_id=ambassador_id,
               brand_id=brand_id,
               post_link=post_link,
               amount=amount,
               accepted=False,
               status=ContractStatus.PENDING,
          )
          db.add(contract)
          db.flush()
          logger.info(
               "Created contract id=%s ambassador_id=%s brand_id=%s amount=%s",
               contract.id, ambassador_id, brand_id, amount,
          )
          return contract

     @staticmethod
     def claim_for_settlement(db: Session, contract: Contract) -> Contract:
          """
          Atomically move the contract from PENDING/FAILED to SETTLING and commit.

          Raises:
               AlreadySettledError: the contract is SETTLED
               SettlementInProgressError: another request holds the SETTLING claim
          """
          claimed = (
               db.query(Contract)
               .filter(Contract.id == contract.id, Contract.status.in_(SETTLEABLE_STATUSES))
               .update({Contract.status: ContractStatus.SETTLING}, synchronize_session=False)
          )
          db.commit()
          db.refresh(contract)
          if claimed != 1:
               if contract.status == ContractStatus.SETTLED:
                    raise AlreadySettledError(f"Contract {contract.id} is already settled")
               raise SettlementInProgressError(f"Contract {contract.id} is already being settled")
          return contract

     @staticmethod
     def record_settlement(db: Session, contract: Contract, charge_id: str, transfer_id: str) -> Contract:
          contract.mark_settled(charge_id, transfer_id)
          db.commit()
          return contract

     @staticmethod
     def record_settlement_failure(db: Session, contract: Contract, message: str) -> Contract:
          contract.mark_failed(message)
          db.commit()
          return contract

     # ------------------------------------------------------------------

     @staticmethod
     def _flush_unique(db: Session, message: str) -> None:
          try:
               db.flush()
          except IntegrityError as e:
               db.rollback()
               raise ValidationError(message) from e
