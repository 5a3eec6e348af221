# models/ambassador.py
import enum
from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.orm import relationship

from errors import ValidationError
from utils.passwords import hash_password, verify_password
from .base import Base, utcnow


class OnboardingStep(str, enum.Enum):
     """Next signup step the ambassador has to complete."""
     ACCOUNT = "ACCOUNT"
     PROFILE = "PROFILE"
     PAYOUT = "PAYOUT"
     COMPLETE = "COMPLETE"


class Ambassador(Base):
     """
     Ambassador model - the payee who fulfills contracts and receives settled funds.

     The plaintext password is never stored: assigning ``ambassador.password``
     hashes it once into ``password_hash``. Saving the row again without
     assigning a new password keeps the existing hash untouched.
     """

     id = Column(Integer, primary_key=True, autoincrement=True)
     email = Column(String(255), unique=True, nullable=False, index=True)
     password_hash = Column(String(255), nullable=False)
     first_name = Column(String(100), nullable=True)
     last_name = Column(String(100), nullable=True)
     onboarding_step = Column(
          Enum(OnboardingStep, name="onboarding_step", create_constraint=True),
          default=OnboardingStep.PROFILE,
          nullable=False,
     )

     # Stripe account ID to send payments obtained with Stripe Connect
     stripe_account_id = Column(String(255), nullable=True, index=True)

     # Timestamps
     created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

     # Relationships
     contracts = relationship("Contract", back_populates="ambassador")

     def __repr__(self):
          return f"<Ambassador(id={self.id}, email='{self.email}', step='{self.onboarding_step}')>"

     @property
     def password(self):
          raise AttributeError("password is write-only")

     @password.setter
     def password(self, plaintext: str) -> None:
          if not plaintext:
               raise ValidationError("Password is required")
          self.password_hash = hash_password(plaintext)

     def validate_password(self, plaintext: str) -> bool:
          return verify_password(plaintext, self.password_hash)

     def display_name(self) -> str:
          """Return an ambassador name for display."""
          return f"{self.first_name} {self.last_name}"

     @property
     def is_onboarded(self) -> bool:
          return bool(self.stripe_account_id)

     def complete_profile(self) -> None:
          """PROFILE -> PAYOUT once first and last name are both present."""
          if not self.first_name or not self.last_name:
               raise ValidationError("First and last name are required")
          if self.onboarding_step in (OnboardingStep.ACCOUNT, OnboardingStep.PROFILE):
               self.onboarding_step = OnboardingStep.PAYOUT

     def ensure_can_link_payouts(self) -> None:
          if self.onboarding_step not in (OnboardingStep.PAYOUT, OnboardingStep.COMPLETE):
               raise ValidationError("Complete your profile before setting up payouts")

     def complete_payout_link(self, stripe_account_id: str) -> None:
          """PAYOUT -> COMPLETE. Re-linking a completed ambassador replaces the destination."""
          self.ensure_can_link_payouts()
          self.stripe_account_id = stripe_account_id
          self.onboarding_step = OnboardingStep.COMPLETE
