# models/contract.py
import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .base import Base, utcnow


class ContractStatus(str, enum.Enum):
     """
     Settlement state of a contract.

     FAILED means the last settlement attempt was rejected by the processor;
     the contract is still unaccepted and may be settled again.
     """
     PENDING = "PENDING"
     SETTLING = "SETTLING"
     SETTLED = "SETTLED"
     FAILED = "FAILED"


# States from which acceptance may start a settlement
SETTLEABLE_STATUSES = (ContractStatus.PENDING, ContractStatus.FAILED)


class Contract(Base):
     """
     Contract model - a promoted post an ambassador does for a brand, paid on acceptance.
     """

     id = Column(Integer, primary_key=True, autoincrement=True)

     # Foreign keys
     ambassador_id = Column(
          Integer,
          ForeignKey("ambassadors.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     brand_id = Column(
          Integer,
          ForeignKey("brands.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )

     # Contract details
     post_link = Column(String(500), nullable=False)
     amount = Column(Integer, nullable=False)  # minor currency units
     accepted = Column(Boolean, default=False, nullable=False)
     status = Column(
          Enum(ContractStatus, name="contract_status", create_constraint=True),
          default=ContractStatus.PENDING,
          nullable=False,
          index=True
     )

     # Stripe references, set once settlement succeeds
     stripe_charge_id = Column(String(255), nullable=True)
     stripe_transfer_id = Column(String(255), nullable=True)
     last_error = Column(String(500), nullable=True)

     created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

     # Relationships
     ambassador = relationship("Ambassador", back_populates="contracts")
     brand = relationship("Brand", back_populates="contracts")

     def __repr__(self):
          return f"<Contract(id={self.id}, amount={self.amount}, status='{self.status}')>"

     def mark_settled(self, charge_id: str, transfer_id: str) -> None:
          self.stripe_charge_id = charge_id
          self.stripe_transfer_id = transfer_id
          self.accepted = True
          self.status = ContractStatus.SETTLED
          self.last_error = None

     def mark_failed(self, message: str) -> None:
          self.accepted = False
          self.stripe_transfer_id = None
          self.status = ContractStatus.FAILED
          self.last_error = (message or "")[:500]
