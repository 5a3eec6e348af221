# models/brand.py
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from .base import Base, utcnow


class Brand(Base):
     """
     Brand model - the payer charged when an ambassador accepts a contract.

     ``stripe_customer_id`` is created lazily the first time the brand is
     needed for a charge.
     """

     id = Column(Integer, primary_key=True, autoincrement=True)
     client_email = Column(String(255), unique=True, nullable=False, index=True)
     routing_email = Column(String(255), nullable=False)
     name = Column(String(255), nullable=True, index=True)

     # Stripe customer ID storing the payment sources
     stripe_customer_id = Column(String(255), nullable=True)

     created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

     contracts = relationship("Contract", back_populates="brand")

     def __repr__(self):
          return f"<Brand(id={self.id}, name='{self.name}')>"

     def display_name(self) -> str:
          return self.name
