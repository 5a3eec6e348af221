# schemas/contract.py
"""
Pydantic schemas for Contract API request/response validation.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class ContractCreate(BaseModel):
     """
     Schema for creating a contract.

     When ambassador_email is omitted the latest onboarded ambassador is used;
     when brand_name is omitted the latest brand is used.
     """
     ambassador_email: Optional[str] = Field(None, description="Ambassador receiving the contract")
     brand_name: Optional[str] = Field(None, description="Brand paying for the contract")
     post_link: str = Field(..., min_length=1, max_length=500, description="Link to the promoted post")
     amount: int = Field(..., gt=0, description="Amount in minor currency units (cents)")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "ambassador_email": "jenny@example.com",
                    "brand_name": "Gucci (US)",
                    "post_link": "https://www.instagram.com/p/CCrR7dtA3Ul/",
                    "amount": 5000,
               }
          }
     )


class ContractResponse(BaseModel):
     """Schema for contract response."""
     id: int
     ambassador_id: int
     brand_id: int
     brand_name: Optional[str] = None
     post_link: str
     amount: int
     accepted: bool
     status: str
     stripe_charge_id: Optional[str] = None
     stripe_transfer_id: Optional[str] = None
     created_at: datetime

     @classmethod
     def from_model(cls, contract) -> "ContractResponse":
          return cls(
               id=contract.id,
               ambassador_id=contract.ambassador_id,
               brand_id=contract.brand_id,
               brand_name=contract.brand.display_name() if contract.brand else None,
               post_link=contract.post_link,
               amount=contract.amount,
               accepted=contract.accepted,
               status=contract.status.value,
               stripe_charge_id=contract.stripe_charge_id,
               stripe_transfer_id=contract.stripe_transfer_id,
               created_at=contract.created_at,
          )
