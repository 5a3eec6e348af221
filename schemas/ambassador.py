# schemas/ambassador.py
"""
Pydantic schemas for ambassador signup, login and dashboard.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from .contract import ContractResponse


class SignupRequest(BaseModel):
     """Account step of the signup: email and password, names optional."""
     email: str = Field(..., min_length=3, max_length=255)
     password: str = Field(..., min_length=1, max_length=72)
     first_name: Optional[str] = Field(None, max_length=100)
     last_name: Optional[str] = Field(None, max_length=100)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "email": "jenny@example.com",
                    "password": "s3cret-pass",
               }
          }
     )


class ProfileUpdate(BaseModel):
     """Profile step of the signup (also used for later edits)."""
     first_name: str = Field(..., min_length=1, max_length=100)
     last_name: str = Field(..., min_length=1, max_length=100)
     email: Optional[str] = Field(None, min_length=3, max_length=255)
     password: Optional[str] = Field(None, min_length=1, max_length=72)


class LoginRequest(BaseModel):
     email: str
     password: str


class AmbassadorResponse(BaseModel):
     id: int
     email: str
     first_name: Optional[str] = None
     last_name: Optional[str] = None
     onboarding_step: str
     payouts_enabled: bool
     created_at: datetime

     @classmethod
     def from_model(cls, ambassador) -> "AmbassadorResponse":
          return cls(
               id=ambassador.id,
               email=ambassador.email,
               first_name=ambassador.first_name,
               last_name=ambassador.last_name,
               onboarding_step=ambassador.onboarding_step.value,
               payouts_enabled=ambassador.is_onboarded,
               created_at=ambassador.created_at,
          )


class TokenResponse(BaseModel):
     token: str
     ambassador: AmbassadorResponse


class SignupStepResponse(BaseModel):
     step: str
     display_name: str = ""


class DashboardResponse(BaseModel):
     ambassador: AmbassadorResponse
     balance_available: int = 0
     balance_pending: int = 0
     contracts_total_amount: int = 0
     contracts: List[ContractResponse] = []
     show_banner: bool = False
