# schemas/__init__.py
from .contract import ContractCreate, ContractResponse
from .ambassador import (
     SignupRequest,
     ProfileUpdate,
     LoginRequest,
     AmbassadorResponse,
     TokenResponse,
     SignupStepResponse,
     DashboardResponse,
)
from .payout import PayoutResponse

__all__ = [
     "ContractCreate",
     "ContractResponse",
     "SignupRequest",
     "ProfileUpdate",
     "LoginRequest",
     "AmbassadorResponse",
     "TokenResponse",
     "SignupStepResponse",
     "DashboardResponse",
     "PayoutResponse",
]
