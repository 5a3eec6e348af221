# models/__init__.py
from .base import Base
from .ambassador import Ambassador, OnboardingStep
from .brand import Brand
from .contract import Contract, ContractStatus

__all__ = [
     "Base",
     "Ambassador",
     "OnboardingStep",
     "Brand",
     "Contract",
     "ContractStatus",
]
