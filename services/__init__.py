# services/__init__.py
from .ledger_service import LedgerService, DEFAULT_BRANDS
from .stripe_service import StripeProcessor, get_processor
from .linking_service import AccountLinkingService, LINK_STATE_KEY
from .settlement_service import SettlementEngine
from .payout_service import PayoutTrigger

__all__ = [
     "LedgerService",
     "DEFAULT_BRANDS",
     "StripeProcessor",
     "get_processor",
     "AccountLinkingService",
     "LINK_STATE_KEY",
     "SettlementEngine",
     "PayoutTrigger",
]
