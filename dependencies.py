"""
FastAPI dependency providers for the marketplace services.

Everything hangs off get_processor, so tests can override that one
dependency to run the whole stack against a fake processor.
"""
from fastapi import Depends

from services.linking_service import AccountLinkingService
from services.payout_service import PayoutTrigger
from services.settlement_service import SettlementEngine
from services.stripe_service import StripeProcessor, get_processor


def get_linking_service(processor: StripeProcessor = Depends(get_processor)) -> AccountLinkingService:
    return AccountLinkingService(processor)


def get_settlement_engine(processor: StripeProcessor = Depends(get_processor)) -> SettlementEngine:
    return SettlementEngine(processor)


def get_payout_trigger(processor: StripeProcessor = Depends(get_processor)) -> PayoutTrigger:
    return PayoutTrigger(processor)
