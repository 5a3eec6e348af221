# services/payout_service.py
"""
Payout Trigger - instant payout of an ambassador's available balance.

Best effort: processor failures are logged and the caller gets None back
instead of an exception, so the calling flow always continues.
"""
import logging
from typing import Optional

import config
from errors import NotOnboardedError, ProcessorError
from models import Ambassador
from services.stripe_service import PayoutResult

logger = logging.getLogger(__name__)


class PayoutTrigger:

     def __init__(self, processor, statement_descriptor: Optional[str] = None):
          self.processor = processor
          self.statement_descriptor = statement_descriptor or config.APP_NAME

     def payout(self, ambassador: Ambassador) -> Optional[PayoutResult]:
          if not ambassador.is_onboarded:
               raise NotOnboardedError("Ambassador has no linked payout account")

          try:
               balance = self.processor.retrieve_balance(ambassador.stripe_account_id)
               available = balance.first_available()
               if available is None or available.amount <= 0:
                    logger.info("No available balance to pay out for ambassador id=%s", ambassador.id)
                    return None

               result = self.processor.create_payout(
                    ambassador.stripe_account_id,
                    amount=available.amount,
                    currency=available.currency,
                    statement_descriptor=self.statement_descriptor,
               )
          except ProcessorError as e:
               # TODO: decide with product whether payout failures should reach the ambassador
               logger.error("Payout failed for ambassador id=%s: %s", ambassador.id, e.message)
               return None

          logger.info(
               "Created payout %s of %s %s for ambassador id=%s",
               result.payout_id, result.amount, result.currency, ambassador.id,
          )
          return result
