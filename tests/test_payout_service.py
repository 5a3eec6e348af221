"""Payout trigger: best-effort instant payout of the available balance."""

import pytest

from errors import NotOnboardedError, ProcessorError
from services.payout_service import PayoutTrigger
from services.stripe_service import Balance, BalanceEntry


@pytest.fixture
def trigger(processor):
    return PayoutTrigger(processor, statement_descriptor="Tribe Ambassadors")


def test_pays_out_available_balance(trigger, onboarded_ambassador, processor):
    result = trigger.payout(onboarded_ambassador)

    assert result.payout_id == "po_test_123"
    processor.retrieve_balance.assert_called_once_with("acct_test_123")
    processor.create_payout.assert_called_once_with(
        "acct_test_123",
        amount=5000,
        currency="usd",
        statement_descriptor="Tribe Ambassadors",
    )


@pytest.mark.parametrize("available", [[], [BalanceEntry(amount=0, currency="usd")]])
def test_empty_balance_skips_payout(trigger, onboarded_ambassador, processor, available):
    processor.retrieve_balance.return_value = Balance(available=available, pending=[])

    assert trigger.payout(onboarded_ambassador) is None
    processor.create_payout.assert_not_called()


def test_processor_error_is_swallowed(trigger, onboarded_ambassador, processor, caplog):
    processor.create_payout.side_effect = ProcessorError("Insufficient funds")

    assert trigger.payout(onboarded_ambassador) is None
    assert "Insufficient funds" in caplog.text


def test_balance_error_is_swallowed(trigger, onboarded_ambassador, processor):
    processor.retrieve_balance.side_effect = ProcessorError("Account not found")

    assert trigger.payout(onboarded_ambassador) is None
    processor.create_payout.assert_not_called()


def test_requires_onboarding(trigger, ambassador, processor):
    with pytest.raises(NotOnboardedError):
        trigger.payout(ambassador)
    processor.retrieve_balance.assert_not_called()
