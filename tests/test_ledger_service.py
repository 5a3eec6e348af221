"""Contract ledger: entity invariants and settlement claims."""

import pytest

from errors import (
    AlreadySettledError,
    NotFoundError,
    SettlementInProgressError,
    ValidationError,
)
from models import Brand, ContractStatus, OnboardingStep
from services.ledger_service import DEFAULT_BRANDS, DUPLICATE_EMAIL_MESSAGE, LedgerService


class TestAmbassadors:
    def test_create_ambassador_hashes_password(self, db_session):
        ambassador = LedgerService.create_ambassador(db_session, "a@example.com", "pw-123456")

        assert ambassador.id is not None
        assert ambassador.password_hash != "pw-123456"
        assert ambassador.validate_password("pw-123456")
        assert ambassador.onboarding_step == OnboardingStep.PROFILE
        assert not ambassador.is_onboarded

    def test_duplicate_email_is_rejected(self, db_session, ambassador):
        with pytest.raises(ValidationError) as exc:
            LedgerService.create_ambassador(db_session, "jenny@example.com", "other")
        assert exc.value.message == DUPLICATE_EMAIL_MESSAGE

    def test_email_match_is_case_sensitive(self, db_session, ambassador):
        other = LedgerService.create_ambassador(db_session, "Jenny@example.com", "other")
        assert other.id != ambassador.id
        assert LedgerService.find_ambassador_by_email(db_session, "JENNY@EXAMPLE.COM") is None

    def test_saving_without_new_password_keeps_hash(self, db_session, ambassador):
        original_hash = ambassador.password_hash
        LedgerService.update_ambassador_profile(db_session, ambassador, first_name="Jen", last_name="Rosen")
        db_session.commit()

        assert ambassador.password_hash == original_hash
        assert ambassador.validate_password("s3cret-pass")

    def test_profile_update_with_password_rehashes(self, db_session, ambassador):
        original_hash = ambassador.password_hash
        LedgerService.update_ambassador_profile(
            db_session, ambassador, first_name="Jenny", last_name="Rosen", password="new-pass"
        )

        assert ambassador.password_hash != original_hash
        assert ambassador.validate_password("new-pass")
        assert not ambassador.validate_password("s3cret-pass")

    def test_profile_requires_both_names(self, db_session):
        ambassador = LedgerService.create_ambassador(db_session, "a@example.com", "pw")
        with pytest.raises(ValidationError):
            LedgerService.update_ambassador_profile(db_session, ambassador, first_name="Ann")
        assert ambassador.onboarding_step == OnboardingStep.PROFILE

    def test_profile_completion_moves_to_payout_step(self, db_session):
        ambassador = LedgerService.create_ambassador(db_session, "a@example.com", "pw")
        LedgerService.update_ambassador_profile(db_session, ambassador, first_name="Ann", last_name="Lee")
        assert ambassador.onboarding_step == OnboardingStep.PAYOUT

    def test_payout_link_requires_profile(self, db_session):
        ambassador = LedgerService.create_ambassador(db_session, "a@example.com", "pw")
        with pytest.raises(ValidationError):
            LedgerService.set_payout_destination(db_session, ambassador, "acct_1")
        assert ambassador.stripe_account_id is None

    def test_first_and_latest_onboarded(self, db_session):
        assert LedgerService.get_first_onboarded(db_session) is None

        accounts = []
        for i in range(3):
            a = LedgerService.create_ambassador(
                db_session, f"a{i}@example.com", "pw", first_name="A", last_name=str(i)
            )
            a.complete_profile()
            accounts.append(a)
        LedgerService.set_payout_destination(db_session, accounts[0], "acct_0")
        LedgerService.set_payout_destination(db_session, accounts[1], "acct_1")
        db_session.commit()

        assert LedgerService.get_first_onboarded(db_session).id == accounts[0].id
        assert LedgerService.get_latest_onboarded(db_session).id == accounts[1].id

    def test_get_unknown_ambassador(self, db_session):
        with pytest.raises(NotFoundError):
            LedgerService.get_ambassador(db_session, 999)


class TestBrands:
    def test_random_brand_seeds_defaults(self, db_session, processor):
        brand = LedgerService.get_random_brand(db_session, processor)

        assert brand is not None
        assert db_session.query(Brand).count() == len(DEFAULT_BRANDS)
        assert processor.create_customer.call_count == len(DEFAULT_BRANDS)

    def test_latest_brand_seeds_defaults_once(self, db_session, processor):
        first = LedgerService.get_latest_brand(db_session, processor)
        second = LedgerService.get_latest_brand(db_session, processor)

        assert first.id == second.id
        assert first.name == DEFAULT_BRANDS[-1]["name"]
        assert db_session.query(Brand).count() == len(DEFAULT_BRANDS)

    def test_duplicate_client_email(self, db_session, brand):
        with pytest.raises(ValidationError):
            LedgerService.create_brand(db_session, "client@brand.com", "x@brand.com")

    def test_ensure_brand_customer_is_lazy(self, db_session, brand, processor):
        assert brand.stripe_customer_id is None

        customer_id = LedgerService.ensure_brand_customer(db_session, brand, processor)
        LedgerService.ensure_brand_customer(db_session, brand, processor)

        assert customer_id == "cus_test_123"
        processor.create_customer.assert_called_once_with(
            email="client@brand.com", description="Test Brand"
        )


class TestContracts:
    def test_new_contract_is_pending(self, db_session, ambassador, brand):
        contract = LedgerService.create_contract(
            db_session, ambassador.id, brand.id, "https://instagram.com/p/1", 5000
        )

        assert contract.status == ContractStatus.PENDING
        assert contract.accepted is False
        assert contract.stripe_transfer_id is None

    @pytest.mark.parametrize("amount", [0, -100, True, 12.5])
    def test_invalid_amount(self, db_session, ambassador, brand, amount):
        with pytest.raises(ValidationError):
            LedgerService.create_contract(db_session, ambassador.id, brand.id, "https://x", amount)

    def test_empty_post_link(self, db_session, ambassador, brand):
        with pytest.raises(ValidationError):
            LedgerService.create_contract(db_session, ambassador.id, brand.id, "", 100)

    def test_unknown_references(self, db_session, ambassador, brand):
        with pytest.raises(NotFoundError):
            LedgerService.create_contract(db_session, 999, brand.id, "https://x", 100)
        with pytest.raises(NotFoundError):
            LedgerService.create_contract(db_session, ambassador.id, 999, "https://x", 100)

    def test_recent_contracts_newest_first(self, db_session, ambassador, brand):
        older = LedgerService.create_contract(db_session, ambassador.id, brand.id, "https://x/1", 100)
        newer = LedgerService.create_contract(db_session, ambassador.id, brand.id, "https://x/2", 200)
        db_session.commit()

        contracts = LedgerService.list_recent_contracts(db_session, ambassador)
        assert [c.id for c in contracts] == [newer.id, older.id]
        assert contracts[0].brand.name == "Test Brand"

    def test_claim_moves_to_settling_once(self, db_session, ambassador, brand):
        contract = LedgerService.create_contract(db_session, ambassador.id, brand.id, "https://x", 100)
        db_session.commit()

        LedgerService.claim_for_settlement(db_session, contract)
        assert contract.status == ContractStatus.SETTLING

        with pytest.raises(SettlementInProgressError):
            LedgerService.claim_for_settlement(db_session, contract)

    def test_claim_refuses_settled_contract(self, db_session, ambassador, brand):
        contract = LedgerService.create_contract(db_session, ambassador.id, brand.id, "https://x", 100)
        db_session.commit()
        LedgerService.claim_for_settlement(db_session, contract)
        LedgerService.record_settlement(db_session, contract, "ch_1", "tr_1")

        with pytest.raises(AlreadySettledError):
            LedgerService.claim_for_settlement(db_session, contract)

    def test_failed_contract_can_be_claimed_again(self, db_session, ambassador, brand):
        contract = LedgerService.create_contract(db_session, ambassador.id, brand.id, "https://x", 100)
        db_session.commit()
        LedgerService.claim_for_settlement(db_session, contract)
        LedgerService.record_settlement_failure(db_session, contract, "Your card was declined.")

        assert contract.status == ContractStatus.FAILED
        assert contract.accepted is False
        assert contract.last_error == "Your card was declined."

        LedgerService.claim_for_settlement(db_session, contract)
        assert contract.status == ContractStatus.SETTLING
