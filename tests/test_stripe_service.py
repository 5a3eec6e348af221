"""Stripe adapter, with the SDK and the token endpoint patched out."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
import requests
import stripe

from errors import ExchangeError, ProcessorError
from services.stripe_service import StripeProcessor


@pytest.fixture
def stripe_processor():
    return StripeProcessor(
        secret_key="sk_test_123",
        client_id="ca_test",
        token_uri="https://connect.stripe.com/oauth/token",
        timeout=5,
    )


def _token_response(payload):
    response = MagicMock()
    response.json.return_value = payload
    return response


class TestExchangeCode:
    def test_returns_connected_account(self, stripe_processor):
        with patch("services.stripe_service.requests.post") as post:
            post.return_value = _token_response({"stripe_user_id": "acct_123", "access_token": "x"})
            assert stripe_processor.exchange_code("ac_123") == "acct_123"

        post.assert_called_once_with(
            "https://connect.stripe.com/oauth/token",
            data={
                "grant_type": "authorization_code",
                "client_id": "ca_test",
                "client_secret": "sk_test_123",
                "code": "ac_123",
            },
            timeout=5,
        )

    def test_error_payload(self, stripe_processor):
        with patch("services.stripe_service.requests.post") as post:
            post.return_value = _token_response(
                {"error": "invalid_grant", "error_description": "Authorization code expired"}
            )
            with pytest.raises(ExchangeError) as exc:
                stripe_processor.exchange_code("ac_old")
        assert exc.value.message == "Authorization code expired"

    def test_missing_account_id(self, stripe_processor):
        with patch("services.stripe_service.requests.post") as post:
            post.return_value = _token_response({})
            with pytest.raises(ExchangeError):
                stripe_processor.exchange_code("ac_123")

    def test_transport_failure(self, stripe_processor):
        with patch("services.stripe_service.requests.post", side_effect=requests.ConnectionError("down")):
            with pytest.raises(ExchangeError):
                stripe_processor.exchange_code("ac_123")


class TestCharges:
    def test_destination_charge(self, stripe_processor):
        charge = SimpleNamespace(id="ch_1", transfer="tr_1")
        with patch.object(stripe.Charge, "create", return_value=charge) as create:
            result = stripe_processor.create_charge(
                amount=5000,
                currency="usd",
                destination="acct_1",
                metadata={"contract_id": "7"},
                description="https://x",
                customer="cus_1",
            )

        assert result.charge_id == "ch_1"
        assert result.transfer_id == "tr_1"
        kwargs = create.call_args.kwargs
        assert kwargs["transfer_data"] == {"destination": "acct_1"}
        assert kwargs["customer"] == "cus_1"
        assert "source" not in kwargs

    def test_source_replaces_customer(self, stripe_processor):
        charge = SimpleNamespace(id="ch_1", transfer=None)
        with patch.object(stripe.Charge, "create", return_value=charge) as create:
            result = stripe_processor.create_charge(
                amount=100,
                currency="usd",
                destination="acct_1",
                metadata={},
                customer="cus_1",
                source="tok_visa",
            )

        kwargs = create.call_args.kwargs
        assert kwargs["source"] == "tok_visa"
        assert "customer" not in kwargs
        assert result.transfer_id == "ch_1"

    def test_stripe_error_becomes_processor_error(self, stripe_processor):
        error = stripe.CardError("Your card was declined.", param=None, code="card_declined")
        with patch.object(stripe.Charge, "create", side_effect=error):
            with pytest.raises(ProcessorError) as exc:
                stripe_processor.create_charge(
                    amount=100, currency="usd", destination="acct_1", metadata={}
                )
        assert "declined" in exc.value.message


class TestAccounts:
    def test_balance(self, stripe_processor):
        balance = SimpleNamespace(
            available=[SimpleNamespace(amount=700, currency="usd")],
            pending=[],
        )
        with patch.object(stripe.Balance, "retrieve", return_value=balance) as retrieve:
            result = stripe_processor.retrieve_balance("acct_1")

        retrieve.assert_called_once_with(stripe_account="acct_1")
        assert result.first_available().amount == 700
        assert result.first_pending() is None

    def test_payout_on_connected_account(self, stripe_processor):
        payout = SimpleNamespace(id="po_1", status="pending")
        with patch.object(stripe.Payout, "create", return_value=payout) as create:
            result = stripe_processor.create_payout("acct_1", amount=700, currency="usd")

        assert result.payout_id == "po_1"
        assert create.call_args.kwargs["stripe_account"] == "acct_1"

    def test_login_link(self, stripe_processor):
        link = SimpleNamespace(url="https://connect.stripe.com/express/login/xyz")
        with patch.object(stripe.Account, "create_login_link", return_value=link) as create:
            assert stripe_processor.create_login_link("acct_1").endswith("/xyz")

        create.assert_called_once_with("acct_1")
