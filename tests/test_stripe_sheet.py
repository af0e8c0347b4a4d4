from decimal import Decimal
from unittest.mock import patch

import stripe

from hostellite.schemas.payments import PaymentOutcome, PaymentSession
from hostellite.services.stripe_sheet import StripePaymentSheet

SESSION = PaymentSession(session_id="pi_1", client_secret="pi_1_secret_x", amount=Decimal("100"),
                         amount_minor=10000, currency="pkr")


def _intent(**values):
    return stripe.PaymentIntent.construct_from({"id": "pi_1", "object": "payment_intent", **values}, "pk_test")


def _sheet(**kw):
    kw.setdefault("publishable_key", "pk_test")
    kw.setdefault("payment_method", "pm_123")
    return StripePaymentSheet(**kw)


def test_init_without_key():
    assert "not configured" in _sheet(publishable_key="").init(SESSION)


@patch("hostellite.services.stripe_sheet.settings.STRIPE_PAYMENT_METHOD", "")
@patch("hostellite.services.stripe_sheet.stripe.PaymentIntent.retrieve")
def test_init_without_payment_method(mock_retrieve):
    assert "missing payment method" in StripePaymentSheet(publishable_key="pk_test").init(SESSION)
    mock_retrieve.assert_not_called()


@patch("hostellite.services.stripe_sheet.stripe.PaymentIntent.retrieve")
def test_init_checks_amount(mock_retrieve):
    mock_retrieve.return_value = _intent(amount=10000, status="requires_payment_method")
    sheet = _sheet()
    assert sheet.init(SESSION) is None
    mock_retrieve.assert_called_once_with("pi_1", api_key="pk_test", client_secret="pi_1_secret_x")

    mock_retrieve.return_value = _intent(amount=500, status="requires_payment_method")
    assert "mismatch" in sheet.init(SESSION)


@patch("hostellite.services.stripe_sheet.stripe.PaymentIntent.confirm")
def test_user_declines(mock_confirm):
    sheet = _sheet(approve=lambda s: False)
    assert sheet.present(SESSION).outcome == PaymentOutcome.CANCELLED
    mock_confirm.assert_not_called()


@patch("hostellite.services.stripe_sheet.stripe.PaymentIntent.confirm")
def test_confirmed_intent(mock_confirm):
    mock_confirm.return_value = _intent(amount=10000, status="succeeded")
    sheet = _sheet(approve=lambda s: True)
    assert sheet.present(SESSION).outcome == PaymentOutcome.SUCCESS
    assert mock_confirm.call_args.kwargs["payment_method"] == "pm_123"


@patch("hostellite.services.stripe_sheet.stripe.PaymentIntent.confirm")
def test_card_declined(mock_confirm):
    mock_confirm.side_effect = stripe.CardError("Your card was declined.", param="", code="card_declined")
    result = _sheet().present(SESSION)
    assert result.outcome == PaymentOutcome.ERROR


@patch("hostellite.services.stripe_sheet.stripe.PaymentIntent.confirm")
def test_intent_needing_action_is_an_error(mock_confirm):
    mock_confirm.return_value = _intent(amount=10000, status="requires_action")
    result = _sheet().present(SESSION)
    assert result.outcome == PaymentOutcome.ERROR
    assert "requires_action" in result.message
