import asyncio
import pytest
import stripe
from unittest.mock import MagicMock

from storefront.errors import PaymentProviderError
from storefront.payments import stripe_client
from storefront.payments.models import InvalidWebhook


class _Req:
    def __init__(self, body=b"{}", headers=None):
        self._body = body
        self.headers = headers or {}

    async def body(self):
        return self._body


def test_require_stripe_without_key(monkeypatch):
    monkeypatch.setattr("storefront.config.STRIPE_SECRET_KEY", "")
    with pytest.raises(PaymentProviderError):
        stripe_client.require_stripe()


def test_require_stripe_sets_api_key(stripe_keys):
    assert stripe_client.require_stripe().api_key == "sk_test_dummy"


def test_create_session_wraps_stripe_errors(monkeypatch, stripe_keys):
    create = MagicMock(side_effect=stripe.APIConnectionError("network down"))
    monkeypatch.setattr(stripe.checkout.Session, "create", create)
    with pytest.raises(PaymentProviderError):
        stripe_client.create_session(line_items=[], success_url="s", cancel_url="c", metadata={})


def test_create_session_passes_reference_and_email(monkeypatch, stripe_keys):
    create = MagicMock(return_value={"id": "cs_1", "url": "https://stripe.test"})
    monkeypatch.setattr(stripe.checkout.Session, "create", create)
    session = stripe_client.create_session(
        line_items=[{"quantity": 1}], success_url="s", cancel_url="c", metadata={"user_id": "u1"},
        client_reference_id="u1", customer_email="a@example.com",
    )
    assert session["id"] == "cs_1"
    kwargs = create.call_args.kwargs
    assert kwargs["mode"] == "payment"
    assert kwargs["client_reference_id"] == "u1"
    assert kwargs["customer_email"] == "a@example.com"


def test_get_session_wraps_stripe_errors(monkeypatch, stripe_keys):
    retrieve = MagicMock(side_effect=stripe.InvalidRequestError("No such session", "id"))
    monkeypatch.setattr(stripe.checkout.Session, "retrieve", retrieve)
    with pytest.raises(PaymentProviderError):
        stripe_client.get_session("cs_missing")


def test_list_line_items_follows_pages(monkeypatch, stripe_keys):
    pages = [
        {"data": [{"id": "li_1"}, {"id": "li_2"}], "has_more": True},
        {"data": [{"id": "li_3"}], "has_more": False},
    ]
    list_line_items = MagicMock(side_effect=pages)
    monkeypatch.setattr(stripe.checkout.Session, "list_line_items", list_line_items)

    items = stripe_client.list_line_items("cs_1")

    assert [i["id"] for i in items] == ["li_1", "li_2", "li_3"]
    first, second = list_line_items.call_args_list
    assert first.args == ("cs_1",)
    assert first.kwargs["expand"] == ["data.price.product"]
    assert "starting_after" not in first.kwargs
    assert second.kwargs["starting_after"] == "li_2"


def test_list_line_items_wraps_stripe_errors(monkeypatch, stripe_keys):
    list_line_items = MagicMock(side_effect=stripe.APIConnectionError("network down"))
    monkeypatch.setattr(stripe.checkout.Session, "list_line_items", list_line_items)
    with pytest.raises(PaymentProviderError):
        stripe_client.list_line_items("cs_1")


def test_parse_event_requires_signature(stripe_keys):
    with pytest.raises(InvalidWebhook):
        asyncio.run(stripe_client.parse_event(_Req()))


def test_parse_event_rejects_bad_signature(stripe_keys):
    req = _Req(body=b'{"id": "evt_1"}', headers={"stripe-signature": "t=1,v1=deadbeef"})
    with pytest.raises(InvalidWebhook):
        asyncio.run(stripe_client.parse_event(req))


def test_parse_event_without_secret_rejects(monkeypatch):
    monkeypatch.setattr("storefront.config.STRIPE_WEBHOOK_SECRET", "")
    req = _Req(headers={"stripe-signature": "t=1,v1=abc"})
    with pytest.raises(InvalidWebhook):
        asyncio.run(stripe_client.parse_event(req))


def test_parse_event_returns_dict(monkeypatch, stripe_keys):
    event = {"id": "evt_1", "type": "checkout.session.completed"}
    monkeypatch.setattr(stripe.Webhook, "construct_event", lambda payload, sig, secret: event)
    req = _Req(headers={"stripe-signature": "t=1,v1=abc"})
    assert asyncio.run(stripe_client.parse_event(req)) == event
