"""Tests for the Spend & Expense client (token auth)."""

import json

import httpx
import pytest

from tests.billcom_fakes import FakeBillcom
from tool_modules.aa_billcom.src.config import BillcomSettings
from tool_modules.aa_billcom.src.errors import (
    BillcomHTTPError,
    ConfigurationError,
    EnvelopeError,
    ParseError,
)
from tool_modules.aa_billcom.src.spend_client import SpendClient

BASE = "https://gateway.stage.bill.com/connect/v3/spend"


class TestSpendConfiguration:
    async def test_unconfigured_raises_without_request(self):
        fake = FakeBillcom()
        settings = BillcomSettings("u", "p", "o", "d")
        async with httpx.AsyncClient(transport=httpx.MockTransport(fake)) as http:
            spend = SpendClient(settings, http)

            assert spend.is_configured() is False
            with pytest.raises(ConfigurationError, match="BILLCOM_SPEND_API_TOKEN"):
                await spend.get("budgets")

        assert fake.requests == []

    def test_base_url_and_environment(self, settings):
        spend = SpendClient(settings, httpx.AsyncClient())
        assert spend.base_url == BASE
        assert spend.environment == "sandbox"
        assert spend.is_configured() is True


class TestSpendRequest:
    async def test_token_header_and_no_session(self, billcom_context, fake_billcom):
        fake_billcom.route("/spend/budgets", httpx.Response(200, json={"items": [{"uuid": "b1"}]}))

        result = await billcom_context.spend.get("budgets")

        assert result == [{"uuid": "b1"}]
        request = fake_billcom.calls_to("/spend/budgets")[0]
        assert str(request.url).startswith(f"{BASE}/budgets")
        assert request.headers["apiToken"] == "spend-token"
        assert request.headers["accept"] == "application/json"
        assert "sessionId" not in request.headers
        assert fake_billcom.login_calls == 0

    async def test_params_drop_none(self, billcom_context, fake_billcom):
        fake_billcom.route("/spend/cards", httpx.Response(200, json={"results": []}))

        await billcom_context.spend.get("cards", {"limit": 10, "status": None})

        params = fake_billcom.calls_to("/spend/cards")[0].url.params
        assert params["limit"] == "10"
        assert "status" not in params

    async def test_data_unwrapped(self, billcom_context, fake_billcom):
        fake_billcom.route("/spend/budgets/b1", httpx.Response(200, json={"data": {"uuid": "b1"}}))
        assert await billcom_context.spend.get("budgets/b1") == {"uuid": "b1"}

    async def test_results_unwrapped(self, billcom_context, fake_billcom):
        fake_billcom.route("/spend/transactions", httpx.Response(200, json={"results": [{"uuid": "t1"}]}))
        assert await billcom_context.spend.get("transactions") == [{"uuid": "t1"}]

    async def test_raw_body(self, billcom_context, fake_billcom):
        fake_billcom.route("/spend/cards/c1", httpx.Response(200, json={"uuid": "c1"}))
        assert await billcom_context.spend.get("cards/c1") == {"uuid": "c1"}

    async def test_empty_body_is_none(self, billcom_context, fake_billcom):
        fake_billcom.route("/spend/cards/c1/freeze", httpx.Response(204))
        assert await billcom_context.spend.post("cards/c1/freeze") is None

    async def test_post_body(self, billcom_context, fake_billcom):
        fake_billcom.route("/spend/budgets", httpx.Response(200, json={"data": {"uuid": "b2"}}))

        await billcom_context.spend.post("budgets", {"name": "Travel"})

        assert json.loads(fake_billcom.calls_to("/spend/budgets")[0].content) == {"name": "Travel"}

    async def test_error_on_success_status(self, billcom_context, fake_billcom):
        fake_billcom.route(
            "/spend/budgets",
            httpx.Response(200, json={"error": {"code": "INVALID", "message": "Budget name taken"}}),
        )

        with pytest.raises(EnvelopeError) as exc_info:
            await billcom_context.spend.post("budgets", {"name": "Travel"})

        assert str(exc_info.value) == "Spend API error: Budget name taken"
        assert exc_info.value.code == "INVALID"

    async def test_string_error_on_success_status(self, billcom_context, fake_billcom):
        fake_billcom.route("/spend/budgets", httpx.Response(200, json={"error": "Unauthorized"}))

        with pytest.raises(EnvelopeError) as exc_info:
            await billcom_context.spend.get("budgets")

        assert str(exc_info.value) == "Spend API error: Unauthorized"
        assert exc_info.value.code is None

    async def test_falsy_error_is_not_failure(self, billcom_context, fake_billcom):
        fake_billcom.route("/spend/budgets", httpx.Response(200, json={"error": None, "items": [{"uuid": "b1"}]}))

        assert await billcom_context.spend.get("budgets") == [{"uuid": "b1"}]

    async def test_http_error_with_message(self, billcom_context, fake_billcom):
        fake_billcom.route(
            "/spend/cards/c9",
            httpx.Response(404, json={"error": {"code": "NOT_FOUND", "message": "Card not found"}}),
        )

        with pytest.raises(BillcomHTTPError) as exc_info:
            await billcom_context.spend.get("cards/c9")

        assert str(exc_info.value) == "Spend API error: Card not found"
        assert exc_info.value.status_code == 404

    async def test_http_error_without_json(self, billcom_context, fake_billcom):
        fake_billcom.route("/spend/cards", httpx.Response(500, text="oops"))

        with pytest.raises(BillcomHTTPError) as exc_info:
            await billcom_context.spend.get("cards")

        assert str(exc_info.value) == "Spend API error: 500 oops"

    async def test_invalid_json(self, billcom_context, fake_billcom):
        fake_billcom.route("/spend/cards", httpx.Response(200, text="<html>"))

        with pytest.raises(ParseError):
            await billcom_context.spend.get("cards")
