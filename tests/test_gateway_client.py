"""Tests for the v3 gateway client (delegated auth)."""

import json

import httpx
import pytest

from tool_modules.aa_billcom.src.errors import BillcomHTTPError, LoginError, ParseError
from tool_modules.aa_billcom.src.gateway_client import build_query

BASE = "https://gateway.stage.bill.com/connect/v3"


class TestBuildQuery:
    def test_drops_none_and_lowercases_bools(self):
        assert build_query({"page": 1, "isActive": True, "archived": False, "q": None}) == {
            "page": "1",
            "isActive": "true",
            "archived": "false",
        }

    def test_none_params(self):
        assert build_query(None) == {}


class TestGatewayRequest:
    async def test_delegated_auth_headers(self, billcom_context, fake_billcom):
        fake_billcom.route("/bills", httpx.Response(200, json={"items": [{"id": "b1"}]}))

        result = await billcom_context.gateway.get("/bills")

        assert result == [{"id": "b1"}]
        request = fake_billcom.calls_to("/bills")[0]
        assert str(request.url) == f"{BASE}/bills"
        assert request.headers["devKey"] == "dev456"
        assert request.headers["sessionId"] == "s1"
        assert request.headers["content-type"] == "application/json"
        assert fake_billcom.login_calls == 1

    async def test_data_unwrapped(self, billcom_context, fake_billcom):
        fake_billcom.route("/bills/b1", httpx.Response(200, json={"data": {"id": "b1"}}))
        assert await billcom_context.gateway.get("/bills/b1") == {"id": "b1"}

    async def test_raw_body(self, billcom_context, fake_billcom):
        fake_billcom.route("/bills/b1", httpx.Response(200, json={"id": "b1", "amount": 10}))
        assert await billcom_context.gateway.get("/bills/b1") == {"id": "b1", "amount": 10}

    async def test_empty_body_is_empty_dict(self, billcom_context, fake_billcom):
        fake_billcom.route("/bills/b1", httpx.Response(204))
        assert await billcom_context.gateway.delete("/bills/b1") == {}

    async def test_bool_query_params(self, billcom_context, fake_billcom):
        fake_billcom.route("/bill-approvals", httpx.Response(200, json={"items": []}))

        await billcom_context.gateway.get("/bill-approvals", {"isActive": True, "page": 2, "skip": None})

        request = fake_billcom.calls_to("/bill-approvals")[0]
        assert request.url.params["isActive"] == "true"
        assert request.url.params["page"] == "2"
        assert "skip" not in request.url.params

    @pytest.mark.parametrize("method", ["post", "put", "patch"])
    async def test_body_sent_for_write_methods(self, billcom_context, fake_billcom, method):
        fake_billcom.route("/bills", httpx.Response(200, json={"data": {"id": "b1"}}))

        await getattr(billcom_context.gateway, method)("/bills", {"amount": 5})

        request = fake_billcom.calls_to("/bills")[0]
        assert request.method == method.upper()
        assert json.loads(request.content) == {"amount": 5}

    async def test_body_not_sent_for_get(self, billcom_context, fake_billcom):
        fake_billcom.route("/bills", httpx.Response(200, json={"items": []}))

        await billcom_context.gateway.request("GET", "/bills", body={"ignored": True})

        assert fake_billcom.calls_to("/bills")[0].content == b""

    async def test_error_code_and_message(self, billcom_context, fake_billcom):
        fake_billcom.route(
            "/bills/nope",
            httpx.Response(404, json={"error": {"code": "BILL_NOT_FOUND", "message": "Bill not found"}}),
        )

        with pytest.raises(BillcomHTTPError) as exc_info:
            await billcom_context.gateway.get("/bills/nope")

        assert str(exc_info.value) == "Bill.com v3 API error [BILL_NOT_FOUND]: Bill not found"
        assert exc_info.value.status_code == 404

    async def test_error_without_body_details(self, billcom_context, fake_billcom):
        fake_billcom.route("/bills", httpx.Response(403, json={}))

        with pytest.raises(BillcomHTTPError) as exc_info:
            await billcom_context.gateway.get("/bills")

        assert str(exc_info.value) == "Bill.com v3 API error [UNKNOWN_ERROR]: HTTP 403"

    async def test_non_json_error_includes_status(self, billcom_context, fake_billcom):
        fake_billcom.route("/bills", httpx.Response(500, text="Internal Server Error"))

        with pytest.raises(BillcomHTTPError) as exc_info:
            await billcom_context.gateway.get("/bills")

        assert "500" in str(exc_info.value)
        assert "Internal Server Error" in str(exc_info.value)
        assert exc_info.value.status_code == 500

    async def test_invalid_json_success(self, billcom_context, fake_billcom):
        fake_billcom.route("/bills", httpx.Response(200, text="not json"))

        with pytest.raises(ParseError, match="Invalid JSON response from v3 API"):
            await billcom_context.gateway.get("/bills")

    async def test_login_failure_no_gateway_request(self, billcom_context, fake_billcom):
        fake_billcom.login_response = httpx.Response(401, text="unauthorized")

        with pytest.raises(BillcomHTTPError):
            await billcom_context.gateway.get("/bills")

        assert fake_billcom.calls_to("/bills") == []

    async def test_login_envelope_failure(self, billcom_context, fake_billcom):
        fake_billcom.login_response = httpx.Response(
            200, json={"response_status": 1, "response_message": "Invalid credentials"}
        )

        with pytest.raises(LoginError):
            await billcom_context.gateway.get("/bills")
