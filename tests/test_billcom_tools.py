"""Tests for the Bill.com accounts-payable and workflow tool modules."""

import httpx
import pytest

from tests.billcom_fakes import form_data, legacy_fail, legacy_ok
from tool_modules.aa_billcom.src import tools_basic, tools_extra


@pytest.fixture
def ap_tools(fake_server, billcom_context):
    tools_basic.register_tools(fake_server, billcom_context)
    return fake_server.tools


@pytest.fixture
def workflow_tools(fake_server, billcom_context):
    tools_extra.register_tools(fake_server, billcom_context)
    return fake_server.tools


class TestRegistration:
    async def test_ap_tool_count(self, fake_server, billcom_context):
        count = tools_basic.register_tools(fake_server, billcom_context)
        assert count == 24
        assert set(fake_server.tools) >= {
            "search_vendors",
            "create_vendor",
            "archive_bill",
            "void_bill_payment",
            "update_recurring_bill",
        }

    async def test_workflow_tool_count(self, fake_server, billcom_context):
        count = tools_extra.register_tools(fake_server, billcom_context)
        assert count == 17
        assert "billcom_session_status" in fake_server.tools
        assert "upload_and_attach_document" in fake_server.tools


class TestVendorTools:
    async def test_search_found(self, ap_tools, fake_billcom):
        fake_billcom.route("/List/Vendor.json", legacy_ok([{"id": "v1", "name": "Acme"}]))

        result = await ap_tools["search_vendors"](max_results=5)

        assert result.startswith("✅ Found 1 vendor(s):")
        assert '"Acme"' in result
        assert form_data(fake_billcom.calls_to("/List/Vendor.json")[0]) == {"start": 0, "max": 5}

    async def test_search_empty(self, ap_tools, fake_billcom):
        fake_billcom.route("/List/Vendor.json", legacy_ok([]))
        assert await ap_tools["search_vendors"]() == "ℹ️ No vendors found"

    async def test_search_bad_filter(self, ap_tools, fake_billcom):
        result = await ap_tools["search_vendors"](filters=[{"field": "name", "op": "like", "value": "x"}])

        assert result.startswith("❌ Error searching vendors")
        assert "[INVALID_INPUT]" in result
        assert fake_billcom.requests == []

    async def test_create_sends_only_given_fields(self, ap_tools, fake_billcom):
        fake_billcom.route("/Crud/Create/Vendor.json", legacy_ok({"id": "v9", "name": "Acme"}))

        result = await ap_tools["create_vendor"]("Acme", email="ap@acme.test", address_city="Reno")

        assert result.startswith("✅ Created vendor Acme")
        obj = form_data(fake_billcom.calls_to("/Crud/Create/Vendor.json")[0])["obj"]
        assert obj == {"entity": "Vendor", "name": "Acme", "email": "ap@acme.test", "addressCity": "Reno"}

    async def test_get_not_found(self, ap_tools, fake_billcom):
        fake_billcom.route("/Crud/Read/Vendor.json", legacy_fail("Error", "BDC_1109", "Entity not found"))

        result = await ap_tools["get_vendor"]("v404")

        assert result.startswith("❌ Error getting vendor v404")
        assert "Entity not found" in result
        assert "[API_ERROR]" in result

    async def test_archive(self, ap_tools, fake_billcom):
        fake_billcom.route("/Crud/Update/Vendor.json", legacy_ok({"id": "v1", "isActive": "2"}))

        result = await ap_tools["archive_vendor"]("v1")

        assert result == "✅ Successfully archived vendor v1"
        assert form_data(fake_billcom.calls_to("/Crud/Update/Vendor.json")[0])["obj"]["isActive"] == "2"


class TestBillTools:
    async def test_update_partial(self, ap_tools, fake_billcom):
        fake_billcom.route("/Crud/Update/Bill.json", legacy_ok({"id": "b1"}))

        result = await ap_tools["update_bill"]("b1", due_date="2024-02-01")

        assert result.startswith("✅ Updated bill b1")
        assert form_data(fake_billcom.calls_to("/Crud/Update/Bill.json")[0]) == {
            "obj": {"entity": "Bill", "id": "b1", "dueDate": "2024-02-01"}
        }

    async def test_void_payment(self, ap_tools, fake_billcom):
        fake_billcom.route("/Void/SentPay.json", legacy_ok({}))

        result = await ap_tools["void_bill_payment"]("sp1")

        assert result == "✅ Successfully voided bill payment sp1"

    async def test_login_failure_reported(self, ap_tools, fake_billcom):
        fake_billcom.login_response = legacy_fail("Invalid credentials")

        result = await ap_tools["get_bill"]("b1")

        assert "[AUTH_FAILED]" in result
        assert "Bill.com login failed" in result
        assert "💡" in result

    async def test_server_error_code(self, ap_tools, fake_billcom):
        fake_billcom.route("/Crud/Read/Bill.json", httpx.Response(503, text="maintenance"))

        result = await ap_tools["get_bill"]("b1")

        assert "[SERVICE_UNAVAILABLE]" in result

    async def test_bad_time_period(self, ap_tools, fake_billcom):
        result = await ap_tools["create_recurring_bill"]("v1", "7", "1", "2024-04-01")
        assert "Invalid timePeriod" in result
        assert fake_billcom.requests == []


class TestApprovalTools:
    async def test_approve(self, workflow_tools, fake_billcom):
        fake_billcom.route("/Approve/Bill.json", legacy_ok({}))

        result = await workflow_tools["approve_bill"]("b1")

        assert result == "✅ Successfully approved bill b1"
        assert form_data(fake_billcom.calls_to("/Approve/Bill.json")[0]) == {"objectId": "b1"}

    async def test_v3_deny(self, workflow_tools, fake_billcom):
        fake_billcom.route("/bill-approvals/actions", httpx.Response(204))

        result = await workflow_tools["deny_bill_v3"]("b1", comment="dup")

        assert result.startswith("✅ Denied bill b1")
        assert '"success": true' in result
        request = fake_billcom.calls_to("/bill-approvals/actions")[0]
        assert request.headers["sessionId"] == "s1"

    async def test_v3_error(self, workflow_tools, fake_billcom):
        fake_billcom.route(
            "/bill-approvals/pending-user-approvals",
            httpx.Response(403, json={"error": {"code": "FORBIDDEN", "message": "Not an approver"}}),
        )

        result = await workflow_tools["get_pending_approvals_v3"]()

        assert "Bill.com v3 API error [FORBIDDEN]: Not an approver" in result
        assert "[PERMISSION_DENIED]" in result


class TestDocumentTools:
    async def test_upload_missing_file(self, workflow_tools, fake_billcom, tmp_path):
        result = await workflow_tools["upload_document"](str(tmp_path / "missing.pdf"))

        assert result.startswith("❌ Error uploading")
        assert "[INVALID_INPUT]" in result
        assert fake_billcom.requests == []

    async def test_upload_and_attach(self, workflow_tools, fake_billcom, tmp_path):
        path = tmp_path / "inv.pdf"
        path.write_bytes(b"%PDF")
        fake_billcom.route("/UploadAttachment.json", legacy_ok({"documentUploadedId": "d1"}))

        result = await workflow_tools["upload_and_attach_document"](str(path), "b1")

        assert result.startswith("✅ Uploaded and attached to bill b1")
        assert '"d1"' in result

    async def test_delete(self, workflow_tools, fake_billcom):
        fake_billcom.route("/Crud/Delete/Document.json", legacy_ok({}))
        assert await workflow_tools["delete_document"]("d1") == "✅ Successfully deleted document d1"


class TestSessionTools:
    async def test_status_before_login(self, workflow_tools, fake_billcom):
        result = await workflow_tools["billcom_session_status"]()

        assert result.startswith("ℹ️ No active Bill.com session")
        assert fake_billcom.requests == []

    async def test_status_hides_secrets(self, workflow_tools, billcom_context):
        await billcom_context.authenticator.ensure_authenticated()

        result = await workflow_tools["billcom_session_status"]()

        assert result.startswith("✅ Bill.com session active")
        assert "org123" in result
        assert "s1" not in result
        assert "dev456" not in result

    async def test_logout(self, workflow_tools, billcom_context, fake_billcom):
        fake_billcom.route("/Logout.json", legacy_ok())
        await billcom_context.authenticator.ensure_authenticated()

        result = await workflow_tools["billcom_logout"]()

        assert result == "✅ Logged out of Bill.com"
        assert billcom_context.authenticator.get_session_info() is None
