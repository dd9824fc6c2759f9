"""Tests for accounts-payable operations and request shaping."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from tool_modules.aa_billcom.src import ap_operations as ap
from tool_modules.aa_billcom.src.models import SearchFilter, SortOption, compact, list_request


@pytest.fixture
def legacy():
    client = MagicMock()
    client.call = AsyncMock(return_value={"id": "x1"})
    return client


def sent(legacy):
    """(endpoint, data) of the single legacy call."""
    legacy.call.assert_awaited_once()
    return legacy.call.await_args.args


# ==================== models ====================


class TestListRequest:
    def test_defaults(self):
        assert list_request() == {"start": 0, "max": 999}

    def test_zero_start_kept(self):
        assert list_request(start=0, max_results=5) == {"start": 0, "max": 5}

    def test_filters_and_sort(self):
        data = list_request(
            filters=[{"field": "name", "op": "sw", "value": "Ac"}, SearchFilter("isActive", "eq", "1")],
            sort=[{"field": "name"}, SortOption("createdTime", asc=False)],
            nested=True,
        )
        assert data["filters"] == [
            {"field": "name", "op": "sw", "value": "Ac"},
            {"field": "isActive", "op": "eq", "value": "1"},
        ]
        assert data["sort"] == [{"field": "name", "asc": True}, {"field": "createdTime", "asc": False}]
        assert data["nested"] is True

    def test_bad_operator(self):
        with pytest.raises(ValueError, match="Unsupported filter operator"):
            SearchFilter("name", "like", "x")

    def test_filter_missing_key(self):
        with pytest.raises(ValueError, match="missing key"):
            list_request(filters=[{"field": "name", "op": "eq"}])

    def test_sort_missing_field(self):
        with pytest.raises(ValueError, match="missing 'field'"):
            SortOption.from_dict({"asc": False})

    def test_compact(self):
        assert compact({"a": None, "b": "", "c": 0, "d": False, "e": "x"}) == {"c": 0, "d": False, "e": "x"}


# ==================== generic ====================


class TestGenericCalls:
    async def test_search(self, legacy):
        legacy.call.return_value = [{"id": "v1"}]

        result = await ap.search_entities(legacy, ap.VENDOR, max_results=10)

        assert result == [{"id": "v1"}]
        assert sent(legacy) == ("List/Vendor", {"start": 0, "max": 10})

    async def test_search_none_is_empty(self, legacy):
        legacy.call.return_value = None
        assert await ap.search_entities(legacy, ap.BILL) == []

    async def test_read(self, legacy):
        await ap.read_entity(legacy, ap.BILL, "b1")
        assert sent(legacy) == ("Crud/Read/Bill", {"id": "b1"})

    async def test_archive(self, legacy):
        await ap.archive_entity(legacy, ap.VENDOR_CREDIT, "vc1")
        assert sent(legacy) == (
            "Crud/Update/VendorCredit",
            {"obj": {"entity": "VendorCredit", "id": "vc1", "isActive": "2"}},
        )


# ==================== vendors ====================


class TestVendors:
    async def test_create(self, legacy):
        await ap.create_vendor(legacy, "Acme", {"email": "ap@acme.test", "phone": None})
        assert sent(legacy) == (
            "Crud/Create/Vendor",
            {"obj": {"entity": "Vendor", "email": "ap@acme.test", "name": "Acme"}},
        )

    async def test_create_requires_name(self, legacy):
        with pytest.raises(ValueError, match="name is required"):
            await ap.create_vendor(legacy, "")
        legacy.call.assert_not_awaited()

    async def test_create_rejects_unknown_field(self, legacy):
        with pytest.raises(ValueError, match="Unknown field"):
            await ap.create_vendor(legacy, "Acme", {"color": "red"})

    async def test_update_only_sends_given_fields(self, legacy):
        await ap.update_vendor(legacy, "v1", {"addressCity": "Reno"})
        assert sent(legacy) == (
            "Crud/Update/Vendor",
            {"obj": {"entity": "Vendor", "id": "v1", "addressCity": "Reno"}},
        )

    async def test_update_requires_fields(self, legacy):
        with pytest.raises(ValueError, match="No vendor fields"):
            await ap.update_vendor(legacy, "v1", {})


# ==================== bills ====================


class TestBills:
    async def test_create(self, legacy):
        items = [{"entity": "BillLineItem", "amount": 100}]
        await ap.create_bill(legacy, "v1", "2024-01-01", "2024-01-31", invoice_number="INV-1", line_items=items)

        endpoint, data = sent(legacy)
        assert endpoint == "Crud/Create/Bill"
        assert data["obj"] == {
            "entity": "Bill",
            "vendorId": "v1",
            "invoiceDate": "2024-01-01",
            "dueDate": "2024-01-31",
            "invoiceNumber": "INV-1",
            "billLineItems": items,
        }

    async def test_update_partial(self, legacy):
        await ap.update_bill(legacy, "b1", due_date="2024-02-15")
        assert sent(legacy) == (
            "Crud/Update/Bill",
            {"obj": {"entity": "Bill", "id": "b1", "dueDate": "2024-02-15"}},
        )


# ==================== payments ====================


class TestBillPayments:
    async def test_create(self, legacy):
        await ap.create_bill_payment(legacy, "v1", "2024-01-05", "coa1", [{"billId": "b1", "amount": 50}])

        endpoint, data = sent(legacy)
        assert endpoint == "Crud/Create/SentPay"
        assert data["obj"]["billPayments"] == [{"billId": "b1", "amount": 50}]
        assert data["obj"]["chartOfAccountId"] == "coa1"
        assert "description" not in data["obj"]

    async def test_create_requires_items(self, legacy):
        with pytest.raises(ValueError):
            await ap.create_bill_payment(legacy, "v1", "2024-01-05", "coa1", [])

    async def test_create_validates_items(self, legacy):
        with pytest.raises(ValueError, match="billId"):
            await ap.create_bill_payment(legacy, "v1", "2024-01-05", "coa1", [{"amount": 5}])
        legacy.call.assert_not_awaited()

    async def test_void(self, legacy):
        assert await ap.void_bill_payment(legacy, "sp1") is True
        assert sent(legacy) == ("Void/SentPay", {"sentPayId": "sp1"})


# ==================== credits / recurring ====================


class TestVendorCredits:
    async def test_create(self, legacy):
        await ap.create_vendor_credit(legacy, "v1", "2024-03-01", credit_number="CR-9")
        assert sent(legacy) == (
            "Crud/Create/VendorCredit",
            {"obj": {"entity": "VendorCredit", "vendorId": "v1", "creditDate": "2024-03-01", "creditNumber": "CR-9"}},
        )

    async def test_update(self, legacy):
        await ap.update_vendor_credit(legacy, "vc1", description="adjusted")
        assert sent(legacy)[1]["obj"] == {"entity": "VendorCredit", "id": "vc1", "description": "adjusted"}


class TestRecurringBills:
    async def test_create(self, legacy):
        await ap.create_recurring_bill(legacy, "v1", "3", "1", "2024-04-01", days_in_advance="5")
        endpoint, data = sent(legacy)
        assert endpoint == "Crud/Create/RecurringBill"
        assert data["obj"]["timePeriod"] == "3"
        assert data["obj"]["daysInAdvance"] == "5"
        assert "endDate" not in data["obj"]

    async def test_invalid_time_period(self, legacy):
        with pytest.raises(ValueError, match="Invalid timePeriod"):
            await ap.create_recurring_bill(legacy, "v1", "9", "1", "2024-04-01")
        legacy.call.assert_not_awaited()

    async def test_update_without_period(self, legacy):
        await ap.update_recurring_bill(legacy, "rb1", end_date="2025-01-01")
        assert sent(legacy)[1]["obj"] == {"entity": "RecurringBill", "id": "rb1", "endDate": "2025-01-01"}
