"""Bill.com MCP Server - Accounts payable tools (basic tools).

Vendors, bills, bill payments, vendor credits and recurring bills on the
legacy v2 API.
"""

import logging
from typing import TYPE_CHECKING, Any

# Setup project path for server imports (must be before server imports)
from tool_modules.common import PROJECT_ROOT  # Sets up sys.path

__project_root__ = PROJECT_ROOT  # Module initialization

from server.errors import tool_success
from server.tool_registry import ToolRegistry

from . import ap_operations as ap
from .common import failed, found, record
from .errors import BillcomError

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from .context import BillcomContext

logger = logging.getLogger(__name__)


# ==================== Tool Registration ====================


def register_tools(server: "FastMCP", context: "BillcomContext") -> int:
    """Register accounts payable tools with the MCP server."""
    registry = ToolRegistry(server)
    legacy = context.legacy

    async def _search(entity: str, label: str, start, max_results, filters, sort, nested=None) -> str:
        try:
            results = await ap.search_entities(legacy, entity, start, max_results, filters, sort, nested)
        except (BillcomError, ValueError) as e:
            return failed(f"searching {label}s", e)
        return found(label, results)

    async def _read(entity: str, label: str, entity_id: str) -> str:
        try:
            result = await ap.read_entity(legacy, entity, entity_id)
        except BillcomError as e:
            return failed(f"getting {label} {entity_id}", e)
        return record(f"{label.capitalize()} {entity_id}", result)

    async def _archive(entity: str, label: str, entity_id: str) -> str:
        try:
            await ap.archive_entity(legacy, entity, entity_id)
        except BillcomError as e:
            return failed(f"archiving {label} {entity_id}", e)
        return tool_success(f"Successfully archived {label} {entity_id}")

    # ==================== Vendors ====================

    @registry.tool()
    async def search_vendors(
        start: int = 0,
        max_results: int = 999,
        filters: list[dict[str, Any]] | None = None,
        sort: list[dict[str, Any]] | None = None,
        nested: bool | None = None,
    ) -> str:
        """
        Search vendors in Bill.com.

        Args:
            start: Offset of the first record (default: 0)
            max_results: Maximum records to return (default: 999)
            filters: Filter clauses, e.g. [{"field": "name", "op": "sw", "value": "Acme"}].
                     Operators: eq, ne, lt, le, gt, ge, in, nin, sw, ew, ct
            sort: Sort options, e.g. [{"field": "name", "asc": true}]
            nested: Include nested related data

        Returns:
            Matching vendors as JSON.
        """
        return await _search(ap.VENDOR, "vendor", start, max_results, filters, sort, nested)

    @registry.tool()
    async def get_vendor(vendor_id: str) -> str:
        """
        Get a vendor by id.

        Args:
            vendor_id: Bill.com vendor id (starts with 009)
        """
        return await _read(ap.VENDOR, "vendor", vendor_id)

    @registry.tool()
    async def create_vendor(
        name: str,
        email: str = "",
        phone: str = "",
        company_name: str = "",
        name_on_check: str = "",
        address1: str = "",
        address2: str = "",
        address_city: str = "",
        address_state: str = "",
        address_zip: str = "",
        address_country: str = "",
        tax_id: str = "",
        track1099: str = "",
        pay_by: str = "",
        description: str = "",
        extra_fields: dict[str, Any] | None = None,
    ) -> str:
        """
        Create a vendor.

        Args:
            name: Vendor name (required)
            email: Contact email
            phone: Contact phone
            company_name: Legal company name
            name_on_check: Payee name printed on checks
            address1: Street address line 1
            address2: Street address line 2
            address_city: City
            address_state: State or province
            address_zip: Postal code
            address_country: Country
            tax_id: Tax identification number
            track1099: "true" to track for 1099 reporting
            pay_by: Payment method code
            description: Free-form description
            extra_fields: Any other Vendor fields by their API name (e.g. {"accNumber": "123"})

        Returns:
            The created vendor.
        """
        fields = {
            "email": email,
            "phone": phone,
            "companyName": company_name,
            "nameOnCheck": name_on_check,
            "address1": address1,
            "address2": address2,
            "addressCity": address_city,
            "addressState": address_state,
            "addressZip": address_zip,
            "addressCountry": address_country,
            "taxId": tax_id,
            "track1099": track1099,
            "payBy": pay_by,
            "description": description,
            **(extra_fields or {}),
        }
        try:
            vendor = await ap.create_vendor(legacy, name, fields)
        except (BillcomError, ValueError) as e:
            return failed("creating vendor", e)
        return record(f"Created vendor {name}", vendor)

    @registry.tool()
    async def update_vendor(vendor_id: str, fields: dict[str, Any]) -> str:
        """
        Update a vendor. Only the fields given are changed.

        Args:
            vendor_id: Vendor id
            fields: Vendor fields by API name, e.g. {"email": "ap@acme.com", "addressCity": "Austin"}
        """
        try:
            vendor = await ap.update_vendor(legacy, vendor_id, fields)
        except (BillcomError, ValueError) as e:
            return failed(f"updating vendor {vendor_id}", e)
        return record(f"Updated vendor {vendor_id}", vendor)

    @registry.tool()
    async def archive_vendor(vendor_id: str) -> str:
        """
        Archive (deactivate) a vendor.

        Args:
            vendor_id: Vendor id
        """
        return await _archive(ap.VENDOR, "vendor", vendor_id)

    # ==================== Bills ====================

    @registry.tool()
    async def search_bills(
        start: int = 0,
        max_results: int = 999,
        filters: list[dict[str, Any]] | None = None,
        sort: list[dict[str, Any]] | None = None,
        nested: bool | None = None,
    ) -> str:
        """
        Search bills.

        Args:
            start: Offset of the first record (default: 0)
            max_results: Maximum records to return (default: 999)
            filters: Filter clauses, e.g. [{"field": "vendorId", "op": "eq", "value": "009..."}]
            sort: Sort options, e.g. [{"field": "dueDate", "asc": false}]
            nested: Include line items
        """
        return await _search(ap.BILL, "bill", start, max_results, filters, sort, nested)

    @registry.tool()
    async def get_bill(bill_id: str) -> str:
        """
        Get a bill by id.

        Args:
            bill_id: Bill id (starts with 00n)
        """
        return await _read(ap.BILL, "bill", bill_id)

    @registry.tool()
    async def create_bill(
        vendor_id: str,
        invoice_date: str,
        due_date: str,
        invoice_number: str = "",
        gl_posting_date: str = "",
        description: str = "",
        po_number: str = "",
        line_items: list[dict[str, Any]] | None = None,
    ) -> str:
        """
        Create a bill.

        Args:
            vendor_id: Vendor the bill is from
            invoice_date: Invoice date (YYYY-MM-DD)
            due_date: Due date (YYYY-MM-DD)
            invoice_number: Vendor invoice number
            gl_posting_date: GL posting date (YYYY-MM-DD)
            description: Bill description
            po_number: Purchase order number
            line_items: Bill line items, e.g. [{"amount": "100.00", "chartOfAccountId": "0ca..."}]
        """
        try:
            bill = await ap.create_bill(
                legacy,
                vendor_id,
                invoice_date,
                due_date,
                invoice_number=invoice_number,
                gl_posting_date=gl_posting_date,
                description=description,
                po_number=po_number,
                line_items=line_items,
            )
        except BillcomError as e:
            return failed("creating bill", e)
        return record("Created bill", bill)

    @registry.tool()
    async def update_bill(
        bill_id: str,
        invoice_number: str = "",
        invoice_date: str = "",
        due_date: str = "",
        gl_posting_date: str = "",
        description: str = "",
        po_number: str = "",
        line_items: list[dict[str, Any]] | None = None,
    ) -> str:
        """
        Update a bill. Empty arguments are left unchanged.

        Args:
            bill_id: Bill id
            invoice_number: Vendor invoice number
            invoice_date: Invoice date (YYYY-MM-DD)
            due_date: Due date (YYYY-MM-DD)
            gl_posting_date: GL posting date (YYYY-MM-DD)
            description: Bill description
            po_number: Purchase order number
            line_items: Replacement line items
        """
        try:
            bill = await ap.update_bill(
                legacy,
                bill_id,
                invoice_number=invoice_number,
                invoice_date=invoice_date,
                due_date=due_date,
                gl_posting_date=gl_posting_date,
                description=description,
                po_number=po_number,
                line_items=line_items,
            )
        except BillcomError as e:
            return failed(f"updating bill {bill_id}", e)
        return record(f"Updated bill {bill_id}", bill)

    @registry.tool()
    async def archive_bill(bill_id: str) -> str:
        """
        Archive (deactivate) a bill.

        Args:
            bill_id: Bill id
        """
        return await _archive(ap.BILL, "bill", bill_id)

    # ==================== Bill payments ====================

    @registry.tool()
    async def search_bill_payments(
        start: int = 0,
        max_results: int = 999,
        filters: list[dict[str, Any]] | None = None,
        sort: list[dict[str, Any]] | None = None,
    ) -> str:
        """
        Search bill payments (sent payments).

        Args:
            start: Offset of the first record (default: 0)
            max_results: Maximum records to return (default: 999)
            filters: Filter clauses, e.g. [{"field": "status", "op": "eq", "value": "1"}]
            sort: Sort options
        """
        return await _search(ap.BILL_PAYMENT, "bill payment", start, max_results, filters, sort)

    @registry.tool()
    async def get_bill_payment(payment_id: str) -> str:
        """
        Get a bill payment by id.

        Args:
            payment_id: Sent payment id
        """
        return await _read(ap.BILL_PAYMENT, "bill payment", payment_id)

    @registry.tool()
    async def create_bill_payment(
        vendor_id: str,
        process_date: str,
        chart_of_account_id: str,
        bill_payments: list[dict[str, Any]],
        description: str = "",
        to_print_check: str = "",
    ) -> str:
        """
        Pay one or more bills from a vendor.

        Args:
            vendor_id: Vendor being paid
            process_date: Date to process the payment (YYYY-MM-DD)
            chart_of_account_id: Bank account the payment is drawn from
            bill_payments: Bills and amounts, e.g. [{"billId": "00n...", "amount": "250.00"}]
            description: Payment description
            to_print_check: "true" to print a check
        """
        try:
            payment = await ap.create_bill_payment(
                legacy,
                vendor_id,
                process_date,
                chart_of_account_id,
                bill_payments,
                description=description,
                to_print_check=to_print_check,
            )
        except (BillcomError, ValueError) as e:
            return failed("creating bill payment", e)
        return record("Created bill payment", payment)

    @registry.tool()
    async def void_bill_payment(payment_id: str) -> str:
        """
        Void a bill payment that has not been processed yet.

        Args:
            payment_id: Sent payment id
        """
        try:
            await ap.void_bill_payment(legacy, payment_id)
        except BillcomError as e:
            return failed(f"voiding bill payment {payment_id}", e)
        return tool_success(f"Successfully voided bill payment {payment_id}")

    # ==================== Vendor credits ====================

    @registry.tool()
    async def search_vendor_credits(
        start: int = 0,
        max_results: int = 999,
        filters: list[dict[str, Any]] | None = None,
        sort: list[dict[str, Any]] | None = None,
        nested: bool | None = None,
    ) -> str:
        """
        Search vendor credits.

        Args:
            start: Offset of the first record (default: 0)
            max_results: Maximum records to return (default: 999)
            filters: Filter clauses
            sort: Sort options
            nested: Include line items
        """
        return await _search(ap.VENDOR_CREDIT, "vendor credit", start, max_results, filters, sort, nested)

    @registry.tool()
    async def get_vendor_credit(credit_id: str) -> str:
        """
        Get a vendor credit by id.

        Args:
            credit_id: Vendor credit id
        """
        return await _read(ap.VENDOR_CREDIT, "vendor credit", credit_id)

    @registry.tool()
    async def create_vendor_credit(
        vendor_id: str,
        credit_date: str,
        credit_number: str = "",
        description: str = "",
        line_items: list[dict[str, Any]] | None = None,
    ) -> str:
        """
        Create a vendor credit.

        Args:
            vendor_id: Vendor issuing the credit
            credit_date: Credit date (YYYY-MM-DD)
            credit_number: Vendor credit memo number
            description: Description
            line_items: Line items, e.g. [{"amount": "50.00", "chartOfAccountId": "0ca..."}]
        """
        try:
            credit = await ap.create_vendor_credit(
                legacy,
                vendor_id,
                credit_date,
                credit_number=credit_number,
                description=description,
                line_items=line_items,
            )
        except BillcomError as e:
            return failed("creating vendor credit", e)
        return record("Created vendor credit", credit)

    @registry.tool()
    async def update_vendor_credit(
        credit_id: str,
        credit_date: str = "",
        credit_number: str = "",
        description: str = "",
        line_items: list[dict[str, Any]] | None = None,
    ) -> str:
        """
        Update a vendor credit. Empty arguments are left unchanged.

        Args:
            credit_id: Vendor credit id
            credit_date: Credit date (YYYY-MM-DD)
            credit_number: Vendor credit memo number
            description: Description
            line_items: Replacement line items
        """
        try:
            credit = await ap.update_vendor_credit(
                legacy,
                credit_id,
                credit_date=credit_date,
                credit_number=credit_number,
                description=description,
                line_items=line_items,
            )
        except BillcomError as e:
            return failed(f"updating vendor credit {credit_id}", e)
        return record(f"Updated vendor credit {credit_id}", credit)

    @registry.tool()
    async def archive_vendor_credit(credit_id: str) -> str:
        """
        Archive (deactivate) a vendor credit.

        Args:
            credit_id: Vendor credit id
        """
        return await _archive(ap.VENDOR_CREDIT, "vendor credit", credit_id)

    # ==================== Recurring bills ====================

    @registry.tool()
    async def search_recurring_bills(
        start: int = 0,
        max_results: int = 999,
        filters: list[dict[str, Any]] | None = None,
        sort: list[dict[str, Any]] | None = None,
        nested: bool | None = None,
    ) -> str:
        """
        Search recurring bills.

        Args:
            start: Offset of the first record (default: 0)
            max_results: Maximum records to return (default: 999)
            filters: Filter clauses
            sort: Sort options
            nested: Include line items
        """
        return await _search(ap.RECURRING_BILL, "recurring bill", start, max_results, filters, sort, nested)

    @registry.tool()
    async def get_recurring_bill(recurring_bill_id: str) -> str:
        """
        Get a recurring bill by id.

        Args:
            recurring_bill_id: Recurring bill id
        """
        return await _read(ap.RECURRING_BILL, "recurring bill", recurring_bill_id)

    @registry.tool()
    async def create_recurring_bill(
        vendor_id: str,
        time_period: str,
        frequency_per_time_period: str,
        next_due_date: str,
        end_date: str = "",
        days_in_advance: str = "",
        description: str = "",
        line_items: list[dict[str, Any]] | None = None,
    ) -> str:
        """
        Create a recurring bill.

        Args:
            vendor_id: Vendor the bill recurs for
            time_period: "0" none, "1" day, "2" week, "3" month, "4" year
            frequency_per_time_period: How many periods between bills (e.g. "1")
            next_due_date: Next due date (YYYY-MM-DD)
            end_date: Last due date (YYYY-MM-DD)
            days_in_advance: Days before the due date to create each bill
            description: Description
            line_items: Line items, e.g. [{"amount": "99.00"}]
        """
        try:
            bill = await ap.create_recurring_bill(
                legacy,
                vendor_id,
                time_period,
                frequency_per_time_period,
                next_due_date,
                end_date=end_date,
                days_in_advance=days_in_advance,
                description=description,
                line_items=line_items,
            )
        except (BillcomError, ValueError) as e:
            return failed("creating recurring bill", e)
        return record("Created recurring bill", bill)

    @registry.tool()
    async def update_recurring_bill(
        recurring_bill_id: str,
        time_period: str = "",
        frequency_per_time_period: str = "",
        next_due_date: str = "",
        end_date: str = "",
        days_in_advance: str = "",
        description: str = "",
        line_items: list[dict[str, Any]] | None = None,
    ) -> str:
        """
        Update a recurring bill. Empty arguments are left unchanged.

        Args:
            recurring_bill_id: Recurring bill id
            time_period: "0" none, "1" day, "2" week, "3" month, "4" year
            frequency_per_time_period: How many periods between bills
            next_due_date: Next due date (YYYY-MM-DD)
            end_date: Last due date (YYYY-MM-DD)
            days_in_advance: Days before the due date to create each bill
            description: Description
            line_items: Replacement line items
        """
        try:
            bill = await ap.update_recurring_bill(
                legacy,
                recurring_bill_id,
                time_period=time_period or None,
                frequency_per_time_period=frequency_per_time_period,
                next_due_date=next_due_date,
                end_date=end_date,
                days_in_advance=days_in_advance,
                description=description,
                line_items=line_items,
            )
        except (BillcomError, ValueError) as e:
            return failed(f"updating recurring bill {recurring_bill_id}", e)
        return record(f"Updated recurring bill {recurring_bill_id}", bill)

    @registry.tool()
    async def archive_recurring_bill(recurring_bill_id: str) -> str:
        """
        Archive (deactivate) a recurring bill.

        Args:
            recurring_bill_id: Recurring bill id
        """
        return await _archive(ap.RECURRING_BILL, "recurring bill", recurring_bill_id)

    return registry.count
