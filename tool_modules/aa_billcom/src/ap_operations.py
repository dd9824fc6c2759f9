"""Accounts-payable operations on the legacy API.

Vendors, bills, bill payments (``SentPay``), vendor credits and recurring bills
all follow the same List/Crud endpoint scheme, so the generic helpers here take
the entity name and the per-entity functions only shape the request object.
"""

import logging
from typing import Any

from .legacy_client import LegacyClient
from .models import SearchFilter, SortOption, compact, list_request

logger = logging.getLogger(__name__)

VENDOR = "Vendor"
BILL = "Bill"
BILL_PAYMENT = "SentPay"
VENDOR_CREDIT = "VendorCredit"
RECURRING_BILL = "RecurringBill"

# Crud/Update with isActive "2" marks the record inactive.
ARCHIVED = "2"

# timePeriod codes for recurring bills
TIME_PERIODS = {"0": "None", "1": "Day", "2": "Week", "3": "Month", "4": "Year"}


# ==================== Generic entity calls ====================


async def search_entities(
    legacy: LegacyClient,
    entity: str,
    start: int | None = None,
    max_results: int | None = None,
    filters: list[SearchFilter | dict[str, Any]] | None = None,
    sort: list[SortOption | dict[str, Any]] | None = None,
    nested: bool | None = None,
) -> list[dict[str, Any]]:
    result = await legacy.call(f"List/{entity}", list_request(start, max_results, filters, sort, nested))
    return result or []


async def read_entity(legacy: LegacyClient, entity: str, entity_id: str) -> dict[str, Any]:
    return await legacy.call(f"Crud/Read/{entity}", {"id": entity_id})


async def create_entity(legacy: LegacyClient, entity: str, fields: dict[str, Any]) -> dict[str, Any]:
    obj = {"entity": entity, **compact(fields)}
    logger.info(f"Creating {entity}")
    return await legacy.call(f"Crud/Create/{entity}", {"obj": obj})


async def update_entity(
    legacy: LegacyClient, entity: str, entity_id: str, fields: dict[str, Any]
) -> dict[str, Any]:
    """Send only the provided fields; the id is always included."""
    obj = {"entity": entity, "id": entity_id, **compact(fields)}
    logger.info(f"Updating {entity} {entity_id}")
    return await legacy.call(f"Crud/Update/{entity}", {"obj": obj})


async def archive_entity(legacy: LegacyClient, entity: str, entity_id: str) -> dict[str, Any]:
    return await update_entity(legacy, entity, entity_id, {"isActive": ARCHIVED})


# ==================== Vendors ====================

VENDOR_FIELDS = (
    "shortName",
    "nameOnCheck",
    "companyName",
    "accNumber",
    "taxId",
    "track1099",
    "address1",
    "address2",
    "address3",
    "address4",
    "addressCity",
    "addressState",
    "addressZip",
    "addressCountry",
    "email",
    "phone",
    "fax",
    "payBy",
    "description",
    "contactFirstName",
    "contactLastName",
)


def _pick(fields: dict[str, Any], allowed: tuple[str, ...]) -> dict[str, Any]:
    unknown = sorted(set(fields) - set(allowed))
    if unknown:
        raise ValueError(f"Unknown field(s): {', '.join(unknown)}")
    return fields


async def create_vendor(legacy: LegacyClient, name: str, fields: dict[str, Any] | None = None) -> dict[str, Any]:
    """Create a vendor. ``fields`` uses API names (e.g. ``addressCity``)."""
    if not name:
        raise ValueError("Vendor name is required")
    return await create_entity(legacy, VENDOR, {**_pick(fields or {}, VENDOR_FIELDS), "name": name})


async def update_vendor(legacy: LegacyClient, vendor_id: str, fields: dict[str, Any]) -> dict[str, Any]:
    if not fields:
        raise ValueError("No vendor fields to update")
    return await update_entity(legacy, VENDOR, vendor_id, _pick(fields, ("name", "isActive") + VENDOR_FIELDS))


# ==================== Bills ====================


async def create_bill(
    legacy: LegacyClient,
    vendor_id: str,
    invoice_date: str,
    due_date: str,
    invoice_number: str | None = None,
    gl_posting_date: str | None = None,
    description: str | None = None,
    po_number: str | None = None,
    line_items: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return await create_entity(
        legacy,
        BILL,
        {
            "vendorId": vendor_id,
            "invoiceDate": invoice_date,
            "dueDate": due_date,
            "invoiceNumber": invoice_number,
            "glPostingDate": gl_posting_date,
            "description": description,
            "poNumber": po_number,
            "billLineItems": line_items or None,
        },
    )


async def update_bill(
    legacy: LegacyClient,
    bill_id: str,
    invoice_number: str | None = None,
    invoice_date: str | None = None,
    due_date: str | None = None,
    gl_posting_date: str | None = None,
    description: str | None = None,
    po_number: str | None = None,
    line_items: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return await update_entity(
        legacy,
        BILL,
        bill_id,
        {
            "invoiceNumber": invoice_number,
            "invoiceDate": invoice_date,
            "dueDate": due_date,
            "glPostingDate": gl_posting_date,
            "description": description,
            "poNumber": po_number,
            "billLineItems": line_items or None,
        },
    )


# ==================== Bill payments ====================


async def create_bill_payment(
    legacy: LegacyClient,
    vendor_id: str,
    process_date: str,
    chart_of_account_id: str,
    bill_payments: list[dict[str, Any]],
    description: str | None = None,
    to_print_check: str | None = None,
) -> dict[str, Any]:
    """Pay one or more bills. ``bill_payments`` items are ``{billId, amount}``."""
    if not bill_payments:
        raise ValueError("At least one bill payment ({billId, amount}) is required")
    for item in bill_payments:
        if "billId" not in item or "amount" not in item:
            raise ValueError(f"Bill payment items need 'billId' and 'amount': {item}")
    return await create_entity(
        legacy,
        BILL_PAYMENT,
        {
            "vendorId": vendor_id,
            "processDate": process_date,
            "chartOfAccountId": chart_of_account_id,
            "billPayments": bill_payments,
            "description": description,
            "toPrintCheck": to_print_check,
        },
    )


async def void_bill_payment(legacy: LegacyClient, payment_id: str) -> bool:
    """Void an unprocessed payment."""
    await legacy.call(f"Void/{BILL_PAYMENT}", {"sentPayId": payment_id})
    return True


# ==================== Vendor credits ====================


async def create_vendor_credit(
    legacy: LegacyClient,
    vendor_id: str,
    credit_date: str,
    credit_number: str | None = None,
    description: str | None = None,
    line_items: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return await create_entity(
        legacy,
        VENDOR_CREDIT,
        {
            "vendorId": vendor_id,
            "creditDate": credit_date,
            "creditNumber": credit_number,
            "description": description,
            "vendorCreditLineItems": line_items or None,
        },
    )


async def update_vendor_credit(
    legacy: LegacyClient,
    credit_id: str,
    credit_date: str | None = None,
    credit_number: str | None = None,
    description: str | None = None,
    line_items: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return await update_entity(
        legacy,
        VENDOR_CREDIT,
        credit_id,
        {
            "creditDate": credit_date,
            "creditNumber": credit_number,
            "description": description,
            "vendorCreditLineItems": line_items or None,
        },
    )


# ==================== Recurring bills ====================


def _check_time_period(time_period: str | None) -> None:
    if time_period is not None and time_period not in TIME_PERIODS:
        choices = ", ".join(f"'{k}'={v}" for k, v in TIME_PERIODS.items())
        raise ValueError(f"Invalid timePeriod '{time_period}'. Use one of: {choices}")


async def create_recurring_bill(
    legacy: LegacyClient,
    vendor_id: str,
    time_period: str,
    frequency_per_time_period: str,
    next_due_date: str,
    end_date: str | None = None,
    days_in_advance: str | None = None,
    description: str | None = None,
    line_items: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    _check_time_period(time_period)
    return await create_entity(
        legacy,
        RECURRING_BILL,
        {
            "vendorId": vendor_id,
            "timePeriod": time_period,
            "frequencyPerTimePeriod": frequency_per_time_period,
            "nextDueDate": next_due_date,
            "endDate": end_date,
            "daysInAdvance": days_in_advance,
            "description": description,
            "recurringBillLineItems": line_items or None,
        },
    )


async def update_recurring_bill(
    legacy: LegacyClient,
    recurring_bill_id: str,
    time_period: str | None = None,
    frequency_per_time_period: str | None = None,
    next_due_date: str | None = None,
    end_date: str | None = None,
    days_in_advance: str | None = None,
    description: str | None = None,
    line_items: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    _check_time_period(time_period)
    return await update_entity(
        legacy,
        RECURRING_BILL,
        recurring_bill_id,
        {
            "timePeriod": time_period,
            "frequencyPerTimePeriod": frequency_per_time_period,
            "nextDueDate": next_due_date,
            "endDate": end_date,
            "daysInAdvance": days_in_advance,
            "description": description,
            "recurringBillLineItems": line_items or None,
        },
    )
