"""Spend & Expense operations: budgets, cards, transactions, reimbursements.

Spend records are keyed by ``uuid``. Every record returned here also carries an
``id`` equal to its ``uuid`` so callers written against the legacy API keep
working.
"""

import logging
from typing import Any

from tool_modules.aa_billcom.src.models import compact
from tool_modules.aa_billcom.src.spend_client import SpendClient

logger = logging.getLogger(__name__)


def with_legacy_id(record: Any) -> Any:
    """Copy ``uuid`` onto ``id`` (keeping an existing id when uuid is absent)."""
    if isinstance(record, dict):
        return {**record, "id": record.get("uuid") or record.get("id")}
    return record


def with_legacy_ids(records: Any) -> list[Any]:
    if not records:
        return []
    if not isinstance(records, list):
        records = [records]
    return [with_legacy_id(r) for r in records]


def resolve_uuid(kind: str, uuid: str | None, legacy_id: str | None) -> str:
    resolved = uuid or legacy_id
    if not resolved:
        raise ValueError(f"{kind} uuid is required")
    return resolved


def _flag(value: bool | None) -> str | None:
    if value is None:
        return None
    return "true" if value else "false"


# ==================== Budgets ====================


async def search_budgets(
    spend: SpendClient,
    cursor: str | None = None,
    limit: int | None = None,
    name: str | None = None,
    is_active: bool | None = None,
    budget_type: str | None = None,
) -> list[dict[str, Any]]:
    params = compact(
        {
            "cursor": cursor,
            "limit": limit,
            "name": name,
            "isActive": _flag(is_active),
            "budgetType": budget_type,
        }
    )
    return with_legacy_ids(await spend.get("budgets", params))


async def get_budget(spend: SpendClient, uuid: str) -> dict[str, Any]:
    return with_legacy_id(await spend.get(f"budgets/{uuid}"))


async def create_budget(
    spend: SpendClient,
    name: str,
    amount: str,
    start_date: str,
    end_date: str,
    budget_type: str | None = None,
    description: str | None = None,
    department_id: str | None = None,
    location_id: str | None = None,
    chart_of_account_id: str | None = None,
) -> dict[str, Any]:
    body = {
        "name": name,
        "amount": amount,
        "startDate": start_date,
        "endDate": end_date,
        **compact(
            {
                "budgetType": budget_type,
                "description": description,
                "departmentId": department_id,
                "locationId": location_id,
                "chartOfAccountId": chart_of_account_id,
            }
        ),
    }
    logger.info(f"Creating budget {name}")
    return with_legacy_id(await spend.post("budgets", body))


async def update_budget(
    spend: SpendClient,
    uuid: str | None = None,
    legacy_id: str | None = None,
    **fields: Any,
) -> dict[str, Any]:
    """PATCH a budget. Accepts ``uuid`` or the legacy ``id``."""
    budget_uuid = resolve_uuid("Budget", uuid, legacy_id)
    return with_legacy_id(await spend.patch(f"budgets/{budget_uuid}", compact(fields)))


# ==================== Cards ====================


async def search_cards(
    spend: SpendClient,
    cursor: str | None = None,
    limit: int | None = None,
    card_type: str | None = None,
    status: str | None = None,
    user_id: str | None = None,
    name: str | None = None,
) -> list[dict[str, Any]]:
    """List cards. ``name`` is matched client-side against the card or cardholder name."""
    params = compact({"cursor": cursor, "limit": limit, "cardType": card_type, "status": status, "userId": user_id})
    cards = with_legacy_ids(await spend.get("cards", params))
    if name:
        needle = name.lower()
        cards = [
            c
            for c in cards
            if needle in str(c.get("name") or "").lower() or needle in str(c.get("cardholderName") or "").lower()
        ]
    return cards


async def get_card(spend: SpendClient, uuid: str) -> dict[str, Any]:
    return with_legacy_id(await spend.get(f"cards/{uuid}"))


async def create_virtual_card(
    spend: SpendClient,
    cardholder_name: str,
    user_id: str | None = None,
    spend_limit: str | None = None,
    spend_limit_period: str | None = None,
    budget_id: str | None = None,
    vendor_id: str | None = None,
    description: str | None = None,
) -> dict[str, Any]:
    body = {
        "cardType": "virtual",
        "cardholderName": cardholder_name,
        **compact(
            {
                "userId": user_id,
                "spendLimit": spend_limit,
                "spendLimitPeriod": spend_limit_period,
                "budgetId": budget_id,
                "vendorId": vendor_id,
                "description": description,
            }
        ),
    }
    logger.info(f"Creating virtual card for {cardholder_name}")
    return with_legacy_id(await spend.post("cards", body))


async def freeze_card(spend: SpendClient, uuid: str) -> dict[str, Any]:
    return with_legacy_id(await spend.post(f"cards/{uuid}/freeze"))


async def unfreeze_card(spend: SpendClient, uuid: str) -> dict[str, Any]:
    return with_legacy_id(await spend.post(f"cards/{uuid}/unfreeze"))


# ==================== Transactions ====================


async def search_transactions(
    spend: SpendClient,
    cursor: str | None = None,
    limit: int | None = None,
    card_id: str | None = None,
    status: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    merchant_name: str | None = None,
) -> list[dict[str, Any]]:
    params = compact(
        {
            "cursor": cursor,
            "limit": limit,
            "cardId": card_id,
            "status": status,
            "startDate": start_date,
            "endDate": end_date,
            "merchantName": merchant_name,
        }
    )
    return with_legacy_ids(await spend.get("transactions", params))


async def get_transaction(spend: SpendClient, uuid: str) -> dict[str, Any]:
    return with_legacy_id(await spend.get(f"transactions/{uuid}"))


async def update_transaction(
    spend: SpendClient,
    uuid: str | None = None,
    legacy_id: str | None = None,
    description: str | None = None,
    chart_of_account_id: str | None = None,
    department_id: str | None = None,
    location_id: str | None = None,
    memo: str | None = None,
) -> dict[str, Any]:
    transaction_uuid = resolve_uuid("Transaction", uuid, legacy_id)
    body = compact(
        {
            "description": description,
            "chartOfAccountId": chart_of_account_id,
            "departmentId": department_id,
            "locationId": location_id,
            "memo": memo,
        }
    )
    return with_legacy_id(await spend.patch(f"transactions/{transaction_uuid}", body))


# ==================== Reimbursements ====================


async def search_reimbursements(
    spend: SpendClient,
    cursor: str | None = None,
    limit: int | None = None,
    user_id: str | None = None,
    status: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
) -> list[dict[str, Any]]:
    params = compact(
        {
            "cursor": cursor,
            "limit": limit,
            "userId": user_id,
            "status": status,
            "startDate": start_date,
            "endDate": end_date,
        }
    )
    return with_legacy_ids(await spend.get("reimbursements", params))


async def get_reimbursement(spend: SpendClient, uuid: str) -> dict[str, Any]:
    return with_legacy_id(await spend.get(f"reimbursements/{uuid}"))


async def create_reimbursement(
    spend: SpendClient,
    user_id: str,
    line_items: list[dict[str, Any]],
    description: str | None = None,
) -> dict[str, Any]:
    """Line items need at least ``amount`` and ``expenseDate``."""
    if not line_items:
        raise ValueError("At least one reimbursement line item is required")
    for item in line_items:
        if "amount" not in item or "expenseDate" not in item:
            raise ValueError(f"Reimbursement line items need 'amount' and 'expenseDate': {item}")
    body: dict[str, Any] = {"userId": user_id, "lineItems": line_items}
    if description:
        body["description"] = description
    return with_legacy_id(await spend.post("reimbursements", body))


async def approve_reimbursement(spend: SpendClient, uuid: str) -> dict[str, Any] | bool:
    """Returns the updated reimbursement, or True when the API sends no record back."""
    result = await spend.post(f"reimbursements/{uuid}/approve")
    if isinstance(result, dict) and "uuid" in result:
        return with_legacy_id(result)
    return True
