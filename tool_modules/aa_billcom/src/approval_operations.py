"""Bill approval workflow, on both the legacy API and the v3 gateway."""

import logging
from typing import Any

from .gateway_client import GatewayClient
from .legacy_client import LegacyClient
from .models import SearchFilter, SortOption, list_request

logger = logging.getLogger(__name__)

PENDING_STATUS = "1"

APPROVE = "approve"
DENY = "deny"


# ==================== Legacy API ====================


async def get_approval_policies(legacy: LegacyClient) -> list[dict[str, Any]]:
    return await legacy.call("List/ApprovalPolicy", list_request()) or []


async def get_pending_approvals(
    legacy: LegacyClient,
    object_type: str | None = None,
    start: int | None = None,
    max_results: int | None = None,
) -> list[dict[str, Any]]:
    filters = [SearchFilter("status", "eq", PENDING_STATUS)]
    if object_type:
        filters.append(SearchFilter("objectType", "eq", object_type))
    return await legacy.call("List/Approval", list_request(start, max_results, filters)) or []


async def approve_bill(legacy: LegacyClient, bill_id: str) -> bool:
    await legacy.call("Approve/Bill", {"objectId": bill_id})
    logger.info(f"Approved bill {bill_id}")
    return True


async def reject_bill(legacy: LegacyClient, bill_id: str, reason: str | None = None) -> bool:
    data: dict[str, Any] = {"objectId": bill_id}
    if reason:
        data["reason"] = reason
    await legacy.call("Deny/Bill", data)
    logger.info(f"Rejected bill {bill_id}")
    return True


async def get_approval_history(legacy: LegacyClient, object_id: str, object_type: str) -> list[dict[str, Any]]:
    """Approval records for one object, newest first."""
    filters = [
        SearchFilter("objectId", "eq", object_id),
        SearchFilter("objectType", "eq", object_type),
    ]
    sort = [SortOption("createdTime", asc=False)]
    return await legacy.call("List/Approval", list_request(filters=filters, sort=sort)) or []


# ==================== v3 gateway ====================


async def get_approval_policies_v3(
    gateway: GatewayClient,
    page: int | None = None,
    page_size: int | None = None,
    active_only: bool | None = None,
) -> list[dict[str, Any]]:
    result = await gateway.get(
        "/bill-approvals",
        {"page": page, "pageSize": page_size, "isActive": active_only},
    )
    return result or []


async def get_pending_approvals_v3(
    gateway: GatewayClient,
    page: int | None = None,
    page_size: int | None = None,
) -> list[dict[str, Any]]:
    """Bills waiting on the authenticated user's approval."""
    result = await gateway.get(
        "/bill-approvals/pending-user-approvals",
        {"page": page, "pageSize": page_size},
    )
    return result or []


async def _bill_action(gateway: GatewayClient, bill_id: str, action: str, comment: str | None) -> Any:
    body: dict[str, Any] = {"billId": bill_id, "action": action}
    if comment:
        body["comment"] = comment
    result = await gateway.post("/bill-approvals/actions", body)
    logger.info(f"Sent {action} for bill {bill_id}")
    return result or {"billId": bill_id, "action": action, "success": True}


async def approve_bill_v3(gateway: GatewayClient, bill_id: str, comment: str | None = None) -> Any:
    return await _bill_action(gateway, bill_id, APPROVE, comment)


async def deny_bill_v3(gateway: GatewayClient, bill_id: str, comment: str | None = None) -> Any:
    return await _bill_action(gateway, bill_id, DENY, comment)
