"""Bill.com Spend & Expense MCP Server - Budgets, cards, transactions, reimbursements.

These tools authenticate with BILLCOM_SPEND_API_TOKEN and are independent of
the legacy session. Without a token every tool returns a configuration error
instead of calling the API.
"""

import logging
from collections.abc import Awaitable
from typing import TYPE_CHECKING, Any

# Setup project path for server imports (must be before server imports)
from tool_modules.common import PROJECT_ROOT  # Sets up sys.path

__project_root__ = PROJECT_ROOT  # Module initialization

from server.errors import ErrorCodes, tool_error, tool_success
from server.tool_registry import ToolRegistry
from tool_modules.aa_billcom.src.common import failed, found, record
from tool_modules.aa_billcom.src.errors import BillcomError

from . import operations as ops

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from tool_modules.aa_billcom.src.context import BillcomContext

logger = logging.getLogger(__name__)


def spend_not_configured() -> str:
    return tool_error(
        "Spend & Expense API is not configured",
        error="BILLCOM_SPEND_API_TOKEN must be set in environment variables for Spend & Expense API access",
        code=ErrorCodes.CONFIG_MISSING,
        hint="Create an API token in Bill.com Spend & Expense and add it to .env",
    )


def register_tools(server: "FastMCP", context: "BillcomContext") -> int:
    """Register Spend & Expense tools with the MCP server."""
    registry = ToolRegistry(server)
    spend = context.spend

    async def _run(action: str, call: Awaitable[Any]) -> tuple[Any, str | None]:
        """Await an operation, returning (result, None) or (None, error text)."""
        try:
            return await call, None
        except (BillcomError, ValueError) as e:
            return None, failed(action, e)

    async def _search(label: str, call: Awaitable[list[dict[str, Any]]]) -> str:
        results, error = await _run(f"searching {label}s", call)
        return error or found(label, results)

    async def _single(action: str, title: str, call: Awaitable[Any]) -> str:
        result, error = await _run(action, call)
        return error or record(title, result)

    # ==================== Budgets ====================

    @registry.tool()
    async def search_budgets(
        cursor: str = "",
        limit: int | None = None,
        name: str = "",
        is_active: bool | None = None,
        budget_type: str = "",
    ) -> str:
        """
        Search budgets.

        Args:
            cursor: Pagination cursor from a previous page
            limit: Maximum results
            name: Budget name filter
            is_active: Only active (true) or inactive (false) budgets
            budget_type: Budget type filter
        """
        if not spend.is_configured():
            return spend_not_configured()
        return await _search(
            "budget",
            ops.search_budgets(spend, cursor or None, limit, name or None, is_active, budget_type or None),
        )

    @registry.tool()
    async def get_budget(uuid: str) -> str:
        """
        Get a budget.

        Args:
            uuid: Budget uuid
        """
        if not spend.is_configured():
            return spend_not_configured()
        return await _single(f"getting budget {uuid}", f"Budget {uuid}", ops.get_budget(spend, uuid))

    @registry.tool()
    async def create_budget(
        name: str,
        amount: str,
        start_date: str,
        end_date: str,
        budget_type: str = "",
        description: str = "",
        department_id: str = "",
        location_id: str = "",
        chart_of_account_id: str = "",
    ) -> str:
        """
        Create a budget.

        Args:
            name: Budget name
            amount: Budget amount (e.g. "5000.00")
            start_date: Start date (YYYY-MM-DD)
            end_date: End date (YYYY-MM-DD)
            budget_type: Budget type
            description: Description
            department_id: Department id
            location_id: Location id
            chart_of_account_id: GL account id
        """
        if not spend.is_configured():
            return spend_not_configured()
        return await _single(
            "creating budget",
            f"Created budget {name}",
            ops.create_budget(
                spend,
                name,
                amount,
                start_date,
                end_date,
                budget_type=budget_type,
                description=description,
                department_id=department_id,
                location_id=location_id,
                chart_of_account_id=chart_of_account_id,
            ),
        )

    @registry.tool()
    async def update_budget(
        uuid: str = "",
        id: str = "",
        name: str = "",
        amount: str = "",
        start_date: str = "",
        end_date: str = "",
        budget_type: str = "",
        description: str = "",
        is_active: str = "",
    ) -> str:
        """
        Update a budget. Empty arguments are left unchanged.

        Args:
            uuid: Budget uuid
            id: Legacy alias for uuid
            name: Budget name
            amount: Budget amount
            start_date: Start date (YYYY-MM-DD)
            end_date: End date (YYYY-MM-DD)
            budget_type: Budget type
            description: Description
            is_active: "true" or "false"
        """
        if not spend.is_configured():
            return spend_not_configured()
        target = uuid or id
        return await _single(
            f"updating budget {target}",
            f"Updated budget {target}",
            ops.update_budget(
                spend,
                uuid=uuid or None,
                legacy_id=id or None,
                name=name,
                amount=amount,
                startDate=start_date,
                endDate=end_date,
                budgetType=budget_type,
                description=description,
                isActive=is_active,
            ),
        )

    # ==================== Cards ====================

    @registry.tool()
    async def search_cards(
        cursor: str = "",
        limit: int | None = None,
        card_type: str = "",
        status: str = "",
        user_id: str = "",
        name: str = "",
    ) -> str:
        """
        Search cards.

        Args:
            cursor: Pagination cursor from a previous page
            limit: Maximum results
            card_type: "physical" or "virtual"
            status: Card status filter
            user_id: Cardholder user id
            name: Case-insensitive match on card or cardholder name
        """
        if not spend.is_configured():
            return spend_not_configured()
        return await _search(
            "card",
            ops.search_cards(
                spend, cursor or None, limit, card_type or None, status or None, user_id or None, name or None
            ),
        )

    @registry.tool()
    async def get_card(uuid: str) -> str:
        """
        Get a card.

        Args:
            uuid: Card uuid
        """
        if not spend.is_configured():
            return spend_not_configured()
        return await _single(f"getting card {uuid}", f"Card {uuid}", ops.get_card(spend, uuid))

    @registry.tool()
    async def create_virtual_card(
        cardholder_name: str,
        user_id: str = "",
        spend_limit: str = "",
        spend_limit_period: str = "",
        budget_id: str = "",
        vendor_id: str = "",
        description: str = "",
    ) -> str:
        """
        Create a virtual card.

        Args:
            cardholder_name: Name on the card
            user_id: Cardholder user id
            spend_limit: Spend limit amount
            spend_limit_period: transaction, daily, weekly, monthly, yearly or total
            budget_id: Budget to draw from
            vendor_id: Vendor the card is locked to
            description: Description
        """
        if not spend.is_configured():
            return spend_not_configured()
        return await _single(
            "creating virtual card",
            f"Created virtual card for {cardholder_name}",
            ops.create_virtual_card(
                spend,
                cardholder_name,
                user_id=user_id,
                spend_limit=spend_limit,
                spend_limit_period=spend_limit_period,
                budget_id=budget_id,
                vendor_id=vendor_id,
                description=description,
            ),
        )

    @registry.tool()
    async def freeze_card(uuid: str) -> str:
        """
        Freeze a card so it declines new charges.

        Args:
            uuid: Card uuid
        """
        if not spend.is_configured():
            return spend_not_configured()
        return await _single(f"freezing card {uuid}", f"Froze card {uuid}", ops.freeze_card(spend, uuid))

    @registry.tool()
    async def unfreeze_card(uuid: str) -> str:
        """
        Unfreeze a frozen card.

        Args:
            uuid: Card uuid
        """
        if not spend.is_configured():
            return spend_not_configured()
        return await _single(f"unfreezing card {uuid}", f"Unfroze card {uuid}", ops.unfreeze_card(spend, uuid))

    # ==================== Transactions ====================

    @registry.tool()
    async def search_transactions(
        cursor: str = "",
        limit: int | None = None,
        card_id: str = "",
        status: str = "",
        start_date: str = "",
        end_date: str = "",
        merchant_name: str = "",
    ) -> str:
        """
        Search card transactions.

        Args:
            cursor: Pagination cursor from a previous page
            limit: Maximum results
            card_id: Card uuid
            status: Transaction status
            start_date: Earliest date (YYYY-MM-DD)
            end_date: Latest date (YYYY-MM-DD)
            merchant_name: Merchant name filter
        """
        if not spend.is_configured():
            return spend_not_configured()
        return await _search(
            "transaction",
            ops.search_transactions(
                spend,
                cursor or None,
                limit,
                card_id or None,
                status or None,
                start_date or None,
                end_date or None,
                merchant_name or None,
            ),
        )

    @registry.tool()
    async def get_transaction(uuid: str) -> str:
        """
        Get a transaction.

        Args:
            uuid: Transaction uuid
        """
        if not spend.is_configured():
            return spend_not_configured()
        return await _single(f"getting transaction {uuid}", f"Transaction {uuid}", ops.get_transaction(spend, uuid))

    @registry.tool()
    async def update_transaction(
        uuid: str = "",
        id: str = "",
        description: str = "",
        chart_of_account_id: str = "",
        department_id: str = "",
        location_id: str = "",
        memo: str = "",
    ) -> str:
        """
        Update a transaction's coding. Empty arguments are left unchanged.

        Args:
            uuid: Transaction uuid
            id: Legacy alias for uuid
            description: Description
            chart_of_account_id: GL account id
            department_id: Department id
            location_id: Location id
            memo: Memo
        """
        if not spend.is_configured():
            return spend_not_configured()
        target = uuid or id
        return await _single(
            f"updating transaction {target}",
            f"Updated transaction {target}",
            ops.update_transaction(
                spend,
                uuid=uuid or None,
                legacy_id=id or None,
                description=description,
                chart_of_account_id=chart_of_account_id,
                department_id=department_id,
                location_id=location_id,
                memo=memo,
            ),
        )

    # ==================== Reimbursements ====================

    @registry.tool()
    async def search_reimbursements(
        cursor: str = "",
        limit: int | None = None,
        user_id: str = "",
        status: str = "",
        start_date: str = "",
        end_date: str = "",
    ) -> str:
        """
        Search reimbursement requests.

        Args:
            cursor: Pagination cursor from a previous page
            limit: Maximum results
            user_id: Requesting user id
            status: Reimbursement status
            start_date: Earliest date (YYYY-MM-DD)
            end_date: Latest date (YYYY-MM-DD)
        """
        if not spend.is_configured():
            return spend_not_configured()
        return await _search(
            "reimbursement",
            ops.search_reimbursements(
                spend, cursor or None, limit, user_id or None, status or None, start_date or None, end_date or None
            ),
        )

    @registry.tool()
    async def get_reimbursement(uuid: str) -> str:
        """
        Get a reimbursement request.

        Args:
            uuid: Reimbursement uuid
        """
        if not spend.is_configured():
            return spend_not_configured()
        return await _single(
            f"getting reimbursement {uuid}", f"Reimbursement {uuid}", ops.get_reimbursement(spend, uuid)
        )

    @registry.tool()
    async def create_reimbursement(
        user_id: str,
        line_items: list[dict[str, Any]],
        description: str = "",
    ) -> str:
        """
        Create a reimbursement request.

        Args:
            user_id: User being reimbursed
            line_items: Expenses, e.g. [{"amount": "42.50", "expenseDate": "2024-05-01", "description": "Taxi"}]
            description: Description
        """
        if not spend.is_configured():
            return spend_not_configured()
        return await _single(
            "creating reimbursement",
            "Created reimbursement",
            ops.create_reimbursement(spend, user_id, line_items, description or None),
        )

    @registry.tool()
    async def approve_reimbursement(uuid: str) -> str:
        """
        Approve a reimbursement request.

        Args:
            uuid: Reimbursement uuid
        """
        if not spend.is_configured():
            return spend_not_configured()
        result, error = await _run(f"approving reimbursement {uuid}", ops.approve_reimbursement(spend, uuid))
        if error:
            return error
        if result is True:
            return tool_success(f"Successfully approved reimbursement {uuid}")
        return record(f"Approved reimbursement {uuid}", result)

    return registry.count
