"""Bill.com MCP Server - Approval, document and session tools (extra tools).

Approvals are available on both the legacy API and the v3 gateway; the v3
tools reuse the legacy session, so no extra credentials are needed.
"""

import logging
from typing import TYPE_CHECKING, Any

# Setup project path for server imports (must be before server imports)
from tool_modules.common import PROJECT_ROOT  # Sets up sys.path

__project_root__ = PROJECT_ROOT  # Module initialization

from server.errors import tool_info, tool_success
from server.tool_registry import ToolRegistry

from . import approval_operations as approvals
from . import document_operations as documents
from .common import failed, found, record
from .errors import BillcomError

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from .context import BillcomContext

logger = logging.getLogger(__name__)


def register_tools(server: "FastMCP", context: "BillcomContext") -> int:
    """Register approval, document and session tools with the MCP server."""
    registry = ToolRegistry(server)
    legacy = context.legacy
    gateway = context.gateway

    # ==================== Approvals (legacy API) ====================

    @registry.tool()
    async def get_approval_policies() -> str:
        """List the organisation's approval policies."""
        try:
            policies = await approvals.get_approval_policies(legacy)
        except BillcomError as e:
            return failed("getting approval policies", e)
        return found("approval policy", policies)

    @registry.tool()
    async def get_pending_approvals(object_type: str = "", start: int = 0, max_results: int = 999) -> str:
        """
        List approvals that are still pending.

        Args:
            object_type: Restrict to one object type (e.g. "Bill")
            start: Offset of the first record (default: 0)
            max_results: Maximum records to return (default: 999)
        """
        try:
            pending = await approvals.get_pending_approvals(legacy, object_type or None, start, max_results)
        except BillcomError as e:
            return failed("getting pending approvals", e)
        return found("pending approval", pending)

    @registry.tool()
    async def approve_bill(bill_id: str) -> str:
        """
        Approve a bill as the logged-in user.

        Args:
            bill_id: Bill id
        """
        try:
            await approvals.approve_bill(legacy, bill_id)
        except BillcomError as e:
            return failed(f"approving bill {bill_id}", e)
        return tool_success(f"Successfully approved bill {bill_id}")

    @registry.tool()
    async def reject_bill(bill_id: str, reason: str = "") -> str:
        """
        Reject (deny) a bill.

        Args:
            bill_id: Bill id
            reason: Reason recorded with the rejection
        """
        try:
            await approvals.reject_bill(legacy, bill_id, reason or None)
        except BillcomError as e:
            return failed(f"rejecting bill {bill_id}", e)
        return tool_success(f"Successfully rejected bill {bill_id}")

    @registry.tool()
    async def get_approval_history(object_id: str, object_type: str = "Bill") -> str:
        """
        Show the approval history of an object, newest first.

        Args:
            object_id: Id of the bill, vendor credit, etc.
            object_type: Object type (default: "Bill")
        """
        try:
            history = await approvals.get_approval_history(legacy, object_id, object_type)
        except BillcomError as e:
            return failed(f"getting approval history for {object_id}", e)
        return found("approval record", history)

    # ==================== Approvals (v3 gateway) ====================

    @registry.tool()
    async def get_approval_policies_v3(
        page: int | None = None,
        page_size: int | None = None,
        active_only: bool | None = None,
    ) -> str:
        """
        List approval policies with their rules and approvers (v3 API).

        Args:
            page: Page number
            page_size: Results per page
            active_only: Only active policies when true
        """
        try:
            policies = await approvals.get_approval_policies_v3(gateway, page, page_size, active_only)
        except BillcomError as e:
            return failed("getting approval policies", e)
        return found("approval policy", policies)

    @registry.tool()
    async def get_pending_approvals_v3(page: int | None = None, page_size: int | None = None) -> str:
        """
        List bills waiting on the current user's approval (v3 API).

        Args:
            page: Page number
            page_size: Results per page
        """
        try:
            pending = await approvals.get_pending_approvals_v3(gateway, page, page_size)
        except BillcomError as e:
            return failed("getting pending approvals", e)
        return found("pending approval", pending)

    @registry.tool()
    async def approve_bill_v3(bill_id: str, comment: str = "") -> str:
        """
        Approve a bill through the v3 approval workflow.

        Args:
            bill_id: Bill id
            comment: Optional approval comment
        """
        try:
            result = await approvals.approve_bill_v3(gateway, bill_id, comment or None)
        except BillcomError as e:
            return failed(f"approving bill {bill_id}", e)
        return record(f"Approved bill {bill_id}", result)

    @registry.tool()
    async def deny_bill_v3(bill_id: str, comment: str = "") -> str:
        """
        Deny a bill through the v3 approval workflow.

        Args:
            bill_id: Bill id
            comment: Optional reason
        """
        try:
            result = await approvals.deny_bill_v3(gateway, bill_id, comment or None)
        except BillcomError as e:
            return failed(f"denying bill {bill_id}", e)
        return record(f"Denied bill {bill_id}", result)

    # ==================== Documents ====================

    @registry.tool()
    async def list_documents(
        start: int = 0,
        max_results: int = 999,
        filters: list[dict[str, Any]] | None = None,
        sort: list[dict[str, Any]] | None = None,
    ) -> str:
        """
        List stored documents.

        Args:
            start: Offset of the first record (default: 0)
            max_results: Maximum records to return (default: 999)
            filters: Filter clauses
            sort: Sort options
        """
        try:
            docs = await documents.list_documents(legacy, start, max_results, filters, sort)
        except (BillcomError, ValueError) as e:
            return failed("listing documents", e)
        return found("document", docs)

    @registry.tool()
    async def get_document(document_id: str) -> str:
        """
        Get document metadata.

        Args:
            document_id: Document id
        """
        try:
            doc = await documents.get_document(legacy, document_id)
        except BillcomError as e:
            return failed(f"getting document {document_id}", e)
        return record(f"Document {document_id}", doc)

    @registry.tool()
    async def delete_document(document_id: str) -> str:
        """
        Delete a document.

        Args:
            document_id: Document id
        """
        try:
            await documents.delete_document(legacy, document_id)
        except BillcomError as e:
            return failed(f"deleting document {document_id}", e)
        return tool_success(f"Successfully deleted document {document_id}")

    @registry.tool()
    async def upload_document(
        file_path: str,
        file_name: str = "",
        folder_id: str = "",
        description: str = "",
        mime_type: str = "",
    ) -> str:
        """
        Upload a local file as a Bill.com document.

        Args:
            file_path: Path of the file on this machine
            file_name: Name to store (default: the file's own name)
            folder_id: Destination folder id
            description: Document description
            mime_type: Content type (default: guessed from the name)
        """
        try:
            doc = await documents.upload_document(
                legacy,
                file_path,
                file_name=file_name or None,
                folder_id=folder_id or None,
                description=description or None,
                mime_type=mime_type or None,
            )
        except (BillcomError, ValueError, OSError) as e:
            return failed(f"uploading {file_path}", e)
        return record("Uploaded document", doc)

    @registry.tool()
    async def attach_document_to_bill(bill_id: str, document_id: str) -> str:
        """
        Attach an existing document to a bill.

        Args:
            bill_id: Bill id
            document_id: Document id
        """
        try:
            attachment = await documents.attach_document_to_bill(legacy, bill_id, document_id)
        except BillcomError as e:
            return failed(f"attaching document {document_id} to bill {bill_id}", e)
        return record(f"Attached document {document_id} to bill {bill_id}", attachment)

    @registry.tool()
    async def upload_and_attach_document(file_path: str, bill_id: str, file_name: str = "") -> str:
        """
        Upload a local file and attach it to a bill in one step.

        Args:
            file_path: Path of the file on this machine
            bill_id: Bill to attach to
            file_name: Name to store (default: the file's own name)
        """
        try:
            result = await documents.upload_and_attach_document(legacy, file_path, bill_id, file_name or None)
        except (BillcomError, ValueError, OSError) as e:
            return failed(f"uploading {file_path} to bill {bill_id}", e)
        return record(f"Uploaded and attached to bill {bill_id}", result)

    # ==================== Session ====================

    @registry.tool()
    async def billcom_session_status() -> str:
        """Show the current Bill.com session without logging in."""
        info = context.authenticator.get_session_info()
        settings = context.settings
        if info is None:
            return tool_info(
                "No active Bill.com session (one is created on the next API call)",
                data={"environment": settings.environment, "orgId": settings.org_id},
            )
        # never echo the session id or dev key back to the client
        public = {k: v for k, v in info.items() if k not in ("sessionId", "devKey")}
        return tool_success("Bill.com session active", data=public)

    @registry.tool()
    async def billcom_logout() -> str:
        """End the current Bill.com session."""
        await context.authenticator.logout()
        return tool_success("Logged out of Bill.com")

    return registry.count
