"""Document storage and bill attachments on the legacy API."""

import base64
import logging
import mimetypes
from pathlib import Path
from typing import Any

from .legacy_client import LegacyClient
from .models import SearchFilter, SortOption, list_request

logger = logging.getLogger(__name__)

DOCUMENT = "Document"


def read_upload(file_path: str) -> tuple[Path, bytes]:
    """Read a local file for upload.

    Raises:
        ValueError: If the path does not point to a readable file
    """
    path = Path(file_path).expanduser()
    if not path.is_file():
        raise ValueError(f"File not found: {path}")
    return path, path.read_bytes()


async def list_documents(
    legacy: LegacyClient,
    start: int | None = None,
    max_results: int | None = None,
    filters: list[SearchFilter | dict[str, Any]] | None = None,
    sort: list[SortOption | dict[str, Any]] | None = None,
) -> list[dict[str, Any]]:
    return await legacy.call(f"List/{DOCUMENT}", list_request(start, max_results, filters, sort)) or []


async def get_document(legacy: LegacyClient, document_id: str) -> dict[str, Any]:
    return await legacy.call(f"Crud/Read/{DOCUMENT}", {"id": document_id})


async def delete_document(legacy: LegacyClient, document_id: str) -> dict[str, str]:
    await legacy.call(f"Crud/Delete/{DOCUMENT}", {"id": document_id})
    logger.info(f"Deleted document {document_id}")
    return {"id": document_id}


async def upload_document(
    legacy: LegacyClient,
    file_path: str,
    file_name: str | None = None,
    folder_id: str | None = None,
    description: str | None = None,
    mime_type: str | None = None,
) -> dict[str, Any]:
    """Store a file as a document, sending its content base64-encoded in ``obj``."""
    path, content = read_upload(file_path)
    name = file_name or path.name
    obj: dict[str, Any] = {
        "entity": DOCUMENT,
        "fileName": name,
        "fileData": base64.b64encode(content).decode("ascii"),
    }
    if folder_id:
        obj["folderId"] = folder_id
    if description:
        obj["description"] = description
    content_type = mime_type or mimetypes.guess_type(name)[0]
    if content_type:
        obj["contentType"] = content_type

    logger.info(f"Uploading document {name} ({len(content)} bytes)")
    return await legacy.call("UploadAttachment", {"obj": obj})


async def attach_document_to_bill(legacy: LegacyClient, bill_id: str, document_id: str) -> dict[str, Any]:
    obj = {"entity": "Attachment", "objectId": bill_id, "documentId": document_id}
    return await legacy.call("Crud/Create/Attachment", {"obj": obj})


async def upload_and_attach_document(
    legacy: LegacyClient,
    file_path: str,
    bill_id: str,
    file_name: str | None = None,
) -> dict[str, Any]:
    """Upload a file as a multipart part and attach it to a bill in one call.

    Returns:
        ``{"documentUploadedId": ...}`` as reported by the API
    """
    path, content = read_upload(file_path)
    name = file_name or path.name
    content_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
    data = {"fileName": name, "isPublic": True, "objectId": bill_id}
    return await legacy.upload("UploadAttachment", data, name, content, content_type)
