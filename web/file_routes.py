"""
File Routes - Property and Contact Documents on the NAS

Uploads and listings resolve the remote folder from the stored property
address or contact name. Download and delete of contact documents go through
the NAS proxy and the file delete route like property documents. The NAS
proxy streams stored files to browsers that cannot reach the NAS directly.
"""

import mimetypes
import posixpath
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse, Response

from core.mapping import CONTACT, PROPERTY
from core.records import RecordStore
from core.storage import (
    ContactInfo,
    ContactModule,
    FileStoreGateway,
    PropertyAddress,
    public_file_url,
)
from utils.config import Config
from web.dependencies import get_config, get_gateway, get_store


router = APIRouter(prefix="/api", tags=["files"])

PROXY_CACHE_CONTROL = "public, max-age=3600"


def _address_of(store: RecordStore, record_id: int) -> PropertyAddress:
    record = store.select_by_id(PROPERTY.table.name, record_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Property {record_id} not found")
    return PropertyAddress.from_record(record)


def _managed_path(gateway: FileStoreGateway, path: str) -> str:
    """Reject paths outside the storage roots."""
    if not path or ".." in path.split("/"):
        raise HTTPException(status_code=400, detail="Invalid path")

    normalised = posixpath.normpath(path)
    for root in (gateway.base_path, gateway.contact_base_path):
        root = root.rstrip("/")
        if normalised.startswith(root + "/"):
            return normalised
    raise HTTPException(status_code=400, detail="Path is outside the document storage")


def _contact_of(store: RecordStore, record_id: int) -> ContactInfo:
    record = store.select_by_id(CONTACT.table.name, record_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Contact {record_id} not found")
    return ContactInfo.from_record(record)


def _contact_module(module: str) -> ContactModule:
    try:
        return ContactModule(module)
    except ValueError:
        allowed = ", ".join(m.value for m in ContactModule)
        raise HTTPException(
            status_code=400, detail=f"Invalid module {module!r}. Allowed: {allowed}"
        ) from None


def _folder_segment(value: Optional[str]) -> Optional[str]:
    """A client supplied folder name must stay a single path segment."""
    if value is None or not value.strip():
        return None
    value = value.strip()
    if "/" in value or "\\" in value or value in (".", ".."):
        raise HTTPException(status_code=400, detail=f"Invalid folder name {value!r}")
    return value


# =============================================================================
# Property Documents
# =============================================================================


@router.post("/properties/{record_id}/files/{category}")
def upload_property_file(
    record_id: int,
    category: str,
    file: UploadFile = File(...),
    store: RecordStore = Depends(get_store),
    gateway: FileStoreGateway = Depends(get_gateway),
    config: Config = Depends(get_config),
):
    """Upload a document into a property category folder."""
    address = _address_of(store, record_id)
    content = file.file.read()
    if not content:
        raise HTTPException(status_code=400, detail="File is empty")

    remote_path = gateway.upload(address, category, file.filename or "", content)

    return JSONResponse({
        "success": True,
        "path": remote_path,
        "url": public_file_url(config.nas_public_domain, remote_path),
        "size": len(content),
    })


@router.get("/properties/{record_id}/files/{category}")
def list_property_files(
    record_id: int,
    category: str,
    store: RecordStore = Depends(get_store),
    gateway: FileStoreGateway = Depends(get_gateway),
):
    address = _address_of(store, record_id)
    files = gateway.list_files(address, category)
    return JSONResponse({"files": [f.to_dict() for f in files]})


@router.post("/properties/{record_id}/folders")
def create_property_folders(
    record_id: int,
    store: RecordStore = Depends(get_store),
    gateway: FileStoreGateway = Depends(get_gateway),
):
    """Create the property folder with all category folders."""
    address = _address_of(store, record_id)
    return JSONResponse({"success": True, "path": gateway.ensure_property_folders(address)})


@router.delete("/files")
def delete_file(
    path: str = Query(...),
    gateway: FileStoreGateway = Depends(get_gateway),
):
    remote_path = _managed_path(gateway, path)
    gateway.delete(remote_path)
    return JSONResponse({"success": True, "path": remote_path})


# =============================================================================
# Contact Documents
# =============================================================================


@router.post("/contacts/{record_id}/files/{module}")
def upload_contact_file(
    record_id: int,
    module: str,
    file: UploadFile = File(...),
    category: Optional[str] = Form(None),
    subcategory: Optional[str] = Form(None),
    store: RecordStore = Depends(get_store),
    gateway: FileStoreGateway = Depends(get_gateway),
    config: Config = Depends(get_config),
):
    """Upload a document into a contact's module folder."""
    contact_module = _contact_module(module)
    category = _folder_segment(category)
    subcategory = _folder_segment(subcategory)
    contact = _contact_of(store, record_id)
    content = file.file.read()
    if not content:
        raise HTTPException(status_code=400, detail="File is empty")

    remote_path = gateway.upload_contact_document(
        contact_module, contact, file.filename or "", content, category, subcategory
    )

    return JSONResponse({
        "success": True,
        "path": remote_path,
        "url": public_file_url(config.nas_public_domain, remote_path),
        "size": len(content),
    })


@router.get("/contacts/{record_id}/files/{module}")
def list_contact_files(
    record_id: int,
    module: str,
    category: Optional[str] = Query(None),
    subcategory: Optional[str] = Query(None),
    store: RecordStore = Depends(get_store),
    gateway: FileStoreGateway = Depends(get_gateway),
):
    contact_module = _contact_module(module)
    contact = _contact_of(store, record_id)
    files = gateway.list_contact_documents(
        contact_module, contact, _folder_segment(category), _folder_segment(subcategory)
    )
    return JSONResponse({"files": [f.to_dict() for f in files]})


# =============================================================================
# NAS Proxy and Health
# =============================================================================


@router.get("/nas-proxy")
def nas_proxy(
    path: str = Query(...),
    gateway: FileStoreGateway = Depends(get_gateway),
):
    """Stream a stored file with a guessed content type."""
    remote_path = _managed_path(gateway, path)
    content = gateway.download(remote_path)
    media_type = mimetypes.guess_type(remote_path)[0] or "application/octet-stream"
    return Response(
        content=content,
        media_type=media_type,
        headers={"Cache-Control": PROXY_CACHE_CONTROL},
    )


@router.get("/storage/health")
def storage_health(
    gateway: FileStoreGateway = Depends(get_gateway),
    config: Config = Depends(get_config),
):
    connected = gateway.test_connection()
    return JSONResponse(
        status_code=200 if connected else 503,
        content={
            "connected": connected,
            "backend": config.storage_backend,
            "base_path": gateway.base_path,
        },
    )
