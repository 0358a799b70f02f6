"""
Record Routes - Property and Contact Write API

Every write goes through ``RecordService``: request field names are mapped
to column names and unknown fields are rejected before anything is stored.

Request body for create and update:
    {"data": {"title": "...", "price": 135000, ...}}

A key that is absent is left untouched on update; a key sent as null clears
the column.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from core.mapping import CONTACT, PROPERTY, EntityDefinition
from core.records import RecordService, RecordStore
from web.dependencies import get_store


router = APIRouter(prefix="/api", tags=["records"])


class RecordPayload(BaseModel):
    """Write request body."""

    data: Dict[str, Any]


COLLECTIONS: Dict[str, EntityDefinition] = {
    "properties": PROPERTY,
    "contacts": CONTACT,
}


def _load(service: RecordService, record_id: int) -> Dict[str, Any]:
    record = service.get_entity(record_id)
    if record is None:
        raise HTTPException(
            status_code=404, detail=f"{service.entity.name.capitalize()} {record_id} not found"
        )
    return record


def _register(collection: str, entity: EntityDefinition) -> None:
    """Add create, update and read routes for one entity."""

    def service_for(store: RecordStore = Depends(get_store)) -> RecordService:
        return RecordService(store, entity)

    @router.post(f"/{collection}", status_code=201, name=f"create_{entity.name}")
    async def create_record(
        payload: RecordPayload,
        service: RecordService = Depends(service_for),
    ):
        record = service.create_entity(payload.data)
        return JSONResponse(
            status_code=201,
            content={"success": True, "id": record["id"], "record": record},
        )

    @router.patch(f"/{collection}/{{record_id}}", name=f"update_{entity.name}")
    async def update_record(
        record_id: int,
        payload: RecordPayload,
        service: RecordService = Depends(service_for),
    ):
        _load(service, record_id)
        service.update_entity(record_id, payload.data)
        return JSONResponse({"success": True, "record": _load(service, record_id)})

    @router.get(f"/{collection}/{{record_id}}", name=f"get_{entity.name}")
    async def get_record(
        record_id: int,
        service: RecordService = Depends(service_for),
    ):
        return JSONResponse(_load(service, record_id))


for _collection, _entity in COLLECTIONS.items():
    _register(_collection, _entity)
