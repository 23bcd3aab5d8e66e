from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from customer_manager.core.config import API_PREFIX
from customer_manager.core.database import get_db
from customer_manager.schemas.address import (
    AddressEnvelope,
    AddressListEnvelope,
    AddressPayload,
    AddressSearchEnvelope,
)
from customer_manager.schemas.common import ErrorEnvelope, MessageEnvelope, RecordId
from customer_manager.services import addresses as address_service

_ERROR_RESPONSES = {400: {"model": ErrorEnvelope}, 404: {"model": ErrorEnvelope}}

customer_addresses_router = APIRouter(
    prefix=f"{API_PREFIX}/customers/{{customer_id}}/addresses",
    tags=["addresses"],
    responses=_ERROR_RESPONSES,
)
router = APIRouter(prefix=f"{API_PREFIX}/addresses", tags=["addresses"], responses=_ERROR_RESPONSES)


def _payload_dict(payload: Optional[AddressPayload]) -> dict:
    return payload.model_dump() if payload is not None else {}


@customer_addresses_router.get("", response_model=AddressListEnvelope)
def list_customer_addresses(customer_id: RecordId, db: Session = Depends(get_db)):
    return {"message": "Success", "data": address_service.list_addresses(db, customer_id)}


@customer_addresses_router.post("", response_model=AddressEnvelope)
def create_customer_address(
    customer_id: RecordId,
    payload: Optional[AddressPayload] = None,
    db: Session = Depends(get_db),
):
    address = address_service.create_address(db, customer_id, _payload_dict(payload))
    return {"message": "Address added successfully", "data": address}


# Declared before "/{address_id}" so "search" is not parsed as an id.
@router.get("/search", response_model=AddressSearchEnvelope)
def search_addresses(
    city: Optional[str] = Query(default=None),
    state: Optional[str] = Query(default=None),
    pin_code: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
):
    rows = address_service.search_addresses(db, city=city, state=state, pin_code=pin_code)
    return {"message": "Success", "data": rows}


@router.put("/{address_id}", response_model=AddressEnvelope)
def update_address(
    address_id: RecordId,
    payload: Optional[AddressPayload] = None,
    db: Session = Depends(get_db),
):
    address = address_service.update_address(db, address_id, _payload_dict(payload))
    return {"message": "Address updated successfully", "data": address}


@router.delete("/{address_id}", response_model=MessageEnvelope)
def delete_address(address_id: RecordId, db: Session = Depends(get_db)):
    address_service.delete_address(db, address_id)
    return {"message": "Address deleted successfully"}
