from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from customer_manager.core.config import API_PREFIX, DEFAULT_PAGE_SIZE
from customer_manager.core.database import get_db
from customer_manager.schemas.common import ErrorEnvelope, MessageEnvelope, RecordId
from customer_manager.schemas.customer import CustomerEnvelope, CustomerListEnvelope, CustomerPayload
from customer_manager.services import customers as customer_service

router = APIRouter(
    prefix=f"{API_PREFIX}/customers",
    tags=["customers"],
    responses={400: {"model": ErrorEnvelope}, 404: {"model": ErrorEnvelope}},
)


def _payload_dict(payload: Optional[CustomerPayload]) -> dict:
    return payload.model_dump() if payload is not None else {}


@router.post("", response_model=CustomerEnvelope)
def create_customer(payload: Optional[CustomerPayload] = None, db: Session = Depends(get_db)):
    customer = customer_service.create_customer(db, _payload_dict(payload))
    return {"message": "Customer created successfully", "data": customer}


@router.get("", response_model=CustomerListEnvelope)
def list_customers(
    search: Optional[str] = Query(default=None),
    sort_by: str = Query(default=customer_service.DEFAULT_SORT_BY, alias="sortBy"),
    sort_order: str = Query(default=customer_service.DEFAULT_SORT_ORDER, alias="sortOrder"),
    page: int = Query(default=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    result = customer_service.list_customers(
        db,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return {"message": "Success", "data": result.rows, "pagination": result.pagination.to_dict()}


@router.get("/{customer_id}", response_model=CustomerEnvelope)
def get_customer(customer_id: RecordId, db: Session = Depends(get_db)):
    return {"message": "Success", "data": customer_service.get_customer(db, customer_id)}


@router.put("/{customer_id}", response_model=CustomerEnvelope)
def update_customer(
    customer_id: RecordId,
    payload: Optional[CustomerPayload] = None,
    db: Session = Depends(get_db),
):
    customer = customer_service.update_customer(db, customer_id, _payload_dict(payload))
    return {"message": "Customer updated successfully", "data": customer}


@router.delete("/{customer_id}", response_model=MessageEnvelope)
def delete_customer(customer_id: RecordId, db: Session = Depends(get_db)):
    customer_service.delete_customer(db, customer_id)
    return {"message": "Customer deleted successfully"}
