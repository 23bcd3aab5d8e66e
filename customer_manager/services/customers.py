from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from customer_manager.core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from customer_manager.core.errors import DuplicatePhoneError, NotFoundError, ValidationError
from customer_manager.models.customer import Customer
from customer_manager.schemas.common import MAX_RECORD_ID
from customer_manager.services.store import like_pattern, store_operation
from customer_manager.services.validation import CUSTOMER_RULES, require_fields

logger = logging.getLogger(__name__)

CUSTOMER_NOT_FOUND = "Customer not found"

SORTABLE_COLUMNS = {
    "id": Customer.id,
    "first_name": Customer.first_name,
    "last_name": Customer.last_name,
    "phone_number": Customer.phone_number,
}
SORT_DIRECTIONS = ("ASC", "DESC")
DEFAULT_SORT_BY = "last_name"
DEFAULT_SORT_ORDER = "ASC"


@dataclass
class Pagination:
    page: int
    limit: int
    total: int
    pages: int

    def to_dict(self) -> Dict[str, int]:
        return {"page": self.page, "limit": self.limit, "total": self.total, "pages": self.pages}


@dataclass
class CustomerPage:
    pagination: Pagination
    rows: List[Dict[str, Any]] = field(default_factory=list)


def customer_to_dict(customer: Customer) -> Dict[str, Any]:
    return {
        "id": customer.id,
        "first_name": customer.first_name,
        "last_name": customer.last_name,
        "phone_number": customer.phone_number,
    }


def resolve_sort(sort_by: Optional[str], sort_order: Optional[str]):
    column_name = (sort_by or DEFAULT_SORT_BY).strip()
    column = SORTABLE_COLUMNS.get(column_name)
    if column is None:
        raise ValidationError(
            f"Invalid sortBy '{column_name}'; expected one of: {', '.join(SORTABLE_COLUMNS)}"
        )

    direction = (sort_order or DEFAULT_SORT_ORDER).strip().upper()
    if direction not in SORT_DIRECTIONS:
        raise ValidationError(f"Invalid sortOrder '{sort_order}'; expected ASC or DESC")

    return column.asc() if direction == "ASC" else column.desc()


def list_customers(
    db: Session,
    *,
    search: Optional[str] = None,
    sort_by: Optional[str] = DEFAULT_SORT_BY,
    sort_order: Optional[str] = DEFAULT_SORT_ORDER,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> CustomerPage:
    """One page of customers matching ``search`` plus pagination totals.

    The count runs first over the same filter as the page query, without
    ordering or limits. The two statements are not isolated from each other.
    """
    if page < 1:
        raise ValidationError("page must be a positive integer")
    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")

    max_page = MAX_RECORD_ID // limit + 1
    if page > max_page:
        raise ValidationError(f"page must be at most {max_page} when limit is {limit}")

    ordering = resolve_sort(sort_by, sort_order)

    query = db.query(Customer)
    clean_search = (search or "").strip()
    if clean_search:
        pattern = like_pattern(clean_search)
        query = query.filter(
            or_(
                Customer.first_name.ilike(pattern, escape="\\"),
                Customer.last_name.ilike(pattern, escape="\\"),
                Customer.phone_number.ilike(pattern, escape="\\"),
            )
        )

    offset = (page - 1) * limit
    with store_operation(db, "list customers", commit=False):
        total = query.count()
        customers = query.order_by(ordering, Customer.id.asc()).limit(limit).offset(offset).all()

    pagination = Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit))
    return CustomerPage(pagination=pagination, rows=[customer_to_dict(customer) for customer in customers])


def get_customer(db: Session, customer_id: int) -> Dict[str, Any]:
    with store_operation(db, "get customer", commit=False):
        customer = db.get(Customer, customer_id)
    if customer is None:
        raise NotFoundError(CUSTOMER_NOT_FOUND)
    return customer_to_dict(customer)


def create_customer(db: Session, payload: Mapping[str, Any]) -> Dict[str, Any]:
    values = require_fields(CUSTOMER_RULES, payload)
    customer = Customer(**values)

    with store_operation(db, "create customer", unique_error=DuplicatePhoneError()):
        db.add(customer)
        db.flush()

    logger.info("customer created", extra={"customer_id": customer.id})
    return customer_to_dict(customer)


def update_customer(db: Session, customer_id: int, payload: Mapping[str, Any]) -> Dict[str, Any]:
    values = require_fields(CUSTOMER_RULES, payload)

    with store_operation(db, "update customer", unique_error=DuplicatePhoneError()):
        affected = (
            db.query(Customer)
            .filter(Customer.id == customer_id)
            .update(values, synchronize_session=False)
        )

    if affected == 0:
        raise NotFoundError(CUSTOMER_NOT_FOUND)

    logger.info("customer updated", extra={"customer_id": customer_id})
    return {"id": customer_id, **values}


def delete_customer(db: Session, customer_id: int) -> None:
    """Delete a customer; the store cascades the delete to its addresses."""
    with store_operation(db, "delete customer"):
        affected = (
            db.query(Customer)
            .filter(Customer.id == customer_id)
            .delete(synchronize_session=False)
        )

    if affected == 0:
        raise NotFoundError(CUSTOMER_NOT_FOUND)

    logger.info("customer deleted", extra={"customer_id": customer_id})
