from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from customer_manager.core.errors import NotFoundError
from customer_manager.models.address import Address
from customer_manager.models.customer import Customer
from customer_manager.services.store import like_pattern, store_operation
from customer_manager.services.validation import ADDRESS_RULES, require_fields

logger = logging.getLogger(__name__)

ADDRESS_NOT_FOUND = "Address not found"


def address_to_dict(address: Address) -> Dict[str, Any]:
    return {
        "id": address.id,
        "customer_id": address.customer_id,
        "address_details": address.address_details,
        "city": address.city,
        "state": address.state,
        "pin_code": address.pin_code,
    }


def list_addresses(db: Session, customer_id: int) -> List[Dict[str, Any]]:
    with store_operation(db, "list addresses", commit=False):
        addresses = (
            db.query(Address)
            .filter(Address.customer_id == customer_id)
            .order_by(Address.id.asc())
            .all()
        )
    return [address_to_dict(address) for address in addresses]


def create_address(db: Session, customer_id: int, payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Add an address to ``customer_id``.

    The parent customer is not looked up here: the foreign key decides, and a
    missing parent surfaces as a StoreError when enforcement is on.
    """
    values = require_fields(ADDRESS_RULES, payload)
    address = Address(customer_id=customer_id, **values)

    with store_operation(db, "create address"):
        db.add(address)
        db.flush()

    logger.info("address created", extra={"customer_id": customer_id, "address_id": address.id})
    return address_to_dict(address)


def update_address(db: Session, address_id: int, payload: Mapping[str, Any]) -> Dict[str, Any]:
    values = require_fields(ADDRESS_RULES, payload)

    with store_operation(db, "update address"):
        affected = (
            db.query(Address)
            .filter(Address.id == address_id)
            .update(values, synchronize_session=False)
        )

    if affected == 0:
        raise NotFoundError(ADDRESS_NOT_FOUND)

    with store_operation(db, "get address", commit=False):
        address = db.get(Address, address_id, populate_existing=True)
    logger.info("address updated", extra={"address_id": address_id})
    return address_to_dict(address)


def delete_address(db: Session, address_id: int) -> None:
    with store_operation(db, "delete address"):
        affected = (
            db.query(Address)
            .filter(Address.id == address_id)
            .delete(synchronize_session=False)
        )

    if affected == 0:
        raise NotFoundError(ADDRESS_NOT_FOUND)

    logger.info("address deleted", extra={"address_id": address_id})


def search_addresses(
    db: Session,
    *,
    city: Optional[str] = None,
    state: Optional[str] = None,
    pin_code: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Addresses matching every given substring filter, with their owner's name."""
    query = db.query(Address, Customer).join(Customer, Address.customer_id == Customer.id)

    for column, value in (
        (Address.city, city),
        (Address.state, state),
        (Address.pin_code, pin_code),
    ):
        clean_value = (value or "").strip()
        if clean_value:
            query = query.filter(column.ilike(like_pattern(clean_value), escape="\\"))

    with store_operation(db, "search addresses", commit=False):
        rows = query.order_by(Address.id.asc()).all()

    results: List[Dict[str, Any]] = []
    for address, customer in rows:
        item = address_to_dict(address)
        item["first_name"] = customer.first_name
        item["last_name"] = customer.last_name
        results.append(item)
    return results
