from typing import Optional

from pydantic import BaseModel


class AddressPayload(BaseModel):
    address_details: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pin_code: Optional[str] = None


class AddressRead(BaseModel):
    id: int
    customer_id: int
    address_details: str
    city: str
    state: str
    pin_code: str


class AddressSearchRead(AddressRead):
    first_name: str
    last_name: str


class AddressEnvelope(BaseModel):
    message: str
    data: AddressRead


class AddressListEnvelope(BaseModel):
    message: str
    data: list[AddressRead]


class AddressSearchEnvelope(BaseModel):
    message: str
    data: list[AddressSearchRead]
