from typing import Optional

from pydantic import BaseModel


class CustomerPayload(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None


class CustomerRead(BaseModel):
    id: int
    first_name: str
    last_name: str
    phone_number: str


class PaginationRead(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class CustomerEnvelope(BaseModel):
    message: str
    data: CustomerRead


class CustomerListEnvelope(BaseModel):
    message: str
    data: list[CustomerRead]
    pagination: PaginationRead
