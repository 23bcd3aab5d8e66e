from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from customer_manager.core.database import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, index=True)
    phone_number = Column(String(30), nullable=False, unique=True)

    addresses = relationship(
        "Address",
        back_populates="customer",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
