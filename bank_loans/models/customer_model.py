# bank_loans/models/customer_model.py
from sqlalchemy import Column, Date, DateTime, Integer, String, func

from bank_loans.utils.database import Base


class Customer(Base):
    __tablename__ = "customers"

    customer_id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False, index=True)

    date_of_birth = Column(Date, nullable=True)
    address = Column(String(255), nullable=False)

    identity_number = Column(String(30), unique=True, nullable=False)
    identity_card_created_date = Column(Date, nullable=False)

    phone_number = Column(String(20), unique=True, nullable=False)
    permanent_residence = Column(String(255), nullable=True)
    email = Column(String(180), unique=True, nullable=True)

    # Business=1 / Resident=2
    customer_type = Column(Integer, nullable=False)

    # business customers only
    business_registration_certificate = Column(String(255), nullable=True)
    company_rules = Column(String(255), nullable=True)

    created_on = Column(DateTime, server_default=func.now(), nullable=True)
    updated_on = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=True)

    def __repr__(self) -> str:
        return f"<Customer(id={self.customer_id}, name={self.name})>"
