# bank_loans/schemas/customer_schemas.py
import re
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from bank_loans.core.enums import CustomerType

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _digits_only(v):
    if v is None:
        return v
    v = str(v).strip()
    if not v.isdigit():
        raise ValueError("must contain only digits")
    return v


def _email_or_none(v):
    if v is None:
        return None
    v = str(v).strip().lower()
    if not v:
        return None
    if not EMAIL_RE.match(v):
        raise ValueError("Invalid email")
    return v


class CustomerCreate(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    date_of_birth: Optional[date] = None
    address: str = Field(min_length=1)
    identity_number: str
    identity_card_created_date: date
    phone_number: str
    permanent_residence: Optional[str] = None
    email: Optional[str] = None
    customer_type: CustomerType

    business_registration_certificate: Optional[str] = None
    company_rules: Optional[str] = None

    _digits = field_validator("identity_number", "phone_number", mode="before")(_digits_only)
    _email = field_validator("email", mode="before")(_email_or_none)

    @model_validator(mode="after")
    def check_type_fields(self):
        if self.customer_type == CustomerType.BUSINESS and (
            not self.business_registration_certificate or not self.company_rules
        ):
            raise ValueError(
                "Business customer must have business_registration_certificate and company_rules fields"
            )
        if self.customer_type == CustomerType.RESIDENT and (
            not self.date_of_birth or not self.permanent_residence
        ):
            raise ValueError(
                "Resident customer must have date_of_birth and permanent_residence fields"
            )
        return self


class CustomerUpdate(BaseModel):
    name: Optional[str] = None
    date_of_birth: Optional[date] = None
    address: Optional[str] = None
    identity_number: Optional[str] = None
    identity_card_created_date: Optional[date] = None
    phone_number: Optional[str] = None
    permanent_residence: Optional[str] = None
    email: Optional[str] = None
    business_registration_certificate: Optional[str] = None
    company_rules: Optional[str] = None

    _digits = field_validator("identity_number", "phone_number", mode="before")(_digits_only)
    _email = field_validator("email", mode="before")(_email_or_none)


class CustomerOut(BaseModel):
    customer_id: int
    name: str
    date_of_birth: Optional[date] = None
    address: str
    identity_number: str
    identity_card_created_date: date
    phone_number: str
    permanent_residence: Optional[str] = None
    email: Optional[str] = None
    customer_type: int
    business_registration_certificate: Optional[str] = None
    company_rules: Optional[str] = None
    created_on: Optional[datetime] = None

    class Config:
        from_attributes = True


class RecentContractOut(BaseModel):
    contract_id: int
    contract_number: str
    principal_amount: float
    created_on: Optional[datetime] = None

    class Config:
        from_attributes = True


class CustomerStatisticsOut(BaseModel):
    principal_this_year: float
    principal_last_year: float
    principal_total: float
    paid: float
    unpaid: float


class CustomerDetailsOut(BaseModel):
    customer: CustomerOut
    recent_contracts: List[RecentContractOut]
    statistics: CustomerStatisticsOut
