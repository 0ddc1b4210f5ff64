# bank_loans/schemas/loan_profile_schemas.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from bank_loans.core.enums import LoanType, ProofOfIncomeType, RecordStatus
from bank_loans.schemas.customer_schemas import CustomerOut


class ProofOfIncomeIn(BaseModel):
    image_id: str = Field(min_length=1)
    image_type: ProofOfIncomeType


class ProofOfIncomeOut(BaseModel):
    proof_id: int
    image_id: str
    image_type: int

    class Config:
        from_attributes = True


class LoanProfileCreate(BaseModel):
    customer_id: int
    proof_of_income: List[ProofOfIncomeIn] = []

    money_to_loan: Decimal = Field(gt=0)
    loan_purpose: str = Field(min_length=1)
    loan_duration: int = Field(gt=0)
    collateral: str = Field(min_length=1)
    expected_source_money_to_repay: str = Field(min_length=1)
    benefit_from_loan: str = Field(min_length=1)
    signature_img: str = Field(min_length=1)
    loan_type: LoanType

    @field_validator(
        "loan_purpose",
        "collateral",
        "expected_source_money_to_repay",
        "benefit_from_loan",
        "signature_img",
        mode="before",
    )
    def strip_text(cls, v):
        return str(v).strip() if v is not None else v


class LoanProfileStatusUpdate(BaseModel):
    status: RecordStatus


class LoanProfileOut(BaseModel):
    profile_id: int
    loan_application_number: str
    customer_id: int
    staff_id: int
    approver_id: Optional[int] = None

    money_to_loan: float
    loan_purpose: str
    loan_duration: int
    collateral: str
    expected_source_money_to_repay: str
    benefit_from_loan: str
    signature_img: str
    loan_type: int
    loan_status: int
    created_on: Optional[datetime] = None

    customer: Optional[CustomerOut] = None
    proof_of_income: List[ProofOfIncomeOut] = []

    class Config:
        from_attributes = True
