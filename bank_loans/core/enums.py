from enum import IntEnum


class StaffRole(IntEnum):
    SUPPORT = 1
    BUSINESS = 2
    APPRAISAL = 3
    DIRECTOR = 4


class CustomerType(IntEnum):
    BUSINESS = 1
    RESIDENT = 2


class ProofOfIncomeType(IntEnum):
    LABOR_CONTRACT = 1
    SALARY_CONFIRMATION = 2
    HOUSE_RENTAL_CONTRACT = 3
    CAR_RENTAL_CONTRACT = 4
    BUSINESS_LICENSE = 5


class LoanType(IntEnum):
    EACH_TIME = 1
    CREDIT_LINE = 2
    INVESTMENT_PROJECT = 3
    INSTALLMENT = 4
    STANDBY_CREDIT_LIMIT = 5
    CAPITAL_MEETING = 6
    UNDER_OVERDRAFT_LIMIT = 7


class RecordStatus(IntEnum):
    """Shared by loan profiles and liquidation/exemption/extension applications."""

    PENDING = 1
    DONE = 2
    REJECTED = 3
    DELETED = 4


class BranchTxnType:
    DEPOSIT = "DEPOSIT"
    DISBURSEMENT = "DISBURSEMENT"
