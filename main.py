import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import bank_loans.models  # noqa: F401  ensure models are registered
from bank_loans import __version__
from bank_loans.core.config import CORS_ORIGINS, LOG_FORMAT, LOG_LEVEL
from bank_loans.core.exceptions import LedgerError
from bank_loans.core.logging import setup_logging
from bank_loans.initial_data import init_seed
from bank_loans.utils.database import Base, engine

from bank_loans.routers import (
    applications_router,
    branches_router,
    customers_router,
    disburse_certificates_router,
    loan_contracts_router,
    loan_profiles_router,
    payment_receipts_router,
    realtime_router,
    staff_router,
)

setup_logging(LOG_LEVEL, LOG_FORMAT)
logger = logging.getLogger("bank_loans")

app = FastAPI(title="Bank Loans Backend API", version=__version__)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LedgerError)
def ledger_error_handler(request: Request, exc: LedgerError):
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


# Routers
app.include_router(branches_router.router)
app.include_router(staff_router.router)
app.include_router(customers_router.router)
app.include_router(loan_profiles_router.router)
app.include_router(loan_contracts_router.router)
app.include_router(disburse_certificates_router.router)
app.include_router(applications_router.liquidation_router)
app.include_router(applications_router.exemption_router)
app.include_router(applications_router.extension_router)
app.include_router(payment_receipts_router.router)
app.include_router(realtime_router.router)


@app.on_event("startup")
def on_startup():
    # DEV ONLY: schema migrations are not managed here
    Base.metadata.create_all(bind=engine)

    logger.info("Running initial database seeding")
    init_seed()
    logger.info("Seeding complete")


@app.get("/")
def root():
    return {"message": "Bank Loans Backend is running!!"}
