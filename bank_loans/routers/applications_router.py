# bank_loans/routers/applications_router.py
"""
Liquidation, exemption and extension endpoints.

The three kinds expose the same surface, so one router is built per kind:
``/liquidation_applications``, ``/exemption_applications``, ``/extension_applications``.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bank_loans.core.config import DEFAULT_PAGE_LIMIT
from bank_loans.core.enums import RecordStatus
from bank_loans.core.security import Principal, get_current_principal
from bank_loans.schemas import (
    ApplicationCreate,
    ApplicationOut,
    DecisionRequest,
    ExtensionApplicationCreate,
    RejectRequest,
)
from bank_loans.services import applications
from bank_loans.services.applications import ApplicationKind
from bank_loans.utils.database import get_db


def make_router(kind: ApplicationKind) -> APIRouter:
    router = APIRouter(prefix=f"/{kind.name}_applications", tags=[f"{kind.name.capitalize()} Applications"])
    create_schema = ExtensionApplicationCreate if kind.carries_duration else ApplicationCreate

    # CREATE
    @router.post("", response_model=ApplicationOut, status_code=201)
    def file_application(
            payload: create_schema,
            db: Session = Depends(get_db),
            principal: Principal = Depends(get_current_principal),
    ):
        return applications.file_application(
            db,
            kind,
            payload.contract_id,
            payload.amount,
            payload.signature_img,
            principal=principal,
            reason=payload.reason,
            duration=getattr(payload, "duration", None),
        )

    # READ ALL
    @router.get("", response_model=list[ApplicationOut])
    def list_applications(
            contract_number: Optional[str] = None,
            application_number: Optional[str] = None,
            status: Optional[RecordStatus] = None,
            created_at: Optional[date] = None,
            sort_by: Optional[str] = Query(default=None, description="field:asc|desc"),
            limit: int = DEFAULT_PAGE_LIMIT,
            skip: int = 0,
            db: Session = Depends(get_db),
            principal: Principal = Depends(get_current_principal),
    ):
        return applications.list_applications(
            db,
            kind,
            contract_number=contract_number,
            application_number=application_number,
            status=int(status) if status is not None else None,
            created_at=created_at,
            sort_by=sort_by,
            limit=limit,
            skip=skip,
        )

    # READ ONE
    @router.get("/{application_id}", response_model=ApplicationOut)
    def get_application(
            application_id: int,
            db: Session = Depends(get_db),
            principal: Principal = Depends(get_current_principal),
    ):
        return applications.get_application(db, kind, application_id)

    # DECIDE
    @router.post("/decision", response_model=ApplicationOut)
    def decide(
            payload: DecisionRequest,
            db: Session = Depends(get_db),
            principal: Principal = Depends(get_current_principal),
    ):
        return applications.decide(db, kind, payload.application_id, payload.bod_signature, principal)

    # REJECT
    @router.post("/reject", response_model=ApplicationOut)
    def reject(
            payload: RejectRequest,
            db: Session = Depends(get_db),
            principal: Principal = Depends(get_current_principal),
    ):
        return applications.reject(db, kind, payload.application_id, principal)

    # DELETE
    @router.delete("/{application_id}")
    def delete_application(
            application_id: int,
            db: Session = Depends(get_db),
            principal: Principal = Depends(get_current_principal),
    ):
        applications.delete_application(db, kind, application_id, principal)
        return {"message": "Application deleted successfully"}

    return router


liquidation_router = make_router(applications.LIQUIDATION)
exemption_router = make_router(applications.EXEMPTION)
extension_router = make_router(applications.EXTENSION)
