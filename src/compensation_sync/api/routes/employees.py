"""Employee compensation and salary slip endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Path, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from compensation_sync.api.dependencies import Calculator, DbSession
from compensation_sync.api.schemas import (
    CompensationPreviewRequest,
    CompensationUpdateRequest,
    ErrorResponse,
    PayBreakdownResponse,
    SalarySlipResponse,
    SyncOutcomeResponse,
)
from compensation_sync.models import Employee
from compensation_sync.services.compensation_service import (
    CompensationService,
    CompensationUpdate,
    SyncOutcome,
    SyncStatus,
)
from compensation_sync.services.record_store import SqlAlchemyRecordStore

router = APIRouter(tags=["compensation"])


def _outcome_response(outcome: SyncOutcome) -> SyncOutcomeResponse:
    recon = outcome.reconciliation
    return SyncOutcomeResponse(
        status=outcome.status.value,
        employee_business_id=outcome.employee_business_id,
        history_saved=outcome.history_saved,
        renamed_rows=outcome.cascade.total_updated if outcome.cascade else 0,
        deleted=recon.deleted if recon else 0,
        updated=recon.updated if recon else 0,
        inserted=recon.inserted if recon else 0,
        failed_periods=[str(key) for key in outcome.failed_keys],
        warnings=outcome.warnings,
        reason=outcome.reason,
    )


# ============================================================================
# Compensation
# ============================================================================


@router.post(
    "/compensation/preview",
    response_model=list[PayBreakdownResponse],
    responses={422: {"model": ErrorResponse}},
)
def preview_compensation(
    db: DbSession,
    calculator: Calculator,
    payload: CompensationPreviewRequest,
) -> list[PayBreakdownResponse]:
    """Compute the slips a compensation history would produce, without saving."""
    service = CompensationService(db, calculator=calculator)
    breakdowns = service.preview_breakdowns([r.to_record() for r in payload.records])
    return [PayBreakdownResponse.model_validate(b) for b in breakdowns]


@router.put(
    "/employees/{employee_id}/compensation",
    response_model=SyncOutcomeResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": SyncOutcomeResponse},
        422: {"model": ErrorResponse},
    },
)
def update_compensation(
    db: DbSession,
    calculator: Calculator,
    employee_id: Annotated[UUID, Path()],
    payload: CompensationUpdateRequest,
) -> SyncOutcomeResponse | JSONResponse:
    """Save employee details and compensation history, then sync salary slips.

    A partially synchronized payroll is still a saved employee: the response
    is 200 with status "partial" and warnings. An incomplete identifier
    cascade rolls everything back and returns 409.

    The employee lock is held from reading the current business identifier
    until the transaction ends, so a concurrent rename of the same employee
    cannot leave this request working under a stale identifier.
    """
    service = CompensationService(db, calculator=calculator)
    records = tuple(r.to_record(employee_id) for r in payload.records)
    service.validate(records)

    with service.locking.employee_lock(employee_id):
        employee = db.get(Employee, employee_id, with_for_update=True, populate_existing=True)
        if employee is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Employee {employee_id} not found",
            )

        old_code = employee.employee_code
        employee.employee_code = payload.employee_code
        employee.first_name = payload.first_name
        employee.last_name = payload.last_name
        employee.email = payload.email
        employee.department = payload.department
        employee.position = payload.position
        try:
            db.flush()
        except IntegrityError:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Employee code {payload.employee_code!r} is already in use",
            )

        outcome = service.update_employee_compensation(
            CompensationUpdate(
                employee_internal_id=employee_id,
                old_business_id=old_code,
                new_business_id=payload.employee_code,
                display=payload.display_fields(),
                records=records,
            )
        )

        if outcome.status == SyncStatus.ABORTED:
            db.rollback()
            return JSONResponse(
                status_code=status.HTTP_409_CONFLICT,
                content=_outcome_response(outcome).model_dump(mode="json"),
            )

        db.commit()
    return _outcome_response(outcome)


# ============================================================================
# Salary slips
# ============================================================================


@router.get(
    "/employees/{business_id}/slips",
    response_model=list[SalarySlipResponse],
)
def list_salary_slips(
    db: DbSession,
    business_id: Annotated[str, Path()],
) -> list[SalarySlipResponse]:
    """List an employee's salary slips ordered by period."""
    slips = SqlAlchemyRecordStore(db).list_slips(business_id)
    return [SalarySlipResponse.model_validate(s) for s in slips]
