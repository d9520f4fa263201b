import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, selectinload

from app.api.deps import get_student_or_404
from app.core.errors import FEE_NOT_FOUND, raise_with_code
from app.core.utils import clamp_page_size
from app.db.database import get_db
from app.models.fee import Fee, FeeStatus
from app.schemas.fee import FeeCreate, FeeResponse, FeeUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/fees", tags=["Fees"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _fee_to_response(fee: Fee) -> dict:
    return {
        "id": fee.id,
        "student_id": fee.student_id,
        "student_name": fee.student.full_name if fee.student else None,
        "amount": fee.amount,
        "due_date": fee.due_date,
        "status": fee.status,
        "payment_date": fee.payment_date,
        "description": fee.description,
        "created_at": fee.created_at,
        "updated_at": fee.updated_at,
    }


def _get_fee_or_404(db: Session, fee_id: int) -> Fee:
    fee = db.query(Fee).filter(Fee.id == fee_id).first()
    if not fee:
        raise_with_code(status.HTTP_404_NOT_FOUND, "Fee not found", FEE_NOT_FOUND)
    return fee


def _stamp_payment(fee: Fee):
    # A fee marked paid without a payment date was paid today
    if fee.status == FeeStatus.PAID.value and fee.payment_date is None:
        fee.payment_date = date.today()


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/", response_model=list[FeeResponse])
def list_fees(
    student_id: Optional[str] = Query(None),
    fee_status: Optional[FeeStatus] = Query(None, alias="status"),
    limit: int = Query(100, ge=1),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """List fees, latest due date first."""
    query = db.query(Fee).options(selectinload(Fee.student))
    if student_id:
        query = query.filter(Fee.student_id == student_id)
    if fee_status:
        query = query.filter(Fee.status == fee_status.value)

    fees = (
        query
        .order_by(Fee.due_date.desc(), Fee.id.desc())
        .offset(offset)
        .limit(clamp_page_size(limit))
        .all()
    )
    return [_fee_to_response(f) for f in fees]


@router.post("/", response_model=FeeResponse, status_code=status.HTTP_201_CREATED)
def create_fee(fee_data: FeeCreate, db: Session = Depends(get_db)):
    get_student_or_404(db, fee_data.student_id)

    data = fee_data.model_dump()
    data["status"] = fee_data.status.value
    fee = Fee(**data)
    _stamp_payment(fee)
    db.add(fee)
    db.commit()
    db.refresh(fee)

    logger.info("Created fee %s (%.2f) for student %s", fee.id, fee.amount, fee.student_id)
    return _fee_to_response(fee)


@router.get("/{fee_id}", response_model=FeeResponse)
def get_fee(fee_id: int, db: Session = Depends(get_db)):
    return _fee_to_response(_get_fee_or_404(db, fee_id))


@router.patch("/{fee_id}", response_model=FeeResponse)
def update_fee(fee_id: int, update: FeeUpdate, db: Session = Depends(get_db)):
    """Partially update a fee; marking it PAID stamps today's payment date if none is given."""
    fee = _get_fee_or_404(db, fee_id)

    for field, value in update.model_dump(exclude_unset=True).items():
        if hasattr(value, "value"):
            value = value.value
        setattr(fee, field, value)
    _stamp_payment(fee)

    db.commit()
    db.refresh(fee)
    return _fee_to_response(fee)


@router.delete("/{fee_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_fee(fee_id: int, db: Session = Depends(get_db)):
    fee = _get_fee_or_404(db, fee_id)
    db.delete(fee)
    db.commit()
