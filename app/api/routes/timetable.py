import json
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.models.timetable import MAIN_TIMETABLE_ID, Timetable
from app.schemas.timetable import TimetableResponse, TimetableUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/timetable", tags=["Timetable"])


@router.get("/", response_model=TimetableResponse)
def get_timetable(db: Session = Depends(get_db)):
    """The school timetable; an empty slot list until one is saved."""
    timetable = db.query(Timetable).filter(Timetable.id == MAIN_TIMETABLE_ID).first()
    if not timetable:
        return TimetableResponse()
    return TimetableResponse.model_validate(timetable)


@router.post("/")
def save_timetable(data: TimetableUpdate, db: Session = Depends(get_db)):
    """Replace the slot list of the timetable, creating it on first save."""
    slots_json = json.dumps([slot.model_dump(mode="json", by_alias=True) for slot in data.time_slots])

    timetable = db.query(Timetable).filter(Timetable.id == MAIN_TIMETABLE_ID).first()
    if timetable:
        timetable.time_slots = slots_json
    else:
        db.add(Timetable(id=MAIN_TIMETABLE_ID, time_slots=slots_json))

    db.commit()
    logger.info("Saved timetable with %d slot(s)", len(data.time_slots))
    return {"success": True}
