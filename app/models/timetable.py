from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func

from app.db.database import Base

MAIN_TIMETABLE_ID = "main"


class Timetable(Base):
    """Weekly timetable; the school keeps a single row with id "main".

    ``time_slots`` holds the slot list as a JSON string (Text for SQLite compat).
    """

    __tablename__ = "timetables"

    id = Column(String(20), primary_key=True, default=MAIN_TIMETABLE_ID)
    time_slots = Column(Text, nullable=False, default="[]")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
