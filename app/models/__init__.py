from app.models.student import Student
from app.models.grading import Grading, GradeConfig
from app.models.attendance import Attendance, AttendanceConfig
from app.models.fee import Fee
from app.models.timetable import Timetable
from app.models.quiz import Quiz, QuizQuestion

__all__ = [
    "Student",
    "Grading",
    "GradeConfig",
    "Attendance",
    "AttendanceConfig",
    "Fee",
    "Timetable",
    "Quiz",
    "QuizQuestion",
]
