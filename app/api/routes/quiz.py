import json
import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, selectinload

from app.core.errors import QUIZ_CODE_REQUIRED, QUIZ_NOT_FOUND, raise_with_code
from app.db.database import get_db
from app.models.quiz import Quiz, QuizQuestion
from app.schemas.quiz import QuizCreate, QuizCreated, QuizResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quiz", tags=["Quiz"])

QUIZ_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
QUIZ_CODE_LENGTH = 6
_MAX_CODE_ATTEMPTS = 10


def generate_quiz_code() -> str:
    return "".join(secrets.choice(QUIZ_CODE_ALPHABET) for _ in range(QUIZ_CODE_LENGTH))


def _unused_code(db: Session) -> str:
    for _ in range(_MAX_CODE_ATTEMPTS):
        code = generate_quiz_code()
        if not db.query(Quiz.id).filter(Quiz.code == code).first():
            return code
    raise RuntimeError("Could not allocate a unique quiz code")


@router.post("/", response_model=QuizCreated, status_code=status.HTTP_201_CREATED)
def create_quiz(quiz_data: QuizCreate, db: Session = Depends(get_db)):
    """Create a quiz; questions keep the order they were submitted in."""
    quiz = Quiz(
        code=_unused_code(db),
        title=quiz_data.title,
        description=quiz_data.description,
        time_limit=quiz_data.time_limit,
        questions=[
            QuizQuestion(
                text=q.text,
                options=json.dumps(q.options),
                correct_answer=q.correct_answer,
                points=q.points,
                position=index,
            )
            for index, q in enumerate(quiz_data.questions)
        ],
    )
    db.add(quiz)
    db.commit()
    db.refresh(quiz)

    logger.info("Created quiz %s (%s) with %d question(s)", quiz.id, quiz.code, len(quiz_data.questions))
    return {"id": quiz.id, "code": quiz.code}


@router.get("/", response_model=QuizResponse)
def get_quiz_by_code(code: Optional[str] = Query(None), db: Session = Depends(get_db)):
    if not code or not code.strip():
        raise_with_code(status.HTTP_400_BAD_REQUEST, "Quiz code is required", QUIZ_CODE_REQUIRED)

    quiz = (
        db.query(Quiz)
        .options(selectinload(Quiz.questions))
        .filter(Quiz.code == code.strip().upper())
        .first()
    )
    if not quiz:
        raise_with_code(status.HTTP_404_NOT_FOUND, "Quiz not found", QUIZ_NOT_FOUND)
    return quiz
