import json
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator, model_validator

from app.schemas.report import CamelModel


class QuizQuestionCreate(CamelModel):
    text: str = Field(min_length=1)
    options: list[str] = Field(min_length=2)
    correct_answer: int = Field(ge=0)
    points: int = Field(1, ge=1)

    @model_validator(mode="after")
    def check_answer_index(self):
        if self.correct_answer >= len(self.options):
            raise ValueError("correct_answer must index one of the options")
        return self


class QuizCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    time_limit: int = Field(300, gt=0)  # seconds
    questions: list[QuizQuestionCreate] = Field(min_length=1)


class QuizCreated(CamelModel):
    id: int
    code: str


class QuizQuestionResponse(CamelModel):
    id: int
    text: str
    options: list[str]
    correct_answer: int
    points: int
    position: int

    @field_validator("options", mode="before")
    @classmethod
    def parse_options(cls, v):
        return json.loads(v) if isinstance(v, str) else v


class QuizResponse(CamelModel):
    id: int
    code: str
    title: str
    description: Optional[str] = None
    time_limit: int
    created_at: Optional[datetime] = None
    questions: list[QuizQuestionResponse]
