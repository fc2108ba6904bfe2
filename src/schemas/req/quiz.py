from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class QuestionDTO(BaseModel):
    question: str = ""
    options: List[str] = Field(min_length=4, max_length=4)
    correct_answer: int = Field(default=0, ge=0, le=3)

    @property
    def is_complete(self) -> bool:
        return bool(self.question.strip()) and all(option.strip() for option in self.options)


class QuizCreateDTO(BaseModel):
    title: str
    description: str = ""
    questions: List[QuestionDTO] = Field(min_length=1)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Please enter a quiz title")
        return value.strip()


class AnswerReq(BaseModel):
    question_index: int = Field(ge=0)
    option_index: Optional[int] = Field(default=None, ge=0, le=3)


class AnswerSheetReq(BaseModel):
    """Answers in question order; -1 marks a timed-out question."""

    answers: List[int]

    @field_validator("answers")
    @classmethod
    def answers_in_range(cls, value: List[int]) -> List[int]:
        if any(answer < -1 or answer > 3 for answer in value):
            raise ValueError("Answers must be option indexes 0-3 or -1 for no answer")
        return value
