"""
Quiz arena: categories, the question set for a category x difficulty, graded results and stats.
The full question (with correct_answer and explanation) is served; the timed flow runs in the client.
"""
import logging
from typing import Any, NoReturn

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from prepbuddy.api.deps import get_current_user_id, get_user_id
from prepbuddy.core.errors import PrepBuddyError, service_error_to_http
from prepbuddy.db.session import get_db
from prepbuddy.services import quiz_service

router = APIRouter()
logger = logging.getLogger(__name__)


def _handle(exc: PrepBuddyError) -> NoReturn:
    raise service_error_to_http(exc) from exc


class QuizResultRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    category: str
    difficulty: str
    answers: list[int] = Field(default_factory=list)
    time_spent: int = Field(0, alias="timeSpent")


@router.get("/categories")
def get_categories() -> dict[str, Any]:
    return {"categories": quiz_service.list_categories()}


@router.get("/questions")
def get_questions(category: str = Query(...), difficulty: str = Query("easy")) -> dict[str, Any]:
    try:
        questions = quiz_service.select_questions(category, difficulty)
    except PrepBuddyError as e:
        _handle(e)
    return {"questions": questions}


@router.post("/results")
def post_result(
    body: QuizResultRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, Any]:
    """
    Grade answers (option index per question, -1 for timed out) against the served set and store the result.
    """
    try:
        result = quiz_service.grade_submission(body.category, body.difficulty, body.answers, body.time_spent)
    except PrepBuddyError as e:
        _handle(e)
    row = quiz_service.save_result(db, user_id, result)
    return {**result, "id": row.id}


@router.get("/stats")
def get_stats(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
) -> dict[str, Any]:
    """stats is null until the first result is saved."""
    return {"stats": quiz_service.get_stats(db, user_id)}
