"""
Mock interview: question generation, heuristic answer analysis, hints, suggestions and saved sessions.
Generation and analysis are stateless; sessions are stored per user.
"""
import logging
from datetime import datetime
from typing import Any, NoReturn

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from prepbuddy.api.deps import get_current_user_id, get_user_id
from prepbuddy.core.constants import INTERVIEW_DEFAULT_QUESTION_COUNT
from prepbuddy.core.errors import PrepBuddyError, ValidationError, service_error_to_http
from prepbuddy.db.session import get_db
from prepbuddy.services.interview_service import (
    analyze_response,
    generate_hint,
    generate_questions,
    generate_suggestions,
    list_past_sessions,
    save_session,
    session_to_dict,
)

router = APIRouter()
logger = logging.getLogger(__name__)


class _CamelBody(BaseModel):
    # Accept both the web client's camelCase keys and snake_case.
    model_config = ConfigDict(populate_by_name=True)


class GenerateQuestionsRequest(_CamelBody):
    category: str | None = None
    difficulty: str | None = None
    count: int = INTERVIEW_DEFAULT_QUESTION_COUNT
    interview_type: str = Field("standard", alias="interviewType")
    platform_focus: str = Field("general", alias="platformFocus")


class AnalyzeResponseRequest(_CamelBody):
    question: str | None = None
    response: str | None = None
    expected_points: list[str] = Field(default_factory=list, alias="expectedPoints")
    category: str | None = None
    interview_type: str = Field("standard", alias="interviewType")
    code_submission: str | None = Field(None, alias="codeSubmission")


class HintRequest(_CamelBody):
    question: str | None = None
    category: str | None = None
    hints_used: int = Field(0, alias="hintsUsed")


class SuggestionsRequest(_CamelBody):
    question: str | None = None
    current_response: str | None = Field(None, alias="currentResponse")
    category: str | None = None
    interview_type: str = Field("standard", alias="interviewType")


class SaveSessionRequest(_CamelBody):
    category: str | None = None
    difficulty: str | None = None
    interview_type: str = Field("standard", alias="interviewType")
    platform_focus: str = Field("general", alias="platformFocus")
    questions: list[dict[str, Any]] = Field(default_factory=list)
    responses: list[dict[str, Any]] = Field(default_factory=list)
    overall_score: int | None = Field(None, alias="overallScore")
    hints_used: int = Field(0, alias="hintsUsed")
    code_submissions: list[dict[str, Any]] = Field(default_factory=list, alias="codeSubmissions")
    performance_metrics: dict[str, Any] = Field(default_factory=dict, alias="performanceMetrics")
    started_at: datetime | None = Field(None, alias="startedAt")
    completed_at: datetime | None = Field(None, alias="completedAt")


def _handle(exc: PrepBuddyError) -> NoReturn:
    raise service_error_to_http(exc) from exc


@router.post("/generate-questions")
def post_generate_questions(body: GenerateQuestionsRequest) -> dict[str, Any]:
    try:
        questions = generate_questions(
            body.category or "",
            body.difficulty or "",
            count=body.count,
            interview_type=body.interview_type,
            platform_focus=body.platform_focus,
        )
    except PrepBuddyError as e:
        _handle(e)
    return {"questions": questions}


@router.post("/analyze-response")
def post_analyze_response(body: AnalyzeResponseRequest) -> dict[str, Any]:
    try:
        return analyze_response(
            body.question or "",
            body.response or "",
            body.expected_points,
            body.category or "",
            interview_type=body.interview_type,
            code_submission=body.code_submission,
        )
    except PrepBuddyError as e:
        _handle(e)


@router.post("/hint")
def post_hint(body: HintRequest) -> dict[str, str]:
    try:
        return {"hint": generate_hint(body.question or "", body.category or "", body.hints_used)}
    except PrepBuddyError as e:
        _handle(e)


@router.post("/suggestions")
def post_suggestions(body: SuggestionsRequest) -> dict[str, list[str]]:
    try:
        suggestions = generate_suggestions(
            body.question or "", body.current_response or "", body.category or "", body.interview_type
        )
    except PrepBuddyError as e:
        _handle(e)
    return {"suggestions": suggestions}


@router.post("/sessions")
def post_session(
    body: SaveSessionRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, Any]:
    """Store a finished (or abandoned) interview. Only sessions with completedAt appear in the history list."""
    if not body.category or not body.difficulty:
        _handle(ValidationError("Category and difficulty are required"))
    row = save_session(db, user_id, body.model_dump())
    return session_to_dict(row)


@router.get("/sessions")
def get_sessions(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
) -> dict[str, Any]:
    return {"sessions": [session_to_dict(s) for s in list_past_sessions(db, user_id)]}
