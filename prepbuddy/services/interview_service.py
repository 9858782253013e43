"""
Mock-interview simulator: templated question generation, heuristic response scoring,
hints, suggestions and saved sessions.

Scoring is approximate by design. analyze_response() adds up, then clamps to 0-100:
  - length of the trimmed response: <50 chars 20, <200 40, <500 60, else 70
  - category keywords present as whole words: >=5 20, >=3 15, >=1 10
  - coding interviews with a code submission: >3 non-blank lines 5, comments 3, identifiers 3,
    a function definition 4
  - sentences: >=4 10, >=2 5
  - expected-point coverage (a point counts if any of its words appears): covered/total * 15
difficulty_rating is round(score / 20) kept within 1-5.
"""
import logging
import re
from typing import Any

from sqlalchemy.orm import Session

from prepbuddy.core.constants import (
    INTERVIEW_DEFAULT_QUESTION_COUNT,
    INTERVIEW_MAX_SUGGESTIONS,
    INTERVIEW_PAST_SESSIONS_LIMIT,
)
from prepbuddy.core.errors import ValidationError
from prepbuddy.core.numbers import round_half_up
from prepbuddy.data.interview_templates import (
    BASE_EXPECTED_POINTS,
    CATEGORY_KEYWORDS,
    DEFAULT_TIME_LIMIT,
    DIFFICULTY_EXPECTED_POINTS,
    HINT_TEMPLATES,
    PLATFORM_MODIFICATIONS,
    QUESTION_TEMPLATES,
    TIME_LIMITS,
)
from prepbuddy.models.interview_session import InterviewSession

logger = logging.getLogger(__name__)

DEFAULT_INTERVIEW_TYPE = "standard"
DEFAULT_PLATFORM = "general"

_PLACEHOLDER_SOURCES = {
    "{algorithm}": "algorithms",
    "{dataStructure}": "data_structures",
    "{operations}": "operations",
    "{complexSystem}": "systems",
}


def _platform(platform_focus: str) -> dict[str, Any] | None:
    if platform_focus == DEFAULT_PLATFORM:
        return None
    return PLATFORM_MODIFICATIONS.get(platform_focus)


def _fill_template(template: dict[str, Any], i: int) -> str:
    text = template["base"]
    concepts = template.get("concepts")
    if concepts:
        c = concepts[i % len(concepts)]
        text = text.replace("{concept1}", c["concept1"]).replace("{concept2}", c["concept2"])
    for placeholder, key in _PLACEHOLDER_SOURCES.items():
        values = template.get(key)
        if values:
            text = text.replace(placeholder, values[i % len(values)])
    return text


def expected_points(category: str, difficulty: str, interview_type: str, platform_focus: str) -> list[str]:
    if category == "technical":
        by_type = BASE_EXPECTED_POINTS["technical"]
        points = list(by_type.get(interview_type) or by_type["standard"])
    else:
        base = BASE_EXPECTED_POINTS.get(category)
        points = list(base) if isinstance(base, list) else list(BASE_EXPECTED_POINTS["technical"]["standard"])
    points.extend(DIFFICULTY_EXPECTED_POINTS.get(difficulty, []))
    platform = _platform(platform_focus)
    if platform:
        points.extend(platform["additional_points"])
    return points


def time_limit(category: str, difficulty: str, interview_type: str) -> int:
    """Seconds allowed for one question."""
    if category == "technical":
        by_type = TIME_LIMITS["technical"]
        limits = by_type.get(interview_type) or by_type["standard"]
        return limits.get(difficulty) or by_type["standard"].get(difficulty) or DEFAULT_TIME_LIMIT
    return (TIME_LIMITS.get(category) or {}).get(difficulty) or DEFAULT_TIME_LIMIT


def generate_questions(
    category: str,
    difficulty: str,
    count: int = INTERVIEW_DEFAULT_QUESTION_COUNT,
    interview_type: str = DEFAULT_INTERVIEW_TYPE,
    platform_focus: str = DEFAULT_PLATFORM,
) -> list[dict[str, Any]]:
    """
    Up to `count` questions from the templates for category/interview_type/difficulty.
    Unknown combinations use the easy standard technical templates.
    """
    if not category or not difficulty:
        raise ValidationError("Category and difficulty are required")
    templates = (
        QUESTION_TEMPLATES.get(category, {}).get(interview_type, {}).get(difficulty)
        or QUESTION_TEMPLATES["technical"]["standard"]["easy"]
    )
    platform = _platform(platform_focus)
    points = expected_points(category, difficulty, interview_type, platform_focus)
    limit = time_limit(category, difficulty, interview_type)

    questions = []
    for i in range(min(max(count, 0), len(templates))):
        template = templates[i]
        test_cases: list[dict[str, str]] = []
        code_template = None
        hints: list[str] = []
        if isinstance(template, str):
            text = template
        elif "base" in template:
            text = _fill_template(template, i)
        else:
            text = template["question"]
            test_cases = list(template.get("test_cases") or [])
            code_template = template.get("code_template")
            hints = list(template.get("hints") or [])
        if platform:
            text += platform["suffix"]
        question: dict[str, Any] = {
            "id": f"{category}_{interview_type}_{difficulty}_{i + 1}",
            "category": category,
            "difficulty": difficulty,
            "question": text,
            "expected_points": list(points),
            "time_limit": limit,
            "interview_type": interview_type,
            "platform_focus": platform_focus,
            "hints": hints,
        }
        if test_cases:
            question["test_cases"] = test_cases
        if code_template:
            question["code_template"] = code_template
        questions.append(question)
    return questions


def _length_score(length: int) -> tuple[int, str, str]:
    """(points, bucket, message); bucket is 'improvement', 'feedback' or 'strength'."""
    if length < 50:
        return 20, "improvement", "Provide more detailed explanations and examples"
    if length < 200:
        return 40, "feedback", "Good response length, consider adding more specific details"
    if length < 500:
        return 60, "strength", "Comprehensive response with good detail"
    return 70, "strength", "Very thorough and detailed explanation"


def _code_checks(code: str) -> list[tuple[int, str]]:
    lines = [line for line in code.split("\n") if line.strip()]
    checks = [
        (len(lines) > 3, 5, "Well-structured code implementation"),
        ("//" in code or "/*" in code, 3, "Good code documentation"),
        (re.search(r"[a-zA-Z][a-zA-Z0-9]*", code) is not None, 3, "Clear variable and function naming"),
        ("function" in code or "def " in code or "public " in code, 4, "Proper function structure"),
    ]
    return [(points, message) for ok, points, message in checks if ok]


def analyze_response(
    question: str,
    response: str,
    expected: list[str] | None,
    category: str,
    interview_type: str = DEFAULT_INTERVIEW_TYPE,
    code_submission: str | None = None,
) -> dict[str, Any]:
    if not question or not response or not category:
        raise ValidationError("Question, response, and category are required")
    expected = expected or []
    words = set(response.lower().split())
    score: float = 0
    feedback: list[str] = []
    strengths: list[str] = []
    improvements: list[str] = []
    buckets = {"feedback": feedback, "strength": strengths, "improvement": improvements}

    points, bucket, message = _length_score(len(response.strip()))
    score += points
    buckets[bucket].append(message)

    keywords = CATEGORY_KEYWORDS.get(category) or CATEGORY_KEYWORDS["technical"]
    matches = sum(1 for k in keywords if k in words)
    if matches >= 5:
        score += 20
        strengths.append("Excellent use of technical terminology and concepts")
    elif matches >= 3:
        score += 15
        strengths.append("Good technical vocabulary")
    elif matches >= 1:
        score += 10
        feedback.append("Some technical terms used, could include more specific vocabulary")
    else:
        improvements.append("Include more specific technical terminology relevant to the topic")

    if code_submission and interview_type == "coding":
        for points, message in _code_checks(code_submission):
            score += points
            strengths.append(message)

    sentences = [s for s in re.split(r"[.!?]+", response) if s.strip()]
    if len(sentences) >= 4:
        score += 10
        strengths.append("Well-structured response with clear organization")
    elif len(sentences) >= 2:
        score += 5
        feedback.append("Good structure, could benefit from more detailed breakdown")

    covered = sum(1 for p in expected if any(w in words for w in p.lower().split()))
    if expected:
        score += covered / len(expected) * 15
        if covered >= len(expected) * 0.8:
            strengths.append("Excellent coverage of key concepts")
        elif covered >= len(expected) * 0.5:
            feedback.append("Good coverage of main points, consider addressing all key concepts")
        else:
            improvements.append("Address more of the key points mentioned in the question")

    score = min(100, max(0, score))
    parts = list(feedback)
    if strengths:
        parts.append(f"Strengths: {', '.join(strengths)}")
    if improvements:
        parts.append(f"Areas for improvement: {', '.join(improvements)}")
    parts.append(f"Coverage: {covered}/{len(expected)} key points addressed")

    return {
        "score": round_half_up(score),
        "feedback": " ".join(parts),
        "difficulty_rating": min(5, max(1, round_half_up(score / 20))),
        "strengths": strengths,
        "improvements": improvements,
    }


def generate_hint(question: str, category: str, hints_used: int = 0) -> str:
    """Category hint, cycling through the list by the number of hints already used."""
    if not question or not category:
        raise ValidationError("Question and category are required")
    hints = HINT_TEMPLATES.get(category) or HINT_TEMPLATES["technical"]
    return hints[max(hints_used, 0) % len(hints)]


def generate_suggestions(question: str, current_response: str, category: str, interview_type: str) -> list[str]:
    if not question or not current_response or not category:
        raise ValidationError("Question, current response, and category are required")
    suggestions = []
    if len(current_response) < 100:
        suggestions.append("Consider expanding on your explanation with more details and examples.")
    if interview_type == "coding":
        suggestions.append("Think about the algorithm's time and space complexity.")
        suggestions.append("Consider edge cases like empty inputs or single elements.")
    if category == "system-design":
        suggestions.append("Discuss scalability and how the system handles increased load.")
        suggestions.append("Consider data storage and retrieval strategies.")
    if category == "behavioral":
        suggestions.append("Use specific examples and quantify your impact where possible.")
        suggestions.append("Explain what you learned from the experience.")
    return suggestions[:INTERVIEW_MAX_SUGGESTIONS]


# --- Sessions ---


def session_to_dict(s: InterviewSession) -> dict[str, Any]:
    return {
        "id": s.id,
        "category": s.category,
        "difficulty": s.difficulty,
        "interview_type": s.interview_type,
        "platform_focus": s.platform_focus,
        "overall_score": s.overall_score,
        "hints_used": s.hints_used,
        "started_at": s.started_at.isoformat() if s.started_at else None,
        "completed_at": s.completed_at.isoformat() if s.completed_at else None,
    }


def save_session(db: Session, user_id: str, data: dict[str, Any]) -> InterviewSession:
    """Persist a finished session. started_at/completed_at are datetimes (completed_at may be None)."""
    row = InterviewSession(
        user_id=user_id,
        category=data["category"],
        difficulty=data["difficulty"],
        interview_type=data.get("interview_type") or DEFAULT_INTERVIEW_TYPE,
        platform_focus=data.get("platform_focus") or DEFAULT_PLATFORM,
        questions=data.get("questions") or [],
        responses=data.get("responses") or [],
        overall_score=data.get("overall_score"),
        hints_used=data.get("hints_used") or 0,
        code_submissions=data.get("code_submissions") or [],
        performance_metrics=data.get("performance_metrics") or {},
        completed_at=data.get("completed_at"),
    )
    if data.get("started_at"):
        row.started_at = data["started_at"]
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Saved interview session %s for %s (score=%s)", row.id, user_id, row.overall_score)
    return row


def list_past_sessions(db: Session, user_id: str, limit: int = INTERVIEW_PAST_SESSIONS_LIMIT) -> list[InterviewSession]:
    """Completed sessions, most recently started first."""
    return (
        db.query(InterviewSession)
        .filter(InterviewSession.user_id == user_id, InterviewSession.completed_at.isnot(None))
        .order_by(InterviewSession.started_at.desc(), InterviewSession.id.desc())
        .limit(limit)
        .all()
    )
