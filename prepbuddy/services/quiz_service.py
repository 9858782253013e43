"""
Quiz engine: question selection from the bank, the timed answer flow of one run, scoring and stats.

Scoring: a question earns its points only when the recorded answer equals correct_answer.
A timed-out question is recorded as QUIZ_UNANSWERED (-1) and can never match.
The run streak counts consecutive correct answers and resets on any wrong or timed-out answer.
"""
import logging
import time
from typing import Callable

from sqlalchemy.orm import Session

from prepbuddy.core.constants import (
    QUIZ_MAX_QUESTIONS,
    QUIZ_POINTS_BY_DIFFICULTY,
    QUIZ_SECONDS_PER_QUESTION,
    QUIZ_UNANSWERED,
)
from prepbuddy.core.errors import ValidationError
from prepbuddy.core.numbers import round_half_up
from prepbuddy.data.question_bank import QUESTION_BANK, QUIZ_CATEGORIES, QuizQuestion
from prepbuddy.models.quiz_result import QuizResult

logger = logging.getLogger(__name__)

DIFFICULTIES = tuple(QUIZ_POINTS_BY_DIFFICULTY)


def _check_difficulty(difficulty: str) -> str:
    if difficulty not in QUIZ_POINTS_BY_DIFFICULTY:
        raise ValidationError(f"Unknown difficulty {difficulty!r}. Use one of {list(DIFFICULTIES)}")
    return difficulty


def list_categories() -> list[dict]:
    return [dict(c) for c in QUIZ_CATEGORIES]


def sample_question(category: str, difficulty: str) -> QuizQuestion:
    """Placeholder question for a category/difficulty with nothing in the bank."""
    return {
        "id": f"{category}_sample_1",
        "question": f"Sample {category} question ({difficulty} level)",
        "options": ["Option A", "Option B", "Option C", "Option D"],
        "correct_answer": 0,
        "explanation": f"This is a sample explanation for {category} at {difficulty} level.",
        "difficulty": difficulty,
        "category": category,
        "points": QUIZ_POINTS_BY_DIFFICULTY[difficulty],
    }


def select_questions(category: str, difficulty: str) -> list[QuizQuestion]:
    """Bank questions for category x difficulty (at most QUIZ_MAX_QUESTIONS), or one sample question."""
    category = (category or "").strip()
    if not category:
        raise ValidationError("Category is required")
    _check_difficulty(difficulty)
    matching = [q for q in QUESTION_BANK.get(category, []) if q["difficulty"] == difficulty]
    if not matching:
        return [sample_question(category, difficulty)]
    return matching[:QUIZ_MAX_QUESTIONS]


def score_answers(questions: list[QuizQuestion], answers: list[int]) -> tuple[int, int]:
    """(score, correct_answers). Missing answers count as unanswered."""
    score = 0
    correct = 0
    for i, q in enumerate(questions):
        if i < len(answers) and answers[i] == q["correct_answer"]:
            score += q["points"]
            correct += 1
    return score, correct


def trailing_streak(questions: list[QuizQuestion], answers: list[int]) -> int:
    """Consecutive correct answers at the end of the run."""
    streak = 0
    for i, q in enumerate(questions):
        if i < len(answers) and answers[i] == q["correct_answer"]:
            streak += 1
        else:
            streak = 0
    return streak


class QuizRun:
    """
    One timed run. Flow per question: select() an option, submit() (or let tick() hit zero,
    which submits the selection, or QUIZ_UNANSWERED if none), then next_question().
    After the last question, finish().
    """

    def __init__(
        self,
        category: str,
        difficulty: str,
        *,
        seconds_per_question: int = QUIZ_SECONDS_PER_QUESTION,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.category = category
        self.difficulty = difficulty
        self.questions = select_questions(category, difficulty)
        self.seconds_per_question = seconds_per_question
        self._clock = clock
        self._started = clock()
        self.index = 0
        self.selected: int | None = None
        self.answers: list[int] = []
        self.time_left = seconds_per_question
        self.show_explanation = False
        self.streak = 0
        self.finished = False

    @property
    def current_question(self) -> QuizQuestion:
        return self.questions[self.index]

    def select(self, option: int) -> None:
        """Pick an option. Ignored once the current question is submitted."""
        if self.show_explanation or self.finished:
            return
        self.selected = option

    def submit(self) -> bool:
        """
        Record the answer for the current question. No-op (returns False) when nothing is selected
        and time remains, or when the question was already submitted.
        """
        if self.show_explanation or self.finished:
            return False
        if self.selected is None and self.time_left > 0:
            return False
        answer = QUIZ_UNANSWERED if self.selected is None else self.selected
        self.answers.append(answer)
        self.show_explanation = True
        if answer == self.current_question["correct_answer"]:
            self.streak += 1
        else:
            self.streak = 0
        return True

    def tick(self, seconds: int = 1) -> None:
        """Advance the question timer. At zero the selected option (or QUIZ_UNANSWERED) is submitted."""
        if self.show_explanation or self.finished:
            return
        self.time_left = max(0, self.time_left - seconds)
        if self.time_left == 0:
            self.submit()

    def next_question(self) -> bool:
        """Move on after a submitted question. Returns False when the run is over (call finish())."""
        if not self.show_explanation:
            return True
        if self.index < len(self.questions) - 1:
            self.index += 1
            self.selected = None
            self.show_explanation = False
            self.time_left = self.seconds_per_question
            return True
        return False

    def finish(self) -> dict:
        self.finished = True
        score, correct = score_answers(self.questions, self.answers)
        return {
            "score": score,
            "total_questions": len(self.questions),
            "correct_answers": correct,
            "time_spent": round_half_up(self._clock() - self._started),
            "category": self.category,
            "difficulty": self.difficulty,
            "streak": self.streak,
        }


def grade_submission(category: str, difficulty: str, answers: list[int], time_spent: int) -> dict:
    """Score a finished run sent by a client against the same question set it was served."""
    questions = select_questions(category, difficulty)
    if len(answers) > len(questions):
        raise ValidationError(f"Got {len(answers)} answers for {len(questions)} questions")
    score, correct = score_answers(questions, answers)
    return {
        "score": score,
        "total_questions": len(questions),
        "correct_answers": correct,
        "time_spent": max(0, time_spent),
        "category": category,
        "difficulty": difficulty,
        "streak": trailing_streak(questions, answers),
    }


def save_result(db: Session, user_id: str, result: dict) -> QuizResult:
    row = QuizResult(
        user_id=user_id,
        category=result["category"],
        difficulty=result["difficulty"],
        score=result["score"],
        total_questions=result["total_questions"],
        correct_answers=result["correct_answers"],
        time_spent=result["time_spent"],
        streak=result["streak"],
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Saved quiz result for %s: %s/%s", user_id, result["category"], result["difficulty"])
    return row


def get_stats(db: Session, user_id: str) -> dict | None:
    """Aggregate over all saved results; None when the user has none."""
    rows = db.query(QuizResult).filter(QuizResult.user_id == user_id).order_by(QuizResult.id.asc()).all()
    if not rows:
        return None
    total_score = sum(r.score for r in rows)
    categories: list[str] = []
    for r in rows:
        if r.category not in categories:
            categories.append(r.category)
    return {
        "total_quizzes": len(rows),
        "total_score": total_score,
        "average_score": round_half_up(total_score / len(rows)),
        "best_streak": max([r.streak or 0 for r in rows] + [0]),
        "categories_completed": categories,
    }
