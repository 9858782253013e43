"""Tests for quiz selection, scoring, the timed run and stats."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from prepbuddy.core.errors import ValidationError
from prepbuddy.services import quiz_service
from prepbuddy.services.quiz_service import QuizRun, grade_submission, score_answers, select_questions

answer = st.integers(min_value=-1, max_value=3)


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class TestSelection:
    def test_bank_questions_for_category_and_difficulty(self):
        questions = select_questions("dsa", "medium")
        assert [q["id"] for q in questions] == ["dsa_2", "dsa_3"]
        assert all(q["points"] == 20 for q in questions)

    @pytest.mark.parametrize("difficulty, points", [("easy", 10), ("medium", 20), ("hard", 30)])
    def test_sample_question_when_bank_empty(self, difficulty, points):
        questions = select_questions("system-design", difficulty)
        assert len(questions) == 1
        assert questions[0]["points"] == points
        assert questions[0]["question"] == f"Sample system-design question ({difficulty} level)"

    def test_unknown_difficulty_rejected(self):
        with pytest.raises(ValidationError):
            select_questions("dsa", "extreme")


class TestScoring:
    @given(st.lists(answer, min_size=0, max_size=2))
    def test_score_is_points_of_correct_answers_only(self, answers):
        questions = select_questions("dsa", "medium")
        score, correct = score_answers(questions, answers)
        expected = [q["points"] for q, a in zip(questions, answers) if a == q["correct_answer"]]
        assert score == sum(expected)
        assert correct == len(expected)

    @given(st.lists(answer, min_size=2, max_size=2))
    def test_wrong_last_answer_resets_streak(self, answers):
        result = grade_submission("dsa", "medium", answers[:1] + [0], 40)
        assert result["streak"] == 0

    def test_zero_is_a_real_answer(self):
        # sample question: correct_answer 0
        result = grade_submission("system-design", "easy", [0], 12)
        assert result["score"] == 10
        assert result["correct_answers"] == 1

    def test_too_many_answers_rejected(self):
        with pytest.raises(ValidationError):
            grade_submission("dsa", "medium", [2, 1, 0], 10)


class TestQuizRun:
    def test_full_run(self):
        clock = FakeClock()
        run = QuizRun("dsa", "medium", clock=clock)

        assert run.submit() is False  # nothing selected yet
        run.select(2)
        assert run.submit() is True
        assert run.streak == 1
        run.select(0)  # ignored after submit
        assert run.answers == [2]

        assert run.next_question() is True
        run.select(1)
        run.submit()
        assert run.streak == 2
        assert run.next_question() is False

        clock.now += 42.4
        result = run.finish()
        assert result["score"] == 40
        assert result["correct_answers"] == 2
        assert result["total_questions"] == 2
        assert result["time_spent"] == 42

    def test_timeout_submits_unanswered_and_resets_streak(self):
        run = QuizRun("dsa", "medium", clock=FakeClock())
        run.select(2)
        run.submit()
        run.next_question()

        run.tick(29)
        assert not run.show_explanation
        run.tick(1)
        assert run.show_explanation
        assert run.answers == [2, -1]
        assert run.streak == 0
        assert run.finish()["score"] == 20

    def test_timeout_grades_the_selected_option(self):
        run = QuizRun("dsa", "medium", clock=FakeClock())
        run.select(2)
        run.tick(30)
        assert run.answers == [2]
        assert run.streak == 1
        run.next_question()

        run.select(0)  # picked but never submitted
        run.tick(30)
        assert run.answers == [2, 0]
        assert run.streak == 0
        assert run.finish()["score"] == 20


class TestResultsApi:
    @pytest.mark.asyncio
    async def test_grade_save_and_stats(self, client):
        headers = {"X-User-Id": "student"}
        resp = await client.get("/quiz/stats", headers=headers)
        assert resp.json() == {"stats": None}

        resp = await client.post(
            "/quiz/results", json={"category": "dsa", "difficulty": "medium", "answers": [2, 1], "timeSpent": 35},
            headers=headers,
        )
        assert resp.status_code == 200
        assert resp.json()["score"] == 40
        await client.post(
            "/quiz/results", json={"category": "aptitude", "difficulty": "easy", "answers": [0], "timeSpent": 9},
            headers=headers,
        )

        stats = (await client.get("/quiz/stats", headers=headers)).json()["stats"]
        assert stats["total_quizzes"] == 2
        assert stats["total_score"] == 40
        assert stats["average_score"] == 20
        assert stats["best_streak"] == 2
        assert stats["categories_completed"] == ["dsa", "aptitude"]

    @pytest.mark.asyncio
    async def test_questions_and_categories(self, client):
        cats = (await client.get("/quiz/categories")).json()["categories"]
        assert [c["id"] for c in cats][:3] == ["dsa", "aptitude", "programming"]

        resp = await client.get("/quiz/questions", params={"category": "dsa", "difficulty": "easy"})
        assert [q["id"] for q in resp.json()["questions"]] == ["dsa_1"]

        resp = await client.get("/quiz/questions", params={"category": "dsa", "difficulty": "nope"})
        assert resp.status_code == 400


def test_average_rounds_half_up(db):
    for score in (10, 15):
        quiz_service.save_result(
            db,
            "u",
            {
                "category": "dsa",
                "difficulty": "easy",
                "score": score,
                "total_questions": 1,
                "correct_answers": 1,
                "time_spent": 5,
                "streak": 1,
            },
        )
    assert quiz_service.get_stats(db, "u")["average_score"] == 13
