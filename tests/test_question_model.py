"""
Unit tests for the question, result and config models.
"""

import pytest
from pydantic import ValidationError

from licensing_exam.models.question_model import Option, Question, QuestionSet
from licensing_exam.models.result_model import CategoryScore, ExamResult
from licensing_exam.models.session_state import ExamConfig

from conftest import make_question


def _options():
    return [Option(id="a", text="Yes"), Option(id="b", text="No")]


class TestQuestion:

    def test_valid_question(self):
        q = Question(id=1, prompt="Ok?", options=_options(), correct_option_id="a", category="Ethics")
        assert q.option_ids == ["a", "b"]
        assert q.option_text("b") == "No"
        assert q.option_text("z") is None

    def test_correct_option_must_exist(self):
        with pytest.raises(ValidationError):
            Question(id=1, prompt="Ok?", options=_options(), correct_option_id="c", category="Ethics")

    def test_requires_two_options(self):
        with pytest.raises(ValidationError):
            Question(id=1, prompt="Ok?", options=_options()[:1], correct_option_id="a", category="Ethics")

    def test_duplicate_option_ids_rejected(self):
        options = [Option(id="a", text="Yes"), Option(id="a", text="No")]
        with pytest.raises(ValidationError):
            Question(id=1, prompt="Ok?", options=options, correct_option_id="a", category="Ethics")

    def test_category_is_normalized(self):
        q = Question(
            id=1, prompt="Ok?", options=_options(), correct_option_id="a",
            category="  Child   Safety ",
        )
        assert q.category == "Child Safety"

    @pytest.mark.parametrize("category", ["", "   "])
    def test_blank_category_rejected(self, category):
        with pytest.raises(ValidationError):
            Question(id=1, prompt="Ok?", options=_options(), correct_option_id="a", category=category)


class TestQuestionSet:

    def test_lookup(self, ten_questions):
        assert len(ten_questions) == 10
        assert ten_questions.get(4).id == 4
        assert ten_questions.get(99) is None
        assert ten_questions.index_of(4) == 3
        assert ten_questions[0].id == 1
        assert [q.id for q in ten_questions] == list(range(1, 11))

    def test_index_of_unknown_raises(self, ten_questions):
        with pytest.raises(ValueError):
            ten_questions.index_of(99)

    def test_categories_in_order(self, ten_questions):
        assert ten_questions.categories() == ["Regulations", "Pedagogy", "Assessment"]

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValidationError):
            QuestionSet(questions=[make_question(1), make_question(1)])

    def test_empty_set_allowed(self):
        assert len(QuestionSet()) == 0


class TestExamConfig:

    def test_defaults(self):
        cfg = ExamConfig()
        assert cfg.duration_seconds == 7200
        assert cfg.pass_threshold == 70
        assert cfg.max_attempts == 3
        assert cfg.cooldown_days == 7

    @pytest.mark.parametrize("kwargs", [
        {"duration_seconds": 0},
        {"pass_threshold": 150},
        {"max_attempts": 0},
        {"cooldown_days": -1},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValidationError):
            ExamConfig(**kwargs)


class TestExamResult:

    def test_inconsistent_totals_rejected(self):
        with pytest.raises(ValidationError):
            ExamResult(
                score_percent=50, correct_count=1, total_count=2, passed=False, pass_threshold=70,
                category_scores={"A": CategoryScore(correct=1, total=1)},
            )

    def test_inconsistent_pass_flag_rejected(self):
        with pytest.raises(ValidationError):
            ExamResult(
                score_percent=50, correct_count=1, total_count=2, passed=True, pass_threshold=70,
                category_scores={"A": CategoryScore(correct=1, total=2)},
            )

    def test_category_percent(self):
        assert CategoryScore(correct=1, total=3).percent == 33
        assert CategoryScore(correct=0, total=0).percent == 0
