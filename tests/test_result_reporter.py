"""
Unit tests for retake guidance.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from licensing_exam.models.result_model import AttemptHistory
from licensing_exam.models.session_state import ExamConfig
from licensing_exam.services.exam_service import score_exam
from licensing_exam.services.result_reporter import build_retake_guidance, weak_categories

LAST_ATTEMPT = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def policy() -> ExamConfig:
    return ExamConfig(duration_seconds=7200, pass_threshold=70, max_attempts=3, cooldown_days=7)


@pytest.fixture
def failed_result(ten_questions):
    return score_exam(ten_questions, {1: "a", 2: "a"}, pass_threshold=70)


@pytest.fixture
def passed_result(ten_questions):
    return score_exam(ten_questions, {qid: "a" for qid in range(1, 11)}, pass_threshold=70)


class TestRetakeGuidance:

    def test_failed_with_attempts_left_gets_cooldown(self, failed_result, policy):
        history = AttemptHistory(attempts_used=1, last_attempt_at=LAST_ATTEMPT)

        guidance = build_retake_guidance(failed_result, history, policy)

        assert guidance.attempts_remaining == 2
        assert guidance.terminal is False
        assert guidance.can_retake_at == datetime(2026, 3, 8, 9, 30, tzinfo=timezone.utc)

    def test_last_attempt_used_is_terminal(self, failed_result, policy):
        history = AttemptHistory(attempts_used=3, last_attempt_at=LAST_ATTEMPT)

        guidance = build_retake_guidance(failed_result, history, policy)

        assert guidance.attempts_remaining == 0
        assert guidance.terminal is True
        assert guidance.can_retake_at is None

    def test_overused_attempts_clamp_to_zero(self, failed_result, policy):
        guidance = build_retake_guidance(failed_result, AttemptHistory(attempts_used=5), policy)
        assert guidance.attempts_remaining == 0
        assert guidance.terminal

    def test_passed_has_no_retake_date(self, passed_result, policy):
        history = AttemptHistory(attempts_used=1, last_attempt_at=LAST_ATTEMPT)

        guidance = build_retake_guidance(passed_result, history, policy)

        assert guidance.can_retake_at is None
        assert guidance.attempts_remaining == 2
        assert guidance.weak_categories == []

    def test_unknown_last_attempt_has_no_retake_date(self, failed_result, policy):
        guidance = build_retake_guidance(failed_result, AttemptHistory(attempts_used=1), policy)
        assert guidance.can_retake_at is None
        assert not guidance.terminal

    def test_zero_cooldown_allows_immediate_retake(self, failed_result):
        policy = ExamConfig(cooldown_days=0)
        history = AttemptHistory(attempts_used=1, last_attempt_at=LAST_ATTEMPT)
        assert build_retake_guidance(failed_result, history, policy).can_retake_at == LAST_ATTEMPT

    def test_result_is_not_mutated(self, failed_result, policy):
        before = failed_result.model_dump()
        build_retake_guidance(failed_result, AttemptHistory(attempts_used=1, last_attempt_at=LAST_ATTEMPT), policy)
        assert failed_result.model_dump() == before

    def test_result_is_frozen(self, failed_result):
        with pytest.raises(ValidationError):
            failed_result.passed = True


class TestWeakCategories:

    def test_categories_below_threshold(self, ten_questions):
        # Regulations: 1,4,7,10  Pedagogy: 2,5,8  Assessment: 3,6,9
        answers = {1: "a", 4: "a", 7: "a", 10: "a", 2: "a", 5: "a", 3: "a"}
        result = score_exam(ten_questions, answers, pass_threshold=70)

        assert weak_categories(result) == ["Pedagogy", "Assessment"]
