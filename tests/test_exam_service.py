"""
Unit tests for the pure scoring functions.
"""

import random

import pytest

from licensing_exam.models.result_model import percent_half_up
from licensing_exam.services.exam_service import get_incorrect_questions, is_passed, score_exam

from conftest import make_question


class TestScoreExam:

    def test_scenario_a_seven_of_ten_passes_at_seventy(self, ten_questions):
        answers = {qid: "a" for qid in range(1, 8)}
        answers.update({8: "b", 9: "c"})

        result = score_exam(ten_questions, answers, pass_threshold=70)

        assert result.score_percent == 70
        assert result.correct_count == 7
        assert result.total_count == 10
        assert result.unanswered_count == 1
        assert result.incorrect_count == 2
        assert result.passed is True

    def test_scenario_b_empty_answers(self, ten_questions):
        result = score_exam(ten_questions, {}, pass_threshold=70)

        assert result.score_percent == 0
        assert result.passed is False
        assert result.unanswered_count == 10
        assert all(c.correct == 0 for c in result.category_scores.values())

    def test_category_breakdown_in_first_appearance_order(self, ten_questions):
        answers = {1: "a", 2: "a", 4: "a"}

        result = score_exam(ten_questions, answers, pass_threshold=70)

        assert list(result.category_scores) == ["Regulations", "Pedagogy", "Assessment"]
        assert result.category_scores["Regulations"].total == 4
        assert result.category_scores["Regulations"].correct == 2
        assert result.category_scores["Pedagogy"].correct == 1
        assert result.category_scores["Assessment"].correct == 0

    def test_unknown_answer_keys_are_ignored(self, ten_questions):
        result = score_exam(ten_questions, {1: "a", 999: "a"}, pass_threshold=0)
        assert result.correct_count == 1

    @pytest.mark.parametrize("correct, total, expected", [
        (1, 8, 13),    # 12.5 -> 13
        (5, 8, 63),    # 62.5 -> 63
        (1, 3, 33),
        (2, 3, 67),
        (1, 200, 1),   # 0.5 -> 1
        (0, 7, 0),
        (7, 7, 100),
    ])
    def test_percent_rounds_half_up(self, correct, total, expected):
        questions = [make_question(i) for i in range(1, total + 1)]
        answers = {i: "a" for i in range(1, correct + 1)}

        result = score_exam(questions, answers, pass_threshold=50)

        assert result.score_percent == expected
        assert percent_half_up(correct, total) == expected

    @pytest.mark.parametrize("threshold", [0, 69, 70, 71, 100])
    def test_passed_iff_score_meets_threshold(self, ten_questions, threshold):
        answers = {qid: "a" for qid in range(1, 8)}
        result = score_exam(ten_questions, answers, pass_threshold=threshold)
        assert result.passed == (result.score_percent >= threshold)

    def test_invariants_hold_for_random_answer_maps(self, ten_questions):
        rng = random.Random(1234)
        for _ in range(50):
            answers = {
                q.id: rng.choice("abcd")
                for q in ten_questions
                if rng.random() < 0.8
            }
            result = score_exam(ten_questions, answers, pass_threshold=60)

            assert 0 <= result.correct_count <= result.total_count
            assert result.score_percent == percent_half_up(result.correct_count, result.total_count)
            assert sum(c.total for c in result.category_scores.values()) == result.total_count
            assert sum(c.correct for c in result.category_scores.values()) == result.correct_count

    def test_deterministic(self, ten_questions):
        answers = {1: "a", 5: "b", 6: "a"}
        assert score_exam(ten_questions, answers, 70) == score_exam(ten_questions, answers, 70)

    def test_does_not_mutate_answers(self, ten_questions):
        answers = {1: "a"}
        score_exam(ten_questions, answers, 70)
        assert answers == {1: "a"}

    def test_empty_question_list_raises(self):
        with pytest.raises(ValueError):
            score_exam([], {}, 70)


class TestIncorrectQuestions:

    def test_wrong_and_unanswered_in_original_order(self, ten_questions):
        answers = {qid: "a" for qid in range(1, 11)}
        answers[3] = "b"
        del answers[7]

        incorrect = get_incorrect_questions(ten_questions, answers)

        assert [q.id for q in incorrect] == [3, 7]


class TestIsPassed:

    def test_boundary(self):
        assert is_passed(70, 70)
        assert not is_passed(69, 70)
        assert is_passed(0, 0)
