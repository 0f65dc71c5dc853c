"""
services/exam_service.py

시험 채점 비즈니스 로직.
순수 Python 함수로 구성 — UI 코드, 전역 상태 변경 없음.
같은 문제 세트와 답안지에 대해 항상 같은 결과를 반환한다 (자격 판정 감사 가능성).
"""

from typing import Dict, Iterable, List, Mapping

from licensing_exam.models.question_model import Question
from licensing_exam.models.result_model import CategoryScore, ExamResult, percent_half_up


def score_exam(
    questions: Iterable[Question],
    user_answers: Mapping[int, str],
    pass_threshold: int,
) -> ExamResult:
    """
    사용자 답안을 채점하여 ExamResult 를 반환한다.

    정답 판정 기준: user_answers.get(question.id) == question.correct_option_id
    응답하지 않은 문제(키 없음)는 오답으로 처리하며 예외를 발생시키지 않는다.

    Args:
        questions:      채점 대상 문제 (출제 순서).
        user_answers:   사용자 답안지. {question.id: 선택한 보기 ID}
        pass_threshold: 합격 기준 점수 (0 ~ 100).

    Returns:
        카테고리별 집계가 포함된 ExamResult.
        카테고리 순서는 문제 세트에서 처음 등장한 순서.

    Raises:
        ValueError: 문제가 하나도 없는 경우 (세션 시작 단계에서 이미 걸러진다).
    """
    correct_count = 0
    total_count = 0
    unanswered_count = 0
    buckets: Dict[str, Dict[str, int]] = {}

    for q in questions:
        bucket = buckets.setdefault(q.category, {"correct": 0, "total": 0})
        bucket["total"] += 1
        total_count += 1

        user_ans = user_answers.get(q.id)
        if user_ans is None:
            unanswered_count += 1
        elif user_ans == q.correct_option_id:
            bucket["correct"] += 1
            correct_count += 1

    if total_count == 0:
        raise ValueError("채점할 문제가 없습니다.")

    score = percent_half_up(correct_count, total_count)
    return ExamResult(
        score_percent=score,
        correct_count=correct_count,
        total_count=total_count,
        unanswered_count=unanswered_count,
        passed=is_passed(score, pass_threshold),
        pass_threshold=pass_threshold,
        category_scores={cat: CategoryScore(**b) for cat, b in buckets.items()},
    )


def get_incorrect_questions(
    questions: Iterable[Question],
    user_answers: Mapping[int, str],
) -> List[Question]:
    """
    오답 문제 리스트를 반환한다 (오답 노트용).

    오답 판정 기준:
    - 사용자가 선택한 답이 정답과 다른 경우
    - 사용자가 아예 응답하지 않은 경우 (미응답 포함)

    Returns:
        오답 Question 리스트. 원본 순서 유지.
    """
    return [q for q in questions if user_answers.get(q.id) != q.correct_option_id]


def is_passed(score_percent: int, pass_threshold: int) -> bool:
    """
    합격 여부를 반환한다.

    Returns:
        score_percent >= pass_threshold 이면 True, 아니면 False.
    """
    return score_percent >= pass_threshold
