"""
services/result_reporter.py

채점 결과 + 외부 응시 이력 → 재응시 안내.
채점기 출력 위에 얹는 응시 정책이며, ExamResult 자체는 변경하지 않는다.
"""

import logging
from datetime import timedelta
from typing import List

from licensing_exam.models.result_model import AttemptHistory, ExamResult, RetakeGuidance
from licensing_exam.models.session_state import ExamConfig

logger = logging.getLogger(__name__)


def build_retake_guidance(
    result: ExamResult,
    history: AttemptHistory,
    exam_config: ExamConfig,
) -> RetakeGuidance:
    """
    재응시 가능 여부와 시점을 계산한다.

    - attempts_remaining = max_attempts - attempts_used (0 미만은 0)
    - 남은 횟수가 0이면 terminal (더 이상 응시 불가)
    - 불합격이고 남은 횟수가 있으면 can_retake_at = last_attempt_at + cooldown_days
      (마지막 응시 시각을 모르면 None)
    - 합격이면 재응시 시점은 없다
    """
    attempts_remaining = max(0, exam_config.max_attempts - history.attempts_used)
    terminal = attempts_remaining == 0

    can_retake_at = None
    if not result.passed and not terminal and history.last_attempt_at is not None:
        can_retake_at = history.last_attempt_at + timedelta(days=exam_config.cooldown_days)

    guidance = RetakeGuidance(
        attempts_remaining=attempts_remaining,
        can_retake_at=can_retake_at,
        terminal=terminal,
        weak_categories=weak_categories(result),
    )
    logger.info(
        f"재응시 안내: passed={result.passed} remaining={attempts_remaining} "
        f"terminal={terminal} retake_at={can_retake_at}"
    )
    return guidance


def weak_categories(result: ExamResult) -> List[str]:
    """카테고리 정답률이 합격 기준에 못 미치는 카테고리 (결과의 카테고리 순서 유지)."""
    return [
        category
        for category, score in result.category_scores.items()
        if score.percent < result.pass_threshold
    ]
