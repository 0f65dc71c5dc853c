"""
models/result_model.py

채점 결과와 재응시 안내 모델.
ExamResult는 불변 값이며 호스트 애플리케이션이 저장/표시에 사용한다.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, computed_field, model_validator


def percent_half_up(correct: int, total: int) -> int:
    """
    100 * correct / total 을 정수로 반올림 (0.5는 올림).

    내장 round()는 은행가 반올림이라 사용하지 않는다.
    """
    if total <= 0:
        raise ValueError("total은 0보다 커야 합니다.")
    ratio = Decimal(100 * correct) / Decimal(total)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class CategoryScore(BaseModel):
    correct: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)

    model_config = {"frozen": True}

    @computed_field
    @property
    def percent(self) -> int:
        return percent_half_up(self.correct, self.total) if self.total else 0

    @model_validator(mode='after')
    def validate_counts(self) -> 'CategoryScore':
        if self.correct > self.total:
            raise ValueError(f"정답 수({self.correct})가 문항 수({self.total})보다 클 수 없습니다.")
        return self


class ExamResult(BaseModel):
    """
    시험 1회 응시의 최종 채점 결과.

    Attributes:
        score_percent:    100점 만점 환산 점수 (정수, 0.5 올림).
        correct_count:    정답 수.
        total_count:      전체 문항 수.
        unanswered_count: 미응답 문항 수.
        passed:           score_percent >= pass_threshold.
        pass_threshold:   채점에 사용된 합격 기준.
        category_scores:  카테고리별 {correct, total}. 문제 세트 등장 순서.
    """

    score_percent: int = Field(..., ge=0, le=100)
    correct_count: int = Field(..., ge=0)
    total_count: int = Field(..., gt=0)
    unanswered_count: int = Field(default=0, ge=0)
    passed: bool
    pass_threshold: int = Field(..., ge=0, le=100)
    category_scores: Dict[str, CategoryScore] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @model_validator(mode='after')
    def validate_consistency(self) -> 'ExamResult':
        if self.correct_count > self.total_count:
            raise ValueError("정답 수가 전체 문항 수보다 클 수 없습니다.")
        if self.unanswered_count > self.total_count - self.correct_count:
            raise ValueError("미응답 수가 오답 가능 문항 수를 초과합니다.")
        if sum(c.total for c in self.category_scores.values()) != self.total_count:
            raise ValueError("카테고리별 문항 수 합계가 전체 문항 수와 다릅니다.")
        if sum(c.correct for c in self.category_scores.values()) != self.correct_count:
            raise ValueError("카테고리별 정답 수 합계가 전체 정답 수와 다릅니다.")
        if self.score_percent != percent_half_up(self.correct_count, self.total_count):
            raise ValueError("점수가 정답 비율과 일치하지 않습니다.")
        if self.passed != (self.score_percent >= self.pass_threshold):
            raise ValueError("합격 여부가 합격 기준과 일치하지 않습니다.")
        return self

    @property
    def incorrect_count(self) -> int:
        return self.total_count - self.correct_count - self.unanswered_count


class AttemptHistory(BaseModel):
    """
    외부에서 전달되는 응시 이력.

    attempts_used 는 방금 채점된 응시를 포함한 누적 응시 횟수.
    """

    attempts_used: int = Field(default=1, ge=0)
    last_attempt_at: Optional[datetime] = None


class RetakeGuidance(BaseModel):
    attempts_remaining: int = Field(..., ge=0)
    can_retake_at: Optional[datetime] = None
    terminal: bool = Field(..., description="True이면 더 이상 응시 불가")
    weak_categories: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}
