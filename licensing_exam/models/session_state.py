"""
models/session_state.py

시험 세션 설정과 상태 스냅샷 모델.
상태는 phase 필드로 구분되는 태그드 유니온 — 네 가지 변형은 서로 배타적이다.
UI 코드 없음.
"""

from enum import Enum
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, Field

import config
from licensing_exam.models.result_model import ExamResult


class ExamPhase(str, Enum):
    INSTRUCTIONS = "instructions"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    COMPLETED = "completed"


class ExamConfig(BaseModel):
    """
    시험 1회 응시에 적용되는 설정.

    Attributes:
        duration_seconds: 시험 제한 시간 (초). 0보다 커야 한다.
        pass_threshold:   합격 기준 점수 (0 ~ 100, 이상이면 합격).
        max_attempts:     응시 가능 최대 횟수.
        cooldown_days:    불합격 후 재응시까지 대기 일수.
    """

    duration_seconds: int = Field(
        default=config.EXAM_DURATION_SECONDS,
        gt=0,
        description="시험 제한 시간 (초)"
    )
    pass_threshold: int = Field(
        default=config.PASS_THRESHOLD,
        ge=0,
        le=100,
        description="합격 기준 점수 (%)"
    )
    max_attempts: int = Field(
        default=config.MAX_ATTEMPTS,
        ge=1,
        description="최대 응시 횟수"
    )
    cooldown_days: int = Field(
        default=config.COOLDOWN_DAYS,
        ge=0,
        description="불합격 후 재응시 대기 일수"
    )

    model_config = {"frozen": True}


# ── 상태 스냅샷 (태그드 유니온) ──────────────────────────────────────────────

class Instructions(BaseModel):
    phase: Literal[ExamPhase.INSTRUCTIONS] = ExamPhase.INSTRUCTIONS

    model_config = {"frozen": True}


class InProgress(BaseModel):
    phase: Literal[ExamPhase.IN_PROGRESS] = ExamPhase.IN_PROGRESS
    current_index: int = Field(..., ge=0, description="현재 문제 인덱스 (0-based)")
    remaining_seconds: int = Field(..., ge=0, description="남은 시간 (초)")
    paused: bool = Field(default=False, description="타이머 일시정지 여부")

    model_config = {"frozen": True}


class Review(BaseModel):
    """제출 전 전체 답안 검토 화면. 타이머는 계속 흐른다."""

    phase: Literal[ExamPhase.REVIEW] = ExamPhase.REVIEW
    current_index: int = Field(..., ge=0)
    remaining_seconds: int = Field(..., ge=0)
    paused: bool = False

    model_config = {"frozen": True}


class Completed(BaseModel):
    phase: Literal[ExamPhase.COMPLETED] = ExamPhase.COMPLETED
    result: ExamResult

    model_config = {"frozen": True}


SessionState = Annotated[
    Union[Instructions, InProgress, Review, Completed],
    Field(discriminator="phase"),
]


class ReviewSummary(BaseModel):
    """검토 화면용 진행 요약. 인덱스는 모두 0-based."""

    total: int
    answered: int
    unanswered: int
    flagged_indices: List[int] = Field(default_factory=list)
    unanswered_indices: List[int] = Field(default_factory=list)

    model_config = {"frozen": True}
