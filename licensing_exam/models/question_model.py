"""
models/question_model.py

자격 시험 문제 모델.
Pydantic v2 적용. 문제 세트는 외부에서 주입되며 엔진은 읽기 전용으로만 사용한다.
"""

import re
from typing import Annotated, Dict, List, Optional

from pydantic import AfterValidator, BaseModel, Field, field_validator, model_validator


def _normalize_identifier(value: str) -> str:
    """앞뒤 공백 제거 + 내부 연속 공백을 하나로. 빈 문자열은 거부."""
    normalized = re.sub(r"\s+", " ", value).strip()
    if not normalized:
        raise ValueError("식별자는 비어 있을 수 없습니다.")
    return normalized


# 보기 ID와 과목(카테고리)은 표시용 문자열이자 매칭 키이므로 정규화된 값만 허용
OptionId = Annotated[str, AfterValidator(_normalize_identifier)]
Category = Annotated[str, AfterValidator(_normalize_identifier)]


class Option(BaseModel):
    """객관식 보기 하나."""

    id: OptionId = Field(..., description="보기 식별자 (예: 'a', 'b')")
    text: str = Field(..., min_length=1, description="보기 내용")

    model_config = {"frozen": True}


class Question(BaseModel):
    """
    자격 시험 문제 모델.
    """
    id: int = Field(
        ...,
        description="문제 번호 (문제 세트 내 고유 식별자)"
    )
    prompt: str = Field(
        ...,
        min_length=1,
        description="발문/문제 내용"
    )
    options: List[Option] = Field(
        ...,
        description="보기 리스트 (순서 유지)"
    )
    correct_option_id: OptionId = Field(
        ...,
        description="정답 보기 ID. 반드시 options 중 하나의 id"
    )
    category: Category = Field(
        ...,
        description="역량 카테고리 (예: Regulations, Pedagogy). 채점 집계 키로만 사용"
    )
    explanation: Optional[str] = Field(
        None,
        description="해설 (오답 노트용)"
    )

    model_config = {"frozen": True}

    @field_validator('options')
    @classmethod
    def validate_options(cls, v: List[Option]) -> List[Option]:
        """
        검증 로직 1: 보기는 최소 2개 이상이고 보기 ID는 중복될 수 없다.
        """
        if len(v) < 2:
            raise ValueError("보기(options)는 최소 2개 이상의 항목이 필요합니다.")
        ids = [opt.id for opt in v]
        if len(set(ids)) != len(ids):
            raise ValueError(f"보기 ID가 중복되었습니다: {ids}")
        return v

    @model_validator(mode='after')
    def validate_correct_option(self) -> 'Question':
        """
        검증 로직 2: 정답 ID는 반드시 보기 ID 중 하나여야 한다.
        """
        if not self.has_option(self.correct_option_id):
            raise ValueError(
                f"정답('{self.correct_option_id}')이 보기 ID 목록({self.option_ids})에 존재하지 않습니다."
            )
        return self

    @property
    def option_ids(self) -> List[str]:
        return [opt.id for opt in self.options]

    def has_option(self, option_id: str) -> bool:
        return any(opt.id == option_id for opt in self.options)

    def option_text(self, option_id: str) -> Optional[str]:
        for opt in self.options:
            if opt.id == option_id:
                return opt.text
        return None


class QuestionSet(BaseModel):
    """
    순서가 있는 문제 묶음. 생성 후 변경 불가.

    빈 세트 자체는 허용한다. 빈 세트로 시험을 시작하는 것은
    ExamSession.start()에서 ConfigurationError로 거부된다.
    """

    questions: List[Question] = Field(default_factory=list, description="출제 순서대로의 문제 리스트")

    model_config = {"frozen": True}

    @field_validator('questions')
    @classmethod
    def validate_unique_ids(cls, v: List[Question]) -> List[Question]:
        ids = [q.id for q in v]
        if len(set(ids)) != len(ids):
            duplicates = sorted({qid for qid in ids if ids.count(qid) > 1})
            raise ValueError(f"문제 ID가 중복되었습니다: {duplicates}")
        return v

    def __len__(self) -> int:
        return len(self.questions)

    def __iter__(self):
        return iter(self.questions)

    def __getitem__(self, index: int) -> Question:
        return self.questions[index]

    def get(self, question_id: int) -> Optional[Question]:
        """문제 ID로 조회. 없으면 None."""
        return self._by_id().get(question_id)

    def index_of(self, question_id: int) -> int:
        """문제 ID의 0-based 위치. 없으면 ValueError."""
        for idx, q in enumerate(self.questions):
            if q.id == question_id:
                return idx
        raise ValueError(f"문제 ID {question_id}를 찾을 수 없습니다.")

    def categories(self) -> List[str]:
        """등장 순서대로의 카테고리 목록 (중복 제거)."""
        seen: Dict[str, None] = {}
        for q in self.questions:
            seen.setdefault(q.category, None)
        return list(seen)

    def _by_id(self) -> Dict[int, Question]:
        return {q.id: q for q in self.questions}
