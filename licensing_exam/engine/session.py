"""
engine/session.py

시험 세션 컨트롤러 — 답안지, 플래그, 네비게이터, 타이머를 소유하는 유일한 상태 보유자.

상태 전이:
  Instructions --start--> InProgress --enter_review--> Review
  Review --answer / toggle_flag / 이동 / leave_review--> InProgress
  InProgress | Review --submit 또는 시간 만료--> Completed (종료 상태)

모든 변경은 동기적으로 실행된다. 제출과 시간 만료가 거의 동시에 도착해도
종료 전이는 한 번만 일어나며 채점기도 한 번만 호출된다.
"""

import logging
from typing import Callable, Dict, FrozenSet, Iterable, Mapping, Optional, Union

from pydantic import ValidationError

from licensing_exam.engine.navigator import Navigator
from licensing_exam.engine.timer import CountdownTimer
from licensing_exam.errors import ConfigurationError, InvalidSelection, InvalidTransition
from licensing_exam.models.question_model import Question, QuestionSet
from licensing_exam.models.result_model import ExamResult
from licensing_exam.models.session_state import (
    Completed,
    ExamConfig,
    ExamPhase,
    InProgress,
    Instructions,
    Review,
    ReviewSummary,
    SessionState,
)
from licensing_exam.services.exam_service import score_exam

logger = logging.getLogger(__name__)

Scorer = Callable[[Iterable[Question], Mapping[int, str], int], ExamResult]

_ACTIVE_PHASES = (ExamPhase.IN_PROGRESS, ExamPhase.REVIEW)


class ExamSession:
    """
    시험 1회 응시 세션. 응시마다 새로 만들고 재사용하지 않는다.

    Args:
        questions: 문제 세트 (QuestionSet 또는 Question 시퀀스). 읽기 전용으로 사용.
        timer:     주입 가능한 타이머. 기본값은 tick 구동 CountdownTimer.
        scorer:    채점 함수. 기본값은 score_exam.

    Raises:
        ConfigurationError: 문제 세트가 유효하지 않은 경우 (ID 중복 등).
    """

    def __init__(
        self,
        questions: Union[QuestionSet, Iterable[Question]],
        *,
        timer: Optional[CountdownTimer] = None,
        scorer: Scorer = score_exam,
    ) -> None:
        if isinstance(questions, QuestionSet):
            self._questions = questions
        else:
            try:
                self._questions = QuestionSet(questions=list(questions))
            except ValidationError as e:
                raise ConfigurationError(f"문제 세트가 올바르지 않습니다: {e}") from e

        self._timer = timer if timer is not None else CountdownTimer()
        self._scorer = scorer

        self._phase = ExamPhase.INSTRUCTIONS
        self._config: Optional[ExamConfig] = None
        self._navigator: Optional[Navigator] = None
        self._answers: Dict[int, str] = {}
        self._flags: set = set()
        self._result: Optional[ExamResult] = None
        self._submitted_by: Optional[str] = None

    # ── 조회 ──────────────────────────────────────────────────────────────

    @property
    def phase(self) -> ExamPhase:
        return self._phase

    @property
    def state(self) -> SessionState:
        """현재 상태의 불변 스냅샷."""
        if self._phase is ExamPhase.INSTRUCTIONS:
            return Instructions()
        if self._phase is ExamPhase.COMPLETED:
            return Completed(result=self._result)

        variant = InProgress if self._phase is ExamPhase.IN_PROGRESS else Review
        return variant(
            current_index=self._navigator.current_index,
            remaining_seconds=self._timer.remaining_seconds,
            paused=self._timer.is_paused,
        )

    @property
    def questions(self) -> QuestionSet:
        return self._questions

    @property
    def config(self) -> Optional[ExamConfig]:
        return self._config

    @property
    def answers(self) -> Dict[int, str]:
        return dict(self._answers)

    @property
    def flags(self) -> FrozenSet[int]:
        return frozenset(self._flags)

    @property
    def current_index(self) -> Optional[int]:
        return self._navigator.current_index if self._navigator else None

    @property
    def current_question(self) -> Optional[Question]:
        if self._navigator is None:
            return None
        return self._questions[self._navigator.current_index]

    @property
    def remaining_seconds(self) -> int:
        return self._timer.remaining_seconds

    @property
    def result(self) -> Optional[ExamResult]:
        return self._result

    @property
    def is_completed(self) -> bool:
        return self._phase is ExamPhase.COMPLETED

    @property
    def submitted_by(self) -> Optional[str]:
        """'manual' 또는 'timer'. 제출 전에는 None."""
        return self._submitted_by

    @property
    def stopped_at(self) -> Optional[float]:
        """타이머 시계 기준 시험 종료 시각. 시간 만료라면 실제로 0 이 된 시각."""
        return self._timer.stopped_at

    def summary(self) -> ReviewSummary:
        """답안 검토 화면용 요약 (응답/미응답 수, 플래그 문항 위치)."""
        flagged, unanswered = [], []
        for idx, q in enumerate(self._questions):
            if q.id in self._flags:
                flagged.append(idx)
            if q.id not in self._answers:
                unanswered.append(idx)
        return ReviewSummary(
            total=len(self._questions),
            answered=len(self._questions) - len(unanswered),
            unanswered=len(unanswered),
            flagged_indices=flagged,
            unanswered_indices=unanswered,
        )

    # ── 시작 ──────────────────────────────────────────────────────────────

    def start(self, exam_config: Union[ExamConfig, Mapping, None] = None) -> SessionState:
        """
        시험을 시작한다. Instructions 단계에서만 가능.

        Raises:
            InvalidTransition:  이미 시작된 세션.
            ConfigurationError: 빈 문제 세트, 0 이하의 시험 시간, 범위 밖 합격 기준.
        """
        if self._phase is not ExamPhase.INSTRUCTIONS:
            raise InvalidTransition(f"이미 시작된 시험입니다 (현재 단계: {self._phase.value}).")

        if exam_config is None:
            exam_config = ExamConfig()
        elif not isinstance(exam_config, ExamConfig):
            try:
                exam_config = ExamConfig.model_validate(exam_config)
            except ValidationError as e:
                raise ConfigurationError(f"시험 설정이 올바르지 않습니다: {e}") from e

        if len(self._questions) == 0:
            raise ConfigurationError("문제 세트가 비어 있습니다.")

        try:
            self._timer.start(exam_config.duration_seconds)
        except (RuntimeError, ValueError) as e:
            raise ConfigurationError(f"타이머를 시작할 수 없습니다: {e}") from e
        self._timer.on_expire(self._on_timer_expired)

        self._config = exam_config
        self._navigator = Navigator(len(self._questions))
        self._answers = {}
        self._flags = set()
        self._phase = ExamPhase.IN_PROGRESS

        logger.info(
            f"시험 시작: 문항 {len(self._questions)}개, 제한 시간 {exam_config.duration_seconds}초, "
            f"합격 기준 {exam_config.pass_threshold}점"
        )
        return self.state

    # ── 답안 / 플래그 ─────────────────────────────────────────────────────

    def answer(self, question_id: int, option_id: str) -> None:
        """
        답안을 저장한다. 같은 문제의 이전 답안은 덮어쓴다.
        Review 단계에서 호출하면 InProgress 로 돌아간다.

        Raises:
            InvalidSelection: 모르는 문제 ID 또는 해당 문제에 없는 보기 ID (기존 답안 유지).
        """
        self._require_active("답안 저장")
        question = self._resolve_question(question_id)
        if not isinstance(option_id, str) or not question.has_option(option_id):
            raise InvalidSelection(
                f"문제 {question.id}에 보기 '{option_id}'가 없습니다 (가능: {question.option_ids})."
            )
        self._answers[question.id] = option_id
        self._resume_from_review()

    def clear_answer(self, question_id: int) -> None:
        """답안 선택 해제. 답하지 않은 문제라면 아무 일도 없다."""
        self._require_active("답안 해제")
        question = self._resolve_question(question_id)
        self._answers.pop(question.id, None)
        self._resume_from_review()

    def toggle_flag(self, question_id: int) -> bool:
        """검토 표시를 켜고 끈다. 채점과 타이머에는 영향 없음. 변경 후 표시 여부를 반환."""
        self._require_active("검토 표시")
        question = self._resolve_question(question_id)
        if question.id in self._flags:
            self._flags.discard(question.id)
        else:
            self._flags.add(question.id)
        self._resume_from_review()
        return question.id in self._flags

    # ── 이동 ──────────────────────────────────────────────────────────────

    def next(self) -> int:
        self._require_active("문제 이동")
        index = self._navigator.next()
        self._resume_from_review()
        return index

    def previous(self) -> int:
        self._require_active("문제 이동")
        index = self._navigator.previous()
        self._resume_from_review()
        return index

    def go_to(self, index: int) -> int:
        """
        Raises:
            InvalidNavigation: 범위 밖 인덱스. 커서와 단계 모두 변하지 않는다.
        """
        self._require_active("문제 이동")
        new_index = self._navigator.go_to(index)
        self._resume_from_review()
        return new_index

    # ── 검토 / 일시정지 ───────────────────────────────────────────────────

    def enter_review(self) -> SessionState:
        """InProgress -> Review. 타이머는 계속 흐른다."""
        self._require_active("검토 화면 진입")
        if self._phase is ExamPhase.IN_PROGRESS:
            self._phase = ExamPhase.REVIEW
            logger.info(f"검토 화면 진입: 남은 시간 {self._timer.remaining_seconds}초")
        return self.state

    def leave_review(self) -> SessionState:
        """Review -> InProgress (시험 계속)."""
        self._require_active("시험 계속")
        self._resume_from_review()
        return self.state

    def pause(self) -> None:
        self._require_active("일시정지")
        self._timer.pause()

    def resume(self) -> None:
        self._require_active("재개")
        self._timer.resume()

    def sync_clock(self) -> None:
        """실시간 타이머를 현재 시각에 맞춘다. 시간이 다 됐으면 여기서 자동 제출된다."""
        if self._phase in _ACTIVE_PHASES:
            self._timer.sync()

    # ── 제출 ──────────────────────────────────────────────────────────────

    def submit(self) -> ExamResult:
        """
        최종 제출. 채점기를 정확히 한 번 호출한 뒤 타이머를 취소하고 Completed 로 전이.

        이미 Completed 라면 아무 것도 하지 않고 최초의 결과 객체를 그대로 반환한다
        (사용자 제출과 시간 만료가 동시에 도착하는 경우).

        Raises:
            InvalidTransition: 아직 시작하지 않은 시험.
        """
        if self._phase is ExamPhase.COMPLETED:
            logger.debug("이미 제출된 시험: 중복 제출 무시")
            return self._result
        self._require_active("제출")
        return self._complete("manual")

    def _on_timer_expired(self) -> None:
        if self._phase not in _ACTIVE_PHASES:
            logger.debug(f"시간 만료 알림 무시 (현재 단계: {self._phase.value})")
            return
        logger.info("시간 만료: 자동 제출")
        self._complete("timer")

    def _complete(self, trigger: str) -> ExamResult:
        # 채점이 실패하면 세션과 타이머는 진행 상태 그대로 남는다
        result = self._scorer(self._questions.questions, dict(self._answers), self._config.pass_threshold)
        self._timer.cancel()
        self._result = result
        self._submitted_by = trigger
        self._phase = ExamPhase.COMPLETED
        logger.info(
            f"시험 제출 ({trigger}): {result.correct_count}/{result.total_count} 정답, "
            f"{result.score_percent}점, {'합격' if result.passed else '불합격'}"
        )
        return result

    # ── 내부 헬퍼 ─────────────────────────────────────────────────────────

    def _require_active(self, action: str) -> None:
        if self._phase not in _ACTIVE_PHASES:
            if self._phase is ExamPhase.COMPLETED:
                raise InvalidTransition(f"이미 제출된 시험입니다: {action} 불가")
            raise InvalidTransition(f"시험이 시작되지 않았습니다: {action} 불가")

    def _resolve_question(self, question_id: int) -> Question:
        try:
            question = self._questions.get(question_id)
        except TypeError:
            question = None
        if question is None:
            raise InvalidSelection(f"문제 ID {question_id!r}를 찾을 수 없습니다.")
        return question

    def _resume_from_review(self) -> None:
        if self._phase is ExamPhase.REVIEW:
            self._phase = ExamPhase.IN_PROGRESS
