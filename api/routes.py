"""
api/routes.py — FastAPI 엔드포인트

모든 요청은 먼저 실시간 타이머를 동기화한다. 시간이 다 된 시험은
다른 동작보다 먼저 자동 제출된다. 정답은 제출 전에는 노출하지 않는다.
"""

import logging
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

import api.session as session
from api.sample_questions import SAMPLE_QUESTIONS
from licensing_exam.engine.session import ExamSession
from licensing_exam.engine.timer import WallClockTimer, format_time, is_time_warning
from licensing_exam.errors import (
    ConfigurationError,
    ExamError,
    InvalidNavigation,
    InvalidSelection,
    InvalidTransition,
)
from licensing_exam.models.question_model import Question
from licensing_exam.models.session_state import ExamConfig
from licensing_exam.services.exam_service import get_incorrect_questions
from licensing_exam.services.result_reporter import build_retake_guidance

logger = logging.getLogger(__name__)

router = APIRouter()

# ── Pydantic request bodies ──────────────────────────────────────────────────

class StartExamBody(BaseModel):
    duration_seconds: int | None = None
    pass_threshold: int | None = None

class SaveAnswerBody(BaseModel):
    question_id: int
    option_id: str

class QuestionRefBody(BaseModel):
    question_id: int

class NavigateBody(BaseModel):
    index: int = 0


# ── 헬퍼 ─────────────────────────────────────────────────────────────────────

_STATUS_BY_ERROR = {
    ConfigurationError: 422,
    InvalidSelection: 400,
    InvalidNavigation: 400,
    InvalidTransition: 409,
}


def _http_error(e: ExamError) -> HTTPException:
    status = next((code for cls, code in _STATUS_BY_ERROR.items() if isinstance(e, cls)), 400)
    return HTTPException(status_code=status, detail=str(e))


def _sid(request: Request) -> str:
    return request.state.session_id


def _exam(request: Request) -> ExamSession:
    """현재 사용자의 시험 세션. 타이머를 동기화하고, 방금 종료됐다면 응시 이력을 기록."""
    sid = _sid(request)
    exam: ExamSession | None = session.get(sid, "exam")
    if exam is None:
        raise HTTPException(status_code=404, detail="시험 세션이 없습니다.")
    exam.sync_clock()
    _record_attempt(request, exam)
    return exam


def _completed_at(request: Request, exam: ExamSession) -> datetime:
    """
    시험이 실제로 끝난 UTC 시각.

    타이머는 요청이 올 때만 동기화되므로 만료는 늦게 감지될 수 있다.
    타이머 시계상의 종료 시각과 현재 시각의 차이만큼 거슬러 올라간다.
    """
    now = datetime.now(timezone.utc)
    stopped_at = exam.stopped_at
    if stopped_at is None:
        return now
    lag = max(0.0, request.app.state.clock() - stopped_at)
    return now - timedelta(seconds=lag)


def _record_attempt(request: Request, exam: ExamSession) -> None:
    if exam.is_completed:
        session.record_attempt(_sid(request), exam, _completed_at(request, exam))


def _question_to_dict(q: Question, reveal: bool = False) -> dict:
    d = {
        "id": q.id,
        "category": q.category,
        "prompt": q.prompt,
        "options": [opt.model_dump() for opt in q.options],
    }
    if reveal:
        d["correct_option_id"] = q.correct_option_id
        d["explanation"] = q.explanation
    return d


def _state_payload(exam: ExamSession) -> dict:
    state = exam.state.model_dump(mode="json")
    remaining = exam.remaining_seconds
    return {
        "state": state,
        "total": len(exam.questions),
        "answered_count": len(exam.answers),
        "user_answers": {str(k): v for k, v in exam.answers.items()},
        "flagged": sorted(exam.flags),
        "question_ids": [q.id for q in exam.questions],
        "time_display": format_time(remaining),
        "time_warning": is_time_warning(remaining) and not exam.is_completed,
    }


# ── 엔드포인트 ───────────────────────────────────────────────────────────────

@router.post("/api/start-exam")
async def start_exam(body: StartExamBody, request: Request):
    sid = _sid(request)
    current: ExamSession | None = session.get(sid, "exam")
    if current is not None and not current.is_completed:
        current.sync_clock()
        _record_attempt(request, current)
        if not current.is_completed:
            raise HTTPException(status_code=409, detail="진행 중인 시험이 있습니다.")

    defaults = ExamConfig()
    attempts_used = session.get(sid, "attempts_used", 0)
    if attempts_used >= defaults.max_attempts:
        raise HTTPException(status_code=403, detail="응시 가능 횟수를 모두 사용했습니다.")
    retake_at = session.get(sid, "can_retake_at")
    if retake_at is not None and datetime.now(timezone.utc) < retake_at:
        raise HTTPException(
            status_code=403,
            detail=f"재응시 대기 기간입니다. {retake_at.isoformat()} 이후 응시할 수 있습니다.",
        )

    overrides = body.model_dump(exclude_none=True)
    exam = ExamSession(SAMPLE_QUESTIONS, timer=WallClockTimer(clock=request.app.state.clock))
    try:
        exam.start({**defaults.model_dump(), **overrides})
    except ConfigurationError as e:
        raise _http_error(e)

    session.begin_attempt(sid, exam)
    logger.info(f"세션 {sid[:8]}: 시험 시작 ({attempts_used + 1}회차)")
    return {"total": len(exam.questions), "ok": True, **_state_payload(exam)}


@router.get("/api/exam-state")
async def get_exam_state(request: Request):
    return _state_payload(_exam(request))


@router.get("/api/question/{index}")
async def get_question(index: int, request: Request):
    exam = _exam(request)
    questions = exam.questions
    if not (0 <= index < len(questions)):
        raise HTTPException(status_code=404, detail="문제를 찾을 수 없습니다.")

    q = questions[index]
    d = _question_to_dict(q, reveal=exam.is_completed)
    d.update({
        "saved_answer": exam.answers.get(q.id, ""),
        "flagged": q.id in exam.flags,
        "index": index,
        "total": len(questions),
    })
    return d


@router.post("/api/save-answer")
async def save_answer(body: SaveAnswerBody, request: Request):
    exam = _exam(request)
    try:
        exam.answer(body.question_id, body.option_id)
    except ExamError as e:
        raise _http_error(e)
    return {"ok": True, "answered_count": len(exam.answers)}


@router.post("/api/clear-answer")
async def clear_answer(body: QuestionRefBody, request: Request):
    exam = _exam(request)
    try:
        exam.clear_answer(body.question_id)
    except ExamError as e:
        raise _http_error(e)
    return {"ok": True, "answered_count": len(exam.answers)}


@router.post("/api/toggle-flag")
async def toggle_flag(body: QuestionRefBody, request: Request):
    exam = _exam(request)
    try:
        flagged = exam.toggle_flag(body.question_id)
    except ExamError as e:
        raise _http_error(e)
    return {"ok": True, "flagged": flagged}


@router.post("/api/navigate")
async def navigate(body: NavigateBody, request: Request):
    exam = _exam(request)
    try:
        idx = exam.go_to(body.index)
    except ExamError as e:
        raise _http_error(e)
    return {"index": idx, "ok": True}


@router.post("/api/next")
async def next_question(request: Request):
    exam = _exam(request)
    try:
        idx = exam.next()
    except ExamError as e:
        raise _http_error(e)
    return {"index": idx, "ok": True}


@router.post("/api/previous")
async def previous_question(request: Request):
    exam = _exam(request)
    try:
        idx = exam.previous()
    except ExamError as e:
        raise _http_error(e)
    return {"index": idx, "ok": True}


@router.post("/api/review")
async def enter_review(request: Request):
    exam = _exam(request)
    try:
        exam.enter_review()
    except ExamError as e:
        raise _http_error(e)
    return _state_payload(exam)


@router.post("/api/continue")
async def continue_exam(request: Request):
    exam = _exam(request)
    try:
        exam.leave_review()
    except ExamError as e:
        raise _http_error(e)
    return _state_payload(exam)


@router.post("/api/pause")
async def pause_exam(request: Request):
    exam = _exam(request)
    try:
        exam.pause()
    except ExamError as e:
        raise _http_error(e)
    return _state_payload(exam)


@router.post("/api/resume")
async def resume_exam(request: Request):
    exam = _exam(request)
    try:
        exam.resume()
    except ExamError as e:
        raise _http_error(e)
    return _state_payload(exam)


@router.get("/api/review-summary")
async def review_summary(request: Request):
    return _exam(request).summary().model_dump()


@router.post("/api/submit-exam")
async def submit_exam(request: Request):
    exam = _exam(request)
    try:
        result = exam.submit()
    except ExamError as e:
        raise _http_error(e)
    _record_attempt(request, exam)
    return {"score": result.score_percent, "passed": result.passed, "ok": True}


@router.get("/api/results")
async def get_results(request: Request):
    sid = _sid(request)
    exam = _exam(request)
    if not exam.is_completed:
        raise HTTPException(status_code=400, detail="시험이 아직 제출되지 않았습니다.")

    result = exam.result
    guidance = build_retake_guidance(result, session.history(sid), exam.config)

    answers = exam.answers
    incorrect_data = []
    for q in get_incorrect_questions(exam.questions, answers):
        d = _question_to_dict(q, reveal=True)
        d["user_answer"] = answers.get(q.id, "")
        incorrect_data.append(d)

    return {
        "result": result.model_dump(mode="json"),
        "incorrect_count": result.incorrect_count,
        "submitted_by": exam.submitted_by,
        "guidance": guidance.model_dump(mode="json"),
        "incorrect_questions": incorrect_data,
    }


@router.post("/api/reset")
async def reset_session(request: Request):
    sid = _sid(request)
    exam: ExamSession | None = session.get(sid, "exam")
    if exam is not None:
        # 진행 중인 시험은 제출 처리해 응시 1회로 센다
        exam.sync_clock()
        if not exam.is_completed:
            exam.submit()
            logger.info(f"세션 {sid[:8]}: 진행 중 초기화 요청, 시험을 제출 처리")
        _record_attempt(request, exam)
    session.reset(sid)
    return {"ok": True}
