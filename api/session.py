"""
api/session.py — 멀티유저 인메모리 세션 (쿠키 기반)

각 사용자에게 UUID 세션 ID를 발급하고, 세션별로 독립된 시험 세션과 응시 이력을 유지.
TTL 경과 시 자동 만료. 응시 이력의 영구 저장은 호스트 바깥의 책임이다.
"""

import logging
import threading
import time
import uuid
from datetime import datetime
from typing import Any

from api.config import SESSION_TTL
from licensing_exam.engine.session import ExamSession
from licensing_exam.models.result_model import AttemptHistory
from licensing_exam.services.result_reporter import build_retake_guidance

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_sessions: dict[str, dict[str, Any]] = {}
_timestamps: dict[str, float] = {}


def _new_state() -> dict[str, Any]:
    return {
        "exam": None,
        "attempt_recorded": False,
        "attempts_used": 0,
        "last_attempt_at": None,
        "can_retake_at": None,
    }


def create_session() -> str:
    """새 세션을 생성하고 세션 ID를 반환."""
    sid = uuid.uuid4().hex
    with _lock:
        _sessions[sid] = _new_state()
        _timestamps[sid] = time.time()
    return sid


def get_session(sid: str) -> dict[str, Any] | None:
    """세션 ID로 세션 데이터를 가져옴. 만료되었거나 없으면 None."""
    with _lock:
        if sid not in _sessions:
            return None
        if time.time() - _timestamps[sid] > SESSION_TTL:
            del _sessions[sid]
            del _timestamps[sid]
            return None
        _timestamps[sid] = time.time()  # 접근 시 갱신
        return _sessions[sid]


def get(sid: str, key: str, default=None):
    """세션에서 값 읽기."""
    session = get_session(sid)
    if session is None:
        return default
    return session.get(key, default)


def put(sid: str, key: str, value) -> None:
    """세션에 값 쓰기."""
    with _lock:
        if sid in _sessions:
            _sessions[sid][key] = value
            _timestamps[sid] = time.time()


# ── 응시 이력 ────────────────────────────────────────────────────────────────

def begin_attempt(sid: str, exam: ExamSession) -> None:
    """새로 시작한 시험을 세션에 붙인다. 이력 기록은 종료 시점에 한 번."""
    with _lock:
        if sid in _sessions:
            _sessions[sid]["exam"] = exam
            _sessions[sid]["attempt_recorded"] = False
            _timestamps[sid] = time.time()


def history(sid: str) -> AttemptHistory:
    return AttemptHistory(
        attempts_used=get(sid, "attempts_used", 0),
        last_attempt_at=get(sid, "last_attempt_at"),
    )


def record_attempt(sid: str, exam: ExamSession, completed_at: datetime) -> bool:
    """
    종료된 시험을 응시 이력에 반영한다. 시험 하나당 한 번만 센다.

    Args:
        completed_at: 시험이 실제로 끝난 시각 (UTC). 재응시 대기 기간의 기준.

    Returns:
        이번 호출에서 새로 기록했으면 True.
    """
    if not exam.is_completed:
        return False
    with _lock:
        state = _sessions.get(sid)
        if state is None or state["attempt_recorded"]:
            return False
        state["attempts_used"] += 1
        state["last_attempt_at"] = completed_at
        state["attempt_recorded"] = True
        record = AttemptHistory(attempts_used=state["attempts_used"], last_attempt_at=completed_at)

    guidance = build_retake_guidance(exam.result, record, exam.config)
    put(sid, "can_retake_at", guidance.can_retake_at)
    logger.info(f"세션 {sid[:8]}: {record.attempts_used}회차 응시 기록 (종료 {completed_at.isoformat()})")
    return True


def reset(sid: str) -> None:
    """진행 중인 시험만 초기화 (응시 이력은 유지)."""
    with _lock:
        if sid in _sessions:
            _sessions[sid]["exam"] = None
            _timestamps[sid] = time.time()


def cleanup_expired() -> int:
    """만료된 세션을 정리. 제거된 수 반환."""
    now = time.time()
    removed = 0
    with _lock:
        expired = [sid for sid, ts in _timestamps.items() if now - ts > SESSION_TTL]
        for sid in expired:
            del _sessions[sid]
            del _timestamps[sid]
            removed += 1
    return removed
