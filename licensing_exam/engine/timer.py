"""
engine/timer.py

시험 제한 시간 카운트다운.

CountdownTimer 는 tick() 호출로만 줄어드는 결정적 타이머 — 테스트와 이벤트 루프용.
WallClockTimer 는 사용자 상호작용 시(sync 호출 시) 경과한 실제 시간을
정수 tick 으로 환산해 전달한다. 일시정지 구간은 경과 시간에서 제외된다.
"""

import logging
import time
from typing import Callable, List, Optional

import config

logger = logging.getLogger(__name__)

ExpiryCallback = Callable[[], None]


class CountdownTimer:
    """
    단일 카운트다운 시계.

    - pause 중에는 tick 이 무시되고, resume 시 멈춘 지점부터 이어서 줄어든다.
    - cancel 이후에는 영구 정지. 이후 도착하는 tick 은 무시.
    - 남은 시간이 처음 0 이 되는 순간 만료 콜백을 정확히 한 번 호출한다.
    """

    def __init__(self) -> None:
        self._remaining: int = 0
        self._started = False
        self._paused = False
        self._cancelled = False
        self._expired = False
        self._callbacks: List[ExpiryCallback] = []

    # ── 상태 조회 ─────────────────────────────────────────────────────────

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def is_running(self) -> bool:
        return self._started and not (self._paused or self._cancelled or self._expired)

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    @property
    def has_expired(self) -> bool:
        return self._expired

    @property
    def stopped_at(self) -> Optional[float]:
        """카운트다운이 끝난 시계 시각. 실제 시계가 없는 tick 타이머는 항상 None."""
        return None

    # ── 제어 ──────────────────────────────────────────────────────────────

    def on_expire(self, callback: ExpiryCallback) -> None:
        self._callbacks.append(callback)

    def start(self, seconds: int) -> None:
        if self._started:
            raise RuntimeError("타이머는 한 번만 시작할 수 있습니다.")
        if seconds <= 0:
            raise ValueError(f"시작 시간은 0보다 커야 합니다: {seconds}")
        self._remaining = int(seconds)
        self._started = True

    def pause(self) -> None:
        if self.is_running:
            self._paused = True

    def resume(self) -> None:
        if self._paused and not self._cancelled:
            self._paused = False

    def cancel(self) -> None:
        self._cancelled = True
        self._paused = False

    def sync(self) -> int:
        """외부 시계와 동기화. tick 구동 타이머에서는 아무 일도 하지 않는다."""
        return 0

    def tick(self, units: int = 1) -> None:
        """
        남은 시간을 units 만큼 줄인다.

        정지/취소/만료 상태에서 도착한 tick 은 조용히 무시한다
        (늦게 도착한 tick 이 완료된 세션을 되살리지 않도록).
        """
        if units <= 0:
            return
        if not self.is_running:
            logger.debug(
                f"무시된 tick: started={self._started} paused={self._paused} "
                f"cancelled={self._cancelled} expired={self._expired}"
            )
            return

        self._remaining = max(0, self._remaining - units)
        if self._remaining == 0:
            self._expire()

    def _expire(self) -> None:
        self._expired = True
        logger.info("시험 시간이 종료되었습니다.")
        for callback in list(self._callbacks):
            callback()


class WallClockTimer(CountdownTimer):
    """
    실제 경과 시간 기반 타이머.

    백그라운드 스레드 없이, sync() 가 호출될 때마다 마지막 동기화 이후
    경과한 정수 초만큼 tick 을 전달한다. 소수점 이하 잔여 시간은 다음 sync 로 이월.

    만료가 늦게 감지되더라도 stopped_at 은 실제로 0 이 된 시각을 가리킨다.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        super().__init__()
        self._clock = clock
        self._anchor: Optional[float] = None
        self._carry: float = 0.0
        self._stopped_at: Optional[float] = None

    @property
    def stopped_at(self) -> Optional[float]:
        return self._stopped_at

    def start(self, seconds: int) -> None:
        super().start(seconds)
        self._anchor = self._clock()

    def sync(self) -> int:
        if self._anchor is None or not self.is_running:
            return 0
        now = self._clock()
        whole = int(now - self._anchor)
        if whole <= 0:
            return 0
        if whole >= self._remaining:
            self._stopped_at = self._anchor + self._remaining
        self._anchor += whole
        self.tick(whole)
        return whole

    def cancel(self) -> None:
        if self._started and self._stopped_at is None:
            self._stopped_at = self._clock()
        super().cancel()

    def pause(self) -> None:
        # 정지 직전까지의 경과분을 먼저 반영하고, 1초 미만 잔여분은 보관
        self.sync()
        if self.is_running and self._anchor is not None:
            self._carry = self._clock() - self._anchor
        super().pause()

    def resume(self) -> None:
        was_paused = self.is_paused
        super().resume()
        if was_paused and self.is_running:
            self._anchor = self._clock() - self._carry
            self._carry = 0.0


def format_time(seconds: int) -> str:
    """남은 시간을 HH:MM:SS 문자열로."""
    seconds = max(0, int(seconds))
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def is_time_warning(seconds: int, threshold: int = config.TIME_WARNING_SECONDS) -> bool:
    """경고 표시 구간 여부 (기본: 10분 미만)."""
    return seconds < threshold
